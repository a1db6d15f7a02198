"""
Schemas for the Relay Server

Envelopes for the realtime frames and the relay's error responses.
"""

from .events import (
    JOIN_ROOM,
    SEND_MESSAGE,
    RECEIVE_MESSAGE,
    ERROR,
    ClientEvent,
    CommentPayload,
    EventValidationError,
    JoinRoomEvent,
    ReceiveMessageEvent,
    SendMessageEvent,
    parse_client_event,
)
from .responses import create_error_response

__all__ = [
    "JOIN_ROOM",
    "SEND_MESSAGE",
    "RECEIVE_MESSAGE",
    "ERROR",
    "ClientEvent",
    "CommentPayload",
    "EventValidationError",
    "JoinRoomEvent",
    "ReceiveMessageEvent",
    "SendMessageEvent",
    "parse_client_event",
    "create_error_response",
]
