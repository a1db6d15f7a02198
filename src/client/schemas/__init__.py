"""
Client Schemas Package

This package contains the request and response schemas used by the
client:
    - base: Base classes for serialization
    - comment: The stored comment envelope
    - events: Relay frames (join_room, send_message, error)
"""

from .base import BaseRequest, BaseResponse
from .comment import Comment
from .events import JoinRoomRequest, RelayErrorResponse, SendMessageRequest

__all__ = [
    # Base classes
    "BaseRequest",
    "BaseResponse",
    # Comment envelope
    "Comment",
    # Relay frames
    "JoinRoomRequest",
    "SendMessageRequest",
    "RelayErrorResponse",
]
