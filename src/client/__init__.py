"""
Client Package

This package provides the client-side functionality for event chat:
the ClientService for the relay connection, the CommentsApiClient for
durable history and writes, the ChatClient that keeps both in sync for
display, and the terminal user interface.

Schemas are organized in the `schemas` subpackage:
    - comment: The stored comment envelope
    - events: Relay frames
"""

from .service import ClientService
from .comments_api import CommentApiError, CommentRejectedError, CommentsApiClient
from .message_log import DisplayedMessage, MessageLog
from .chat_client import ChatClient, SendFailedError
from .schemas import (
    # Base classes
    BaseRequest,
    BaseResponse,
    # Comment envelope
    Comment,
    # Relay frames
    JoinRoomRequest,
    SendMessageRequest,
    RelayErrorResponse,
)

__all__ = [
    # Service classes
    "ClientService",
    "CommentsApiClient",
    "MessageLog",
    "DisplayedMessage",
    "ChatClient",
    # Errors
    "CommentApiError",
    "CommentRejectedError",
    "SendFailedError",
    # Base schema classes
    "BaseRequest",
    "BaseResponse",
    # Schemas
    "Comment",
    "JoinRoomRequest",
    "SendMessageRequest",
    "RelayErrorResponse",
]
