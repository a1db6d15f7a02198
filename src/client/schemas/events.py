"""
Relay Event Schema Definitions

This module defines the frames a client exchanges with the relay:
joining an event's room, relaying a stored comment, and the relay's
error notifications.
"""

from dataclasses import dataclass
from typing import Any, Dict

from .base import BaseRequest, BaseResponse
from .comment import Comment


@dataclass
class JoinRoomRequest(BaseRequest):
    """
    Request to join an event's chat room.

    Attributes:
        room_id: Event id in string form
    """

    room_id: str

    def _data(self) -> Dict[str, Any]:
        return {"roomId": self.room_id}

    @property
    def _message_type(self) -> str:
        """Return the message type for join room requests."""
        return "join_room"


@dataclass
class SendMessageRequest(BaseRequest):
    """
    Request to relay a comment that was already stored.

    Attributes:
        event_id: Event id in string form (the room to relay to)
        comment: The stored comment
    """

    event_id: str
    comment: Comment

    def _data(self) -> Dict[str, Any]:
        return {"eventId": self.event_id, "comment": self.comment.to_dict()}

    @property
    def _message_type(self) -> str:
        """Return the message type for send message requests."""
        return "send_message"


@dataclass
class RelayErrorResponse(BaseResponse):
    """
    Error reported by the relay for a rejected frame.

    Attributes:
        error_code: Error code (e.g., INVALID_JSON, NOT_PERSISTED)
        message: Error message
    """

    error_code: str
    message: str

    @classmethod
    def _from_data(cls, data: Dict[str, Any]) -> "RelayErrorResponse":
        """Create from response data dictionary."""
        return cls(
            error_code=data.get("error_code", "UNKNOWN_ERROR"),
            message=data.get("message", ""),
        )
