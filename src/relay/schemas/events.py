"""
Realtime Event Envelopes

Tagged envelopes for the frames exchanged over a relay connection.
Every frame is a JSON object `{"type": <event name>, "data": {...}}`.

Client -> relay:
    join_room     {"roomId": "42"}
    send_message  {"eventId": "42", "comment": {...}}

Relay -> client:
    receive_message  {...comment...}, with "roomId" beside "data"
    error            {"error_code": ..., "message": ...}

Incoming frames are parsed into envelopes here, and nothing past this
module handles raw dictionaries.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Union

JOIN_ROOM = "join_room"
SEND_MESSAGE = "send_message"
RECEIVE_MESSAGE = "receive_message"
ERROR = "error"


class EventValidationError(ValueError):
    """
    Raised when an incoming frame does not match its envelope.

    Attributes:
        error_code: Machine-readable reason sent back to the client
    """

    def __init__(self, message: str, error_code: str = "INVALID_EVENT"):
        super().__init__(message)
        self.error_code = error_code


def _require_room_id(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    # Clients may send the numeric event id; rooms are keyed by its string form
    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str) or not value:
        raise EventValidationError(f"'{key}' must be a non-empty string")
    return value


def _require_str(data: Dict[str, Any], key: str, allow_empty: bool = False) -> str:
    value = data.get(key)
    if not isinstance(value, str) or (not allow_empty and not value):
        raise EventValidationError(f"comment.{key} must be a non-empty string")
    return value


@dataclass(frozen=True)
class CommentPayload:
    """
    A durably stored comment as carried by the relay.

    The relay forwards these unchanged; it never assigns ids or
    timestamps of its own.
    """

    id: int
    content: str
    created_at: str
    user_handle: str
    display_name: str

    @classmethod
    def from_dict(cls, data: Any) -> "CommentPayload":
        if not isinstance(data, dict):
            raise EventValidationError("'comment' must be an object")

        comment_id = data.get("id")
        if not isinstance(comment_id, int) or isinstance(comment_id, bool) or comment_id < 1:
            # No store-assigned id means the comment was never written
            raise EventValidationError(
                "comment.id must be a positive integer", error_code="NOT_PERSISTED"
            )

        return cls(
            id=comment_id,
            content=_require_str(data, "content"),
            created_at=_require_str(data, "createdAt"),
            user_handle=_require_str(data, "userHandle"),
            display_name=_require_str(data, "displayName", allow_empty=True),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "content": self.content,
            "createdAt": self.created_at,
            "userHandle": self.user_handle,
            "displayName": self.display_name,
        }


@dataclass(frozen=True)
class JoinRoomEvent:
    """Request to subscribe the connection to an event's room."""

    room_id: str

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "JoinRoomEvent":
        return cls(room_id=_require_room_id(data, "roomId"))

    def to_dict(self) -> Dict[str, Any]:
        return {"type": JOIN_ROOM, "data": {"roomId": self.room_id}}


@dataclass(frozen=True)
class SendMessageEvent:
    """Request to relay an already stored comment to a room."""

    event_id: str
    comment: CommentPayload

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "SendMessageEvent":
        if "comment" not in data:
            raise EventValidationError("'comment' is required")
        return cls(
            event_id=_require_room_id(data, "eventId"),
            comment=CommentPayload.from_dict(data["comment"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": SEND_MESSAGE,
            "data": {"eventId": self.event_id, "comment": self.comment.to_dict()},
        }


@dataclass(frozen=True)
class ReceiveMessageEvent:
    """
    A relayed comment delivered to the other members of a room.

    The room id rides on the frame next to the comment so a client that
    just switched rooms can drop comments still in flight from the old one.
    """

    room_id: str
    comment: CommentPayload

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": RECEIVE_MESSAGE,
            "roomId": self.room_id,
            "data": self.comment.to_dict(),
        }


ClientEvent = Union[JoinRoomEvent, SendMessageEvent]

_CLIENT_EVENTS = {
    JOIN_ROOM: JoinRoomEvent,
    SEND_MESSAGE: SendMessageEvent,
}


def parse_client_event(raw: str) -> ClientEvent:
    """
    Parse and validate a frame received from a client.

    Args:
        raw: The JSON text frame

    Returns:
        JoinRoomEvent or SendMessageEvent

    Raises:
        EventValidationError: If the frame is not valid JSON, has an
            unknown type or is missing required fields
    """
    try:
        frame = json.loads(raw)
    except (json.JSONDecodeError, TypeError, RecursionError):
        raise EventValidationError("Invalid JSON format", error_code="INVALID_JSON")

    if not isinstance(frame, dict):
        raise EventValidationError("Frame must be a JSON object")

    event_type = frame.get("type")
    event_cls = _CLIENT_EVENTS.get(event_type) if isinstance(event_type, str) else None
    if event_cls is None:
        raise EventValidationError(
            f"Unknown message type: {event_type}", error_code="UNKNOWN_TYPE"
        )

    data = frame.get("data")
    if not isinstance(data, dict):
        raise EventValidationError(f"'{event_type}' requires a data object")

    return event_cls.from_data(data)
