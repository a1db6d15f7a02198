"""
Connection Session

One realtime connection's lifecycle on the relay:

    DISCONNECTED -> CONNECTED -> JOINED(room_id) -> DISCONNECTED

A session is created in CONNECTED once the WebSocket handshake
succeeded. Disconnecting removes it from the room registry in the same
step and is terminal; a reconnecting client gets a new session.
"""

import logging
import uuid
from enum import Enum
from typing import Optional

from .room_registry import RoomRegistry

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """States of a relay connection."""

    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    JOINED = "joined"


class SessionClosedError(Exception):
    """Raised when a disconnected session is asked to join a room."""


class ConnectionSession:
    """
    Runtime identity of one connection.

    Attributes:
        session_id: Opaque connection id
        websocket: The underlying WebSocket connection
        state: Current SessionState
        room_id: Room the session is joined to, or None
    """

    def __init__(
        self,
        websocket,
        registry: RoomRegistry,
        session_id: Optional[str] = None,
    ):
        self.session_id = session_id or uuid.uuid4().hex
        self.websocket = websocket
        self.state = SessionState.CONNECTED
        self.room_id: Optional[str] = None
        self._registry = registry

    @property
    def is_joined(self) -> bool:
        return self.state is SessionState.JOINED

    @property
    def is_open(self) -> bool:
        return self.state is not SessionState.DISCONNECTED

    def join_room(self, room_id: str) -> None:
        """
        Join a room, leaving the current one first if it differs.

        A session is in at most one room at a time.

        Raises:
            SessionClosedError: If the session is already disconnected
        """
        if self.state is SessionState.DISCONNECTED:
            raise SessionClosedError(f"Session {self.session_id} is disconnected")

        if self.room_id is not None and self.room_id != room_id:
            logger.info(f"Session {self.session_id} moving from room {self.room_id} to {room_id}")
            self._registry.leave(self.room_id, self)

        self._registry.join(room_id, self)
        self.room_id = room_id
        self.state = SessionState.JOINED

    def disconnect(self) -> None:
        """
        Tear the session down and drop its room membership.

        Calling this on an already disconnected session does nothing.
        """
        if self.state is SessionState.DISCONNECTED:
            return
        self._registry.leave_all(self)
        self.state = SessionState.DISCONNECTED
        self.room_id = None

    async def send(self, frame: str) -> None:
        """Send a text frame over the connection."""
        await self.websocket.send(frame)

    def __repr__(self) -> str:
        return f"ConnectionSession({self.session_id!r}, {self.state.value}, room={self.room_id!r})"
