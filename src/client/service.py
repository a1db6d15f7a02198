"""
Client Service for the Event Chat Relay

This module provides the client service class that owns the WebSocket
connection to the relay. It joins event rooms and emits send_message
frames for comments that were already stored.

Architecture:
    - Uses WebSocket for real-time bidirectional communication
    - Supports dependency injection for the network layer (for testability)
    - Async/await pattern for non-blocking I/O operations
"""

import logging
from typing import Callable, Optional

import websockets

from .schemas import Comment, JoinRoomRequest, SendMessageRequest

logger = logging.getLogger(__name__)


class ClientService:
    """
    Client side of a relay connection.

    Attributes:
        relay_url: WebSocket URL of the relay (e.g., ws://localhost:3001)
        websocket: Active WebSocket connection (None if not connected)
        joined_room: Room joined on this connection, if any
    """

    def __init__(
        self,
        relay_url: str,
        websocket_factory: Optional[Callable] = None,
    ):
        """
        Initialize the client service.

        Args:
            relay_url: WebSocket URL of the relay server
            websocket_factory: Optional factory for creating WebSocket
                             connections (for dependency injection/testing)
        """
        self.relay_url = relay_url
        self.websocket = None
        self.joined_room: Optional[str] = None
        self._websocket_factory = websocket_factory or websockets.connect
        self._connected = False

        logger.info(f"ClientService initialized for relay: {relay_url}")

    async def connect(self) -> None:
        """
        Establish WebSocket connection to the relay.

        Raises:
            ConnectionError: If connection fails
        """
        try:
            logger.info(f"Connecting to {self.relay_url}...")
            self.websocket = await self._websocket_factory(self.relay_url)
            self._connected = True
            logger.info("Successfully connected to relay")
        except Exception as e:
            logger.error(f"Failed to connect to relay: {e}")
            raise ConnectionError(f"Could not connect to {self.relay_url}: {e}")

    async def disconnect(self) -> None:
        """Close the WebSocket connection. The relay drops our membership."""
        if self.websocket:
            if hasattr(self.websocket, "close"):
                await self.websocket.close()
            self.websocket = None
            self._connected = False
            self.joined_room = None
            logger.info("Disconnected from relay")

    @property
    def is_connected(self) -> bool:
        """Check if currently connected to the relay."""
        return self._connected and self.websocket is not None

    async def join_room(self, room_id: str) -> None:
        """
        Join an event's chat room. The relay sends no acknowledgment.

        Args:
            room_id: Event id in string form

        Raises:
            ConnectionError: If not connected to the relay
        """
        if not self.is_connected:
            raise ConnectionError("Not connected to the relay")

        await self.websocket.send(JoinRoomRequest(room_id=room_id).to_json())
        self.joined_room = room_id
        logger.info(f"Sent join_room for room {room_id}")

    async def emit_message(self, event_id: str, comment: Comment) -> None:
        """
        Ask the relay to forward a stored comment to the room.

        Only call this after the comment's durable write succeeded.

        Args:
            event_id: Event id in string form
            comment: The stored comment

        Raises:
            ConnectionError: If not connected to the relay
        """
        if not self.is_connected:
            raise ConnectionError("Not connected to the relay")

        request = SendMessageRequest(event_id=event_id, comment=comment)
        await self.websocket.send(request.to_json())
        logger.debug(f"Sent send_message for comment {comment.id} in room {event_id}")
