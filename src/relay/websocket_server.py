"""
WebSocket Relay Server

Accepts client connections, tracks which event room each connection has
joined, and forwards stored comments to the other members of a room.

Delivery is best effort: a member that is gone, or has not joined yet,
when a comment is relayed never receives it. Clients recover missed
comments by fetching history from the comment API.
"""

import json
import logging
from typing import Any, Dict, Optional

import websockets
from websockets.exceptions import ConnectionClosed

from .room_registry import RoomRegistry
from .schemas import (
    EventValidationError,
    JoinRoomEvent,
    ReceiveMessageEvent,
    SendMessageEvent,
    create_error_response,
    parse_client_event,
)
from .session import ConnectionSession, SessionClosedError

logger = logging.getLogger(__name__)


class RelayServer:
    """
    WebSocket server relaying chat comments between room members.

    Attributes:
        registry: Room membership shared by all connections
        host: Host address to bind to
        port: Port to listen on (0 picks a free port)
    """

    def __init__(self, registry: RoomRegistry, host: str, port: int):
        """
        Initialize the relay server.

        Args:
            registry: The room registry owned by the relay process
            host: Host address to bind to
            port: Port to listen on
        """
        self.registry = registry
        self.host = host
        self.port = port
        self.server = None
        self.sessions: Dict[str, ConnectionSession] = {}

    async def start(self):
        """Start the WebSocket server."""
        self.server = await websockets.serve(self.handle_client, self.host, self.port)
        sockets = list(self.server.sockets or [])
        if sockets:
            self.port = sockets[0].getsockname()[1]
        logger.info(f"Relay server started on ws://{self.host}:{self.port}")

    async def stop(self):
        """Stop the WebSocket server."""
        if self.server:
            self.server.close()
            await self.server.wait_closed()
            self.server = None
            logger.info("Relay server stopped")

    async def handle_client(self, websocket):
        """
        Handle one client connection from handshake to teardown.

        Args:
            websocket: The WebSocket connection
        """
        session = self.open_session(websocket)

        try:
            async for message in websocket:
                await self.process_message(session, message)
        except ConnectionClosed:
            logger.info(f"Session {session.session_id} connection dropped")
        finally:
            self.close_session(session)

    def open_session(self, websocket) -> ConnectionSession:
        """Register a freshly connected session."""
        session = ConnectionSession(websocket, self.registry)
        self.sessions[session.session_id] = session
        logger.info(f"Session {session.session_id} connected")
        return session

    def close_session(self, session: ConnectionSession) -> None:
        """Disconnect a session and forget it."""
        room_id = session.room_id
        session.disconnect()
        self.sessions.pop(session.session_id, None)
        logger.info(f"Session {session.session_id} disconnected (room: {room_id})")

    async def process_message(self, session: ConnectionSession, message: str):
        """
        Process one frame received from a client.

        Malformed frames are answered with an error frame; the
        connection stays open.

        Args:
            session: The originating session
            message: The raw JSON text frame
        """
        try:
            event = parse_client_event(message)
        except EventValidationError as e:
            logger.warning(f"Rejected frame from session {session.session_id}: {e}")
            await self.send_error(session, e.error_code, str(e))
            return

        if isinstance(event, JoinRoomEvent):
            await self.handle_join_room(session, event)
        elif isinstance(event, SendMessageEvent):
            await self.handle_send_message(session, event)

    async def handle_join_room(self, session: ConnectionSession, event: JoinRoomEvent):
        """
        Handle a join_room request. No acknowledgment is sent.

        Args:
            session: The joining session
            event: The parsed join_room envelope
        """
        try:
            session.join_room(event.room_id)
        except SessionClosedError as e:
            logger.warning(str(e))
            return
        logger.info(f"Session {session.session_id} joined room {event.room_id}")

    async def handle_send_message(
        self, session: ConnectionSession, event: SendMessageEvent
    ):
        """
        Handle a send_message request by relaying the comment.

        The sender already displays the comment from its write response,
        so it is excluded from the fan-out.

        Args:
            session: The sending session
            event: The parsed send_message envelope
        """
        if session.room_id != event.event_id:
            logger.debug(
                f"Session {session.session_id} relaying to room {event.event_id} "
                f"without being joined to it"
            )

        payload = ReceiveMessageEvent(event.event_id, event.comment).to_dict()
        delivered = await self.relay(event.event_id, payload, exclude_session=session)
        logger.info(
            f"Relayed comment {event.comment.id} in room {event.event_id} "
            f"to {delivered} sessions"
        )

    async def relay(
        self,
        room_id: str,
        payload: Dict[str, Any],
        exclude_session: Optional[ConnectionSession] = None,
    ) -> int:
        """
        Deliver a payload to every member of a room except one.

        The member set is snapshotted before the first send, so joins
        and leaves during the fan-out only affect later relays. Sends to
        a recipient happen in call order, so comments relayed by one
        sender arrive in the order they were sent.

        Args:
            room_id: The room id
            payload: The frame to deliver
            exclude_session: Session that must not receive the payload

        Returns:
            int: Number of sessions the payload was handed to
        """
        members = self.registry.members_of(room_id)
        if not members:
            return 0

        frame = json.dumps(payload)
        delivered = 0
        for member in members:
            if member is exclude_session:
                continue
            if not member.is_open:
                logger.debug(f"Delivery miss: session {member.session_id} already closed")
                continue
            try:
                await member.send(frame)
                delivered += 1
            except ConnectionClosed:
                logger.debug(f"Delivery miss: session {member.session_id} dropped mid-send")
        return delivered

    async def send_error(self, session: ConnectionSession, error_code: str, message: str):
        """
        Send an error frame to a session.

        Args:
            session: The session to notify
            error_code: Machine-readable error code
            message: Error message text
        """
        try:
            await session.send(json.dumps(create_error_response(error_code, message)))
        except ConnectionClosed:
            pass
