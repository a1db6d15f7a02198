"""
Chat Client: Client-Side Sync of Event Chat

This module provides a ChatClient class that extends the base ClientService
with the per-client view of one event's chat. It loads the durable
history once, then appends the client's own stored comments and the
comments relayed by other members.

Architecture:
    - Extends ClientService for the relay connection
    - Uses CommentsApiClient for durable history and writes
    - Uses MessageLog for append-only, id-deduplicated display order
    - Provides callback hooks for UI layer integration

Sending is write-then-relay: a comment is relayed only after the API
stored it. If the write fails nothing is relayed and the caller gets a
SendFailedError; retrying is left to the user.

Usage:
    client = ChatClient("ws://localhost:3001", api, user_handle="alice")
    await client.open_event("42")
    await client.send_message("hi")
    await client.receive_messages()
"""

import json
import logging
from typing import Any, Callable, Dict, List, Optional

from websockets.exceptions import ConnectionClosed

from .comments_api import CommentApiError, CommentRejectedError, CommentsApiClient
from .message_log import MessageLog
from .schemas import Comment, RelayErrorResponse
from .service import ClientService

logger = logging.getLogger(__name__)


class SendFailedError(Exception):
    """
    Raised when a comment could not be stored.

    Attributes:
        rejected: True if the API refused the input, False if it failed
        detail: Field-level detail for rejected input
    """

    def __init__(self, message: str, rejected: bool = False, detail: Optional[Dict] = None):
        super().__init__(message)
        self.rejected = rejected
        self.detail = detail or {}


class ChatClient(ClientService):
    """
    Event chat client reconciling durable history with live relay events.

    Attributes:
        comments_api: Client for the durable comment API
        message_log: Comments currently displayed
        user_handle: Handle used when posting comments
        display_name: Display name used when the API omits one
        current_event: Id of the event whose chat is open
    """

    def __init__(
        self,
        relay_url: str,
        comments_api: CommentsApiClient,
        user_handle: Optional[str] = None,
        display_name: Optional[str] = None,
        websocket_factory: Optional[Callable] = None,
    ):
        """
        Initialize the chat client.

        Args:
            relay_url: WebSocket URL of the relay server
            comments_api: Client for the comment API
            user_handle: Handle used when posting comments
            display_name: Display name used as fallback for own comments
            websocket_factory: Optional factory for creating WebSocket
                             connections (for dependency injection/testing)
        """
        super().__init__(relay_url, websocket_factory)

        self.comments_api = comments_api
        self.message_log = MessageLog()
        self.user_handle = user_handle
        self.display_name = display_name
        self.current_event: Optional[str] = None

        # Callbacks for UI integration
        self._on_message_ready: Optional[Callable[[Comment], None]] = None
        self._on_duplicate_message: Optional[Callable[[int], None]] = None
        self._on_relay_error: Optional[Callable[[RelayErrorResponse], None]] = None

        logger.info("ChatClient initialized for relay: %s", relay_url)

    def set_on_message_ready(self, callback: Callable[[Comment], None]) -> None:
        """
        Register callback for comments appended to the display.

        Args:
            callback: Function that receives each newly displayed Comment
        """
        self._on_message_ready = callback

    def set_on_duplicate_message(self, callback: Callable[[int], None]) -> None:
        """
        Register callback for duplicate comment detection.

        Args:
            callback: Function that receives the duplicate comment id
        """
        self._on_duplicate_message = callback

    def set_on_relay_error(self, callback: Callable[[RelayErrorResponse], None]) -> None:
        """
        Register callback for error frames sent by the relay.

        Args:
            callback: Function that receives the RelayErrorResponse
        """
        self._on_relay_error = callback

    async def open_event(self, event_id) -> List[Comment]:
        """
        Open an event's chat: connect, join its room, then load history.

        The room is joined before history is fetched so no comment falls
        between the two. Comments relayed meanwhile are kept after the
        history by the message log.

        Args:
            event_id: The event id (int or string)

        Returns:
            The comments displayed after loading history

        Raises:
            CommentApiError: If the history cannot be loaded
            ConnectionError: If the relay cannot be reached
        """
        event_id = str(event_id)
        if self.current_event and self.current_event != event_id:
            self.close_event()

        self.current_event = event_id
        if not self.is_connected:
            await self.connect()
        await self.join_room(event_id)

        history = await self.comments_api.fetch_comments(event_id)
        displayed = self.message_log.seed(history)

        logger.info(
            "Opened chat for event %s with %s comments", event_id, len(displayed)
        )
        return displayed

    def close_event(self) -> None:
        """Forget the open event's chat and clear the display."""
        if self.current_event:
            logger.info("Closed chat for event %s", self.current_event)
        self.message_log.clear()
        self.current_event = None

    async def send_message(self, content: str) -> Comment:
        """
        Store a comment, display it, then relay it to the room.

        Args:
            content: The comment text

        Returns:
            Comment: The stored comment as displayed

        Raises:
            RuntimeError: If no event is open or no handle is set
            SendFailedError: If the API rejected or failed the write
        """
        if not self.current_event:
            raise RuntimeError("No event chat is open")
        if not self.user_handle:
            raise RuntimeError("No user handle set")

        try:
            comment = await self.comments_api.post_comment(
                self.current_event, self.user_handle, content
            )
        except CommentRejectedError as e:
            logger.warning("Comment rejected: %s", e.detail)
            raise SendFailedError(str(e), rejected=True, detail=e.detail) from e
        except CommentApiError as e:
            logger.error("Failed to send comment: %s", e)
            raise SendFailedError("Failed to send") from e

        if not comment.display_name:
            comment = comment.with_display_name(self.display_name or self.user_handle)

        self._display(comment)

        if self.is_connected:
            try:
                await self.emit_message(self.current_event, comment)
            except ConnectionClosed:
                # Stored already; other members pick it up on their next history load
                logger.warning(
                    "Relay connection lost, comment %s not relayed", comment.id
                )
                self._connected = False
        else:
            logger.warning("Not connected to relay, comment %s not relayed", comment.id)

        return comment

    async def receive_messages(self) -> None:
        """
        Continuously receive and process frames from the relay.

        Returns when the relay closes the connection.
        """
        if not self.is_connected:
            raise ConnectionError("Not connected to the relay")

        logger.info("Starting message receive loop")

        try:
            async for message in self.websocket:
                await self._process_incoming_message(message)
        except ConnectionClosed:
            logger.warning("Connection closed by relay")
        finally:
            self._connected = False

    async def _process_incoming_message(self, message: str) -> None:
        """
        Process a single incoming frame.

        Args:
            message: Raw JSON frame from the WebSocket
        """
        try:
            data = json.loads(message)
        except json.JSONDecodeError as e:
            logger.error("Failed to parse message JSON: %s", e)
            return

        if not isinstance(data, dict):
            logger.warning("Ignoring frame that is not a JSON object")
            return

        message_type = data.get("type")

        if message_type == "receive_message":
            await self._handle_receive_message(data.get("data", {}), data.get("roomId"))
        elif message_type == "error":
            await self._handle_relay_error(data.get("data", {}))
        else:
            logger.debug("Unhandled message type: %s", message_type)

    async def _handle_receive_message(
        self, comment_data: Dict[str, Any], room_id: Optional[str] = None
    ) -> None:
        """
        Handle a comment relayed from another member.

        Args:
            comment_data: Comment dictionary in wire form
            room_id: Room the relay forwarded the comment in, if given
        """
        if not self.current_event:
            logger.debug("Ignoring relayed comment, no event chat open")
            return
        if room_id is not None and str(room_id) != self.current_event:
            # Still in flight from the room this client just left
            logger.debug(
                "Ignoring comment relayed in room %s while event %s is open",
                room_id,
                self.current_event,
            )
            return
        if not isinstance(comment_data, dict):
            logger.warning("Malformed relayed comment: not an object")
            return

        try:
            comment = Comment.from_dict(comment_data)
        except (KeyError, TypeError) as e:
            logger.warning("Malformed relayed comment: %s", e)
            return

        self._display(comment)

    async def _handle_relay_error(self, error_data: Dict[str, Any]) -> None:
        error = RelayErrorResponse.from_dict(
            error_data if isinstance(error_data, dict) else {}
        )
        logger.error("Relay error %s: %s", error.error_code, error.message)
        if self._on_relay_error:
            self._on_relay_error(error)

    def _display(self, comment: Comment) -> None:
        if self.message_log.append(comment):
            if self._on_message_ready:
                self._on_message_ready(comment)
        elif self._on_duplicate_message:
            self._on_duplicate_message(comment.id)

    @property
    def messages(self) -> List[Comment]:
        """Comments currently displayed, in order."""
        return self.message_log.comments

    async def close(self) -> None:
        """Disconnect from the relay and release the API client."""
        self.close_event()
        await self.disconnect()
        await self.comments_api.close()
