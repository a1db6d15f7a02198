"""
Event Chat UI

Terminal view of one event's chat, built using the Textual framework.
It renders what the ChatClient displays and sends through the
client's write-then-relay path.
"""

import logging
from typing import Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, ScrollableContainer
from textual.widgets import Button, Footer, Header, Input, Static

from ..chat_client import ChatClient, SendFailedError
from ..comments_api import CommentApiError
from ..schemas import Comment

logger = logging.getLogger(__name__)


class MessageDisplay(Static):
    """Widget for displaying a single chat comment."""

    def __init__(
        self,
        display_name: str,
        message_content: str,
        timestamp: str,
        is_own_message: bool = False,
    ) -> None:
        """Initialize message display."""
        super().__init__()
        self.msg_display_name = display_name
        self.msg_content = message_content
        self.msg_timestamp = timestamp
        self.is_own_message = is_own_message

    def compose(self) -> ComposeResult:
        """Compose the message display."""
        time_part = (
            self.msg_timestamp.split("T")[1][:5]
            if "T" in self.msg_timestamp
            else ""
        )
        prefix = "You" if self.is_own_message else self.msg_display_name
        yield Static(
            f"[bold cyan]{prefix}[/] [dim]{time_part}[/]\n{self.msg_content}",
            classes="message-content",
        )


class SystemMessage(Static):
    """Widget for displaying system notices."""

    def __init__(self, message: str, message_type: str = "info") -> None:
        """Initialize system message display."""
        self.message = message
        self.message_type = message_type
        super().__init__()

    def compose(self) -> ComposeResult:
        """Compose the system message."""
        color = {
            "info": "blue",
            "warning": "yellow",
            "error": "red",
        }.get(self.message_type, "white")
        yield Static(f"[{color}]{self.message}[/]", classes="system-message")


class EventChatApp(App):
    """Chat view for a single event."""

    CSS = """
    #messages-container {
        height: 1fr;
        padding: 1;
    }

    #message-input-row {
        height: 3;
        padding: 0 1;
    }

    #message-input {
        width: 1fr;
    }

    #send-btn {
        margin: 0 0 0 1;
    }

    MessageDisplay {
        padding: 0 0 1 0;
    }

    .own-message .message-content {
        text-align: right;
    }

    .system-message {
        text-align: center;
        text-style: italic;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, client: ChatClient, event_id: str):
        super().__init__()
        self.client = client
        self.event_id = str(event_id)
        self.title = f"Event {self.event_id} chat"
        self._sending = False

    def compose(self) -> ComposeResult:
        """Compose the chat view."""
        yield Header()
        yield ScrollableContainer(id="messages-container")
        with Horizontal(id="message-input-row"):
            yield Input(placeholder="Type a message...", id="message-input")
            yield Button("Send", id="send-btn", variant="primary")
        yield Footer()

    async def on_mount(self) -> None:
        """Load history, join the room and start listening."""
        self.client.set_on_message_ready(self.add_comment)
        try:
            history = await self.client.open_event(self.event_id)
        except (CommentApiError, ConnectionError) as e:
            logger.error("Could not open event chat: %s", e)
            self.add_system_message(f"Could not load chat: {e}", "error")
            return

        for comment in history:
            self.add_comment(comment)
        if not history:
            self.add_system_message("No messages yet.")
        self.run_worker(self.client.receive_messages(), exclusive=True)

    def add_comment(self, comment: Comment) -> None:
        """Append one comment to the message list."""
        is_own = comment.user_handle == self.client.user_handle
        widget = MessageDisplay(
            display_name=comment.display_name or comment.user_handle,
            message_content=comment.content,
            timestamp=comment.created_at,
            is_own_message=is_own,
        )
        if is_own:
            widget.add_class("own-message")
        container = self.query_one("#messages-container", ScrollableContainer)
        container.mount(widget)
        container.scroll_end(animate=False)

    def add_system_message(self, message: str, message_type: str = "info") -> None:
        container = self.query_one("#messages-container", ScrollableContainer)
        container.mount(SystemMessage(message, message_type))

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "message-input":
            await self.send_current_input()

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            await self.send_current_input()

    async def send_current_input(self) -> Optional[Comment]:
        """Send the input's text; on failure keep the text for a manual retry."""
        message_input = self.query_one("#message-input", Input)
        content = message_input.value
        if not content.strip() or self._sending:
            return None

        self._sending = True
        try:
            comment = await self.client.send_message(content)
        except SendFailedError as e:
            detail = "; ".join(str(v) for v in e.detail.values()) if e.detail else ""
            self.add_system_message(
                f"Failed to send{': ' + detail if detail else ''}", "error"
            )
            return None
        finally:
            self._sending = False

        message_input.value = ""
        return comment

    async def on_unmount(self) -> None:
        await self.client.close()
