#!/usr/bin/env python3
"""
Event Chat Client Application

Terminal client for chatting in one event's room. Uses the comment API
for history and writes and the relay for live updates.
"""

import argparse
import logging
import os
import sys

# Configure logging to file to avoid interfering with UI
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.FileHandler("event_chat_client.log", mode="a")],
)

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Chat in an event's room")
    parser.add_argument("--event-id", required=True, help="Event to open")
    parser.add_argument("--handle", required=True, help="Your user handle")
    parser.add_argument("--name", default=None, help="Your display name")
    parser.add_argument(
        "--api-url",
        default=os.environ.get("API_URL", "http://localhost:8000"),
        help="Comment API base URL",
    )
    parser.add_argument(
        "--relay-url",
        default=os.environ.get("RELAY_URL", "ws://localhost:3001"),
        help="Relay WebSocket URL",
    )
    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point for the chat client."""
    args = parse_args(argv)
    logger.info("Starting chat client for event %s...", args.event_id)

    from .chat_client import ChatClient
    from .comments_api import CommentsApiClient
    from .ui import EventChatApp

    client = ChatClient(
        args.relay_url,
        CommentsApiClient(args.api_url),
        user_handle=args.handle,
        display_name=args.name,
    )

    try:
        EventChatApp(client, args.event_id).run()
    except KeyboardInterrupt:
        print("\nExiting...")
        sys.exit(0)


if __name__ == "__main__":
    main()
