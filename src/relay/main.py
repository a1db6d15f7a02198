#!/usr/bin/env python3
"""
Event Chat Relay Server

Realtime relay forwarding stored event comments to the other members of
an event's chat room.
"""

import asyncio
import logging
import os
import sys

from .room_registry import RoomRegistry
from .websocket_server import RelayServer

logger = logging.getLogger(__name__)


async def run_server(host: str, port: int):
    """
    Run the relay until cancelled.

    The room registry is created here and torn down on the way out.

    Args:
        host: Host address to bind to
        port: Port to listen on
    """
    registry = RoomRegistry()
    server = RelayServer(registry, host, port)

    await server.start()
    logger.info(f"Relay listening on ws://{host}:{server.port}")

    try:
        await asyncio.Event().wait()
    except asyncio.CancelledError:
        logger.info("Relay shutdown requested")
    finally:
        await server.stop()
        registry.clear()
        logger.info("Relay stopped")


def main():
    """Main entry point for the relay server."""
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info("Starting event chat relay...")

    host = os.environ.get("RELAY_HOST", "0.0.0.0")
    port = int(os.environ.get("RELAY_PORT", "3001"))

    try:
        asyncio.run(run_server(host, port))
    except KeyboardInterrupt:
        logger.info("Shutting down relay...")
        sys.exit(0)


if __name__ == "__main__":
    main()
