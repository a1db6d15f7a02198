"""
Relay Server Package

This package provides the realtime relay for event chat rooms: the room
registry, per-connection sessions and the WebSocket server that forwards
stored comments to the other members of a room.
"""

from .room_registry import RoomRegistry
from .session import ConnectionSession, SessionClosedError, SessionState
from .websocket_server import RelayServer

__all__ = [
    "RoomRegistry",
    "ConnectionSession",
    "SessionClosedError",
    "SessionState",
    "RelayServer",
]
