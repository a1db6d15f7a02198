"""
Room Registry

Maps event ids to the sessions currently subscribed to that event's
chat room. One registry is created when the relay process starts and is
handed to the server; it lives for the lifetime of the process.

Rooms are never stored: a room exists while it has at least one member.
Joining an arbitrary room id always succeeds.
"""

import logging
from typing import Dict, FrozenSet, List, Set

logger = logging.getLogger(__name__)


class RoomRegistry:
    """
    Live index of room membership.

    The registry is only read and mutated from the relay's event loop,
    so membership changes are serialized without locks.
    """

    def __init__(self):
        self._rooms: Dict[str, Set[object]] = {}

    def join(self, room_id: str, session) -> None:
        """
        Add a session to a room, creating the room on demand.

        Joining a room the session is already in has no effect.

        Args:
            room_id: The room (event) id
            session: The session joining the room
        """
        members = self._rooms.setdefault(room_id, set())
        if session in members:
            logger.debug(f"Session {session} already in room {room_id}")
            return
        members.add(session)
        logger.debug(f"Session {session} joined room {room_id} ({len(members)} members)")

    def leave(self, room_id: str, session) -> None:
        """
        Remove a session from a room; an emptied room is discarded.

        Args:
            room_id: The room (event) id
            session: The session leaving the room
        """
        members = self._rooms.get(room_id)
        if not members:
            return
        members.discard(session)
        if not members:
            del self._rooms[room_id]
            logger.debug(f"Room {room_id} discarded (no members left)")

    def leave_all(self, session) -> List[str]:
        """
        Remove a session from every room it is in.

        Returns:
            List of room ids the session was removed from
        """
        left = [room_id for room_id, members in self._rooms.items() if session in members]
        for room_id in left:
            self.leave(room_id, session)
        return left

    def members_of(self, room_id: str) -> FrozenSet[object]:
        """
        Return a snapshot of a room's members.

        The snapshot does not follow later joins or leaves.
        """
        return frozenset(self._rooms.get(room_id, ()))

    def rooms(self) -> List[str]:
        """Return the ids of all rooms with at least one member."""
        return list(self._rooms)

    def clear(self) -> None:
        """Drop all membership (process shutdown)."""
        self._rooms.clear()

    def __contains__(self, room_id: str) -> bool:
        return room_id in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)
