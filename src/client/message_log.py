"""
Message Log for Client-Side Display

This module keeps the ordered list of comments a client displays for one
event. The log is seeded once with the durable history and afterwards
only appended to, from the client's own write responses and from
relayed comments.

Architecture:
    - Append-only: display order is never resorted after seeding
    - Deduplicates by comment id, so a comment shows at most once even
      if the relay echoes a client's own comment back
    - Each displayed comment gets a monotonic local sequence number

Usage:
    log = MessageLog()
    log.seed(history)
    if log.append(comment):
        render(comment)
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Set

from .schemas import Comment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DisplayedMessage:
    """A comment together with its local display position."""

    sequence: int
    comment: Comment


class MessageLog:
    """
    Append-only, id-deduplicated list of displayed comments.

    Attributes:
        seeded: Whether the durable history has been loaded
    """

    def __init__(self):
        self._entries: List[DisplayedMessage] = []
        self._ids: Set[int] = set()
        self._next_sequence = 1
        self.seeded = False

    def seed(self, history: Iterable[Comment]) -> List[Comment]:
        """
        Load the durable history. Only the first call has an effect.

        Comments appended before the history arrived (live comments
        racing the fetch) are kept after the history unless the history
        already contains them.

        Args:
            history: Comments as returned by the API, oldest first

        Returns:
            The comments now displayed, in order
        """
        if self.seeded:
            logger.debug("Message log already seeded, ignoring history")
            return self.comments

        early = [entry.comment for entry in self._entries]
        self._entries = []
        self._ids = set()
        self._next_sequence = 1

        for comment in history:
            self._push(comment)
        for comment in early:
            self._push(comment)

        self.seeded = True
        logger.debug(f"Message log seeded with {len(self._entries)} comments")
        return self.comments

    def append(self, comment: Comment) -> bool:
        """
        Append a comment unless one with the same id is displayed.

        Args:
            comment: The comment to display

        Returns:
            bool: True if appended, False if it was a duplicate
        """
        if comment.id in self._ids:
            logger.debug(f"Duplicate comment ignored: {comment.id}")
            return False
        self._push(comment)
        return True

    def _push(self, comment: Comment) -> None:
        if comment.id in self._ids:
            return
        self._entries.append(DisplayedMessage(self._next_sequence, comment))
        self._ids.add(comment.id)
        self._next_sequence += 1

    @property
    def comments(self) -> List[Comment]:
        """Displayed comments in display order."""
        return [entry.comment for entry in self._entries]

    @property
    def entries(self) -> List[DisplayedMessage]:
        return list(self._entries)

    def clear(self) -> None:
        """
        Clear the log and reset state.

        This should be called when leaving an event's chat.
        """
        self._entries.clear()
        self._ids.clear()
        self._next_sequence = 1
        self.seeded = False
        logger.debug("Message log cleared")

    def __contains__(self, comment_id: int) -> bool:
        return comment_id in self._ids

    def __len__(self) -> int:
        return len(self._entries)
