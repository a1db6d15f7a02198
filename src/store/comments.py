"""
Comment Persistence Bridge

Creates and lists event comments in the durable store. The bridge only
writes; broadcasting a stored comment over the relay is the caller's
job, done after create_comment returns. There is no atomicity between
the two steps: a crash in between loses the live delivery but not the
comment, which the next history fetch returns.

Usage:
    bridge = CommentBridge(session_factory)
    comment = bridge.create_comment(42, "alice", "hi")
    history = bridge.list_comments(42)
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Union

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from .errors import StorageFailure
from .models import Comment, User
from .validation import check_comment_input, coerce_event_id

logger = logging.getLogger(__name__)


def format_timestamp(value: datetime) -> str:
    """Render a stored timestamp as ISO 8601 in UTC."""
    # SQLite hands back naive datetimes; they were written as UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


@dataclass(frozen=True)
class CommentEnvelope:
    """
    Immutable message record shared by the store, the relay and clients.

    Attributes:
        id: Identifier assigned by the store
        content: Comment text
        created_at: ISO 8601 creation timestamp assigned by the store
        user_handle: Handle of the author
        display_name: Display name of the author
    """

    id: int
    content: str
    created_at: str
    user_handle: str
    display_name: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase wire representation."""
        return {
            "id": self.id,
            "content": self.content,
            "createdAt": self.created_at,
            "userHandle": self.user_handle,
            "displayName": self.display_name,
        }

    @classmethod
    def from_row(cls, row: Comment, display_name: str) -> "CommentEnvelope":
        return cls(
            id=row.id,
            content=row.content,
            created_at=format_timestamp(row.created_at),
            user_handle=row.user_handle,
            display_name=display_name,
        )


class CommentBridge:
    """
    Durable comment operations for one database.

    Attributes:
        session_factory: Factory producing SQLAlchemy sessions
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def create_comment(
        self, event_id: Union[int, str], user_handle: str, content: str
    ) -> CommentEnvelope:
        """
        Validate and durably store a new comment.

        The event and user are not looked up beforehand; the foreign
        keys reject the insert if either does not exist.

        Args:
            event_id: Event the comment belongs to
            user_handle: Handle of the author
            content: Comment text, 1 to 500 characters

        Returns:
            CommentEnvelope: The stored comment with id and timestamp

        Raises:
            ValidationError: If content or handle is malformed
            StorageFailure: If the write fails
        """
        check_comment_input(user_handle, content)
        event_id = coerce_event_id(event_id)

        try:
            with self.session_factory() as session:
                row = Comment(
                    event_id=event_id, user_handle=user_handle, content=content
                )
                session.add(row)
                session.flush()
                display_name = session.scalar(
                    select(User.display_name).where(User.handle == user_handle)
                )
                session.commit()
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to store comment for event {event_id} "
                f"by {user_handle}: {e}"
            )
            raise StorageFailure(
                "Could not store comment", operation="create_comment"
            ) from e

        comment = CommentEnvelope.from_row(row, display_name or user_handle)
        logger.info(
            f"Stored comment {comment.id} for event {event_id} by {user_handle}"
        )
        return comment

    def list_comments(self, event_id: Union[int, str]) -> List[CommentEnvelope]:
        """
        Return every comment of an event, oldest first.

        Args:
            event_id: Event whose comments to list

        Returns:
            List of comments ordered by creation time, then id

        Raises:
            ValidationError: If event_id is not an integer
            StorageFailure: If the read fails
        """
        event_id = coerce_event_id(event_id)
        query = (
            select(Comment, User.display_name)
            .join(User, Comment.user_handle == User.handle)
            .where(Comment.event_id == event_id)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
        )

        try:
            with self.session_factory() as session:
                rows = session.execute(query).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to list comments for event {event_id}: {e}")
            raise StorageFailure(
                "Could not load comments", operation="list_comments"
            ) from e

        comments = [
            CommentEnvelope.from_row(row, display_name)
            for row, display_name in rows
        ]
        logger.debug(f"Loaded {len(comments)} comments for event {event_id}")
        return comments
