"""
Event Participation

Join and leave operations for event membership. This is durable
membership of an event, distinct from the live chat room a connection
joins on the relay.
"""

import logging
from typing import Union

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from .errors import StorageFailure, ValidationError
from .models import Participant
from .validation import coerce_event_id, validate_user_handle

logger = logging.getLogger(__name__)


def _check_handle(user_handle: str) -> None:
    ok, error = validate_user_handle(user_handle)
    if not ok:
        raise ValidationError({"userHandle": error})


class ParticipantService:
    """Durable event membership operations."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def _is_participant(self, session, event_id: int, user_handle: str) -> bool:
        return (
            session.scalar(
                select(Participant.id).where(
                    Participant.event_id == event_id,
                    Participant.user_handle == user_handle,
                )
            )
            is not None
        )

    def join_event(self, event_id: Union[int, str], user_handle: str) -> bool:
        """
        Add a user to an event's participants.

        Joining an event the user already joined is a no-op, including
        when a concurrent join wins the race for the unique constraint.

        Returns:
            bool: True if a new participant row was written

        Raises:
            ValidationError: If the handle or event id is malformed
            StorageFailure: If the write fails (including unknown event/user)
        """
        _check_handle(user_handle)
        event_id = coerce_event_id(event_id)

        try:
            with self.session_factory() as session:
                if self._is_participant(session, event_id, user_handle):
                    logger.info(
                        f"User {user_handle} already joined event {event_id}"
                    )
                    return False

                session.add(
                    Participant(event_id=event_id, user_handle=user_handle)
                )
                try:
                    session.commit()
                except IntegrityError:
                    session.rollback()
                    if not self._is_participant(session, event_id, user_handle):
                        raise
                    logger.info(
                        f"User {user_handle} joined event {event_id} concurrently"
                    )
                    return False
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to join user {user_handle} to event {event_id}: {e}"
            )
            raise StorageFailure(
                "Failed to join event", operation="join_event"
            ) from e

        logger.info(f"User {user_handle} joined event {event_id}")
        return True

    def leave_event(self, event_id: Union[int, str], user_handle: str) -> bool:
        """
        Remove a user from an event's participants.

        Returns:
            bool: True if a participant row was removed
        """
        _check_handle(user_handle)
        event_id = coerce_event_id(event_id)

        try:
            with self.session_factory() as session:
                result = session.execute(
                    delete(Participant).where(
                        Participant.event_id == event_id,
                        Participant.user_handle == user_handle,
                    )
                )
                session.commit()
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to remove user {user_handle} from event {event_id}: {e}"
            )
            raise StorageFailure(
                "Failed to leave event", operation="leave_event"
            ) from e

        removed = result.rowcount > 0
        logger.info(
            f"User {user_handle} left event {event_id} (removed={removed})"
        )
        return removed

    def count_participants(self, event_id: Union[int, str]) -> int:
        """Return the number of users who joined an event."""
        event_id = coerce_event_id(event_id)
        try:
            with self.session_factory() as session:
                return session.scalar(
                    select(func.count(Participant.id)).where(
                        Participant.event_id == event_id
                    )
                )
        except SQLAlchemyError as e:
            raise StorageFailure(
                "Failed to count participants", operation="count_participants"
            ) from e
