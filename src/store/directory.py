"""
Seeding helpers for users and events.

Event and user CRUD live outside this service; these helpers exist so a
local database and the tests have rows for the foreign keys to point at.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from .errors import StorageFailure
from .models import Event, User

logger = logging.getLogger(__name__)


def create_user(session_factory: sessionmaker, handle: str, display_name: str) -> str:
    """Insert a user and return its handle."""
    try:
        with session_factory() as session:
            session.add(User(handle=handle, display_name=display_name))
            session.commit()
    except SQLAlchemyError as e:
        raise StorageFailure(f"Could not create user {handle}", operation="create_user") from e
    logger.info(f"Created user {handle}")
    return handle


def create_event(
    session_factory: sessionmaker,
    title: str,
    host_handle: str,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    description: Optional[str] = None,
) -> int:
    """Insert an event and return its id. Dates default to a one hour slot from now."""
    start_date = start_date or datetime.now(timezone.utc)
    end_date = end_date or start_date + timedelta(hours=1)
    try:
        with session_factory() as session:
            event = Event(
                title=title,
                description=description,
                start_date=start_date,
                end_date=end_date,
                host_handle=host_handle,
            )
            session.add(event)
            session.commit()
            event_id = event.id
    except SQLAlchemyError as e:
        raise StorageFailure(f"Could not create event {title!r}", operation="create_event") from e
    logger.info(f"Created event {event_id} hosted by {host_handle}")
    return event_id
