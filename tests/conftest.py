from datetime import datetime, timezone

import pytest
from websockets.exceptions import ConnectionClosed

from store import (
    create_db_engine,
    create_event,
    create_session_factory,
    create_tables,
    create_user,
)


class MockWebSocket:
    """Mock WebSocket for testing."""

    def __init__(self, incoming=None):
        self.sent_messages = []
        self.closed = False
        self._incoming = list(incoming or [])

    async def send(self, message):
        if self.closed:
            raise ConnectionClosed(None, None)
        self.sent_messages.append(message)

    async def close(self):
        self.closed = True

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for frame in self._incoming:
            yield frame


def make_comment_dict(comment_id=7, content="hi", handle="alice", name="Alice"):
    return {
        "id": comment_id,
        "content": content,
        "createdAt": "2026-10-19T10:00:00+00:00",
        "userHandle": handle,
        "displayName": name,
    }


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://")
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def event_id(session_factory):
    """An event hosted by alice, with users alice and bob."""
    create_user(session_factory, "alice", "Alice")
    create_user(session_factory, "bob", "Bob")
    return create_event(
        session_factory,
        "Board games night",
        "alice",
        start_date=datetime(2026, 11, 1, 18, 0, tzinfo=timezone.utc),
        end_date=datetime(2026, 11, 1, 22, 0, tzinfo=timezone.utc),
    )
