"""
Tests for the Comment Persistence Bridge

Tests cover:
- Content length boundaries
- Handle and event id validation
- Storage failures for unknown events and users
- History ordering and the shape of stored comments
"""

import pytest

from store import (
    MAX_COMMENT_LENGTH,
    CommentBridge,
    StorageFailure,
    ValidationError,
)


@pytest.fixture
def bridge(session_factory):
    return CommentBridge(session_factory)


class TestCreateComment:
    """Tests for create_comment."""

    def test_create_comment(self, bridge, event_id):
        """Test that a stored comment carries store-assigned fields."""
        comment = bridge.create_comment(event_id, "alice", "hi")

        assert comment.id >= 1
        assert comment.content == "hi"
        assert comment.user_handle == "alice"
        assert comment.display_name == "Alice"
        assert comment.created_at.endswith("+00:00")

    def test_ids_increase(self, bridge, event_id):
        """Test that every comment gets a fresh id."""
        first = bridge.create_comment(event_id, "alice", "one")
        second = bridge.create_comment(event_id, "bob", "two")
        assert second.id > first.id

    def test_single_character_is_accepted(self, bridge, event_id):
        """Test the lower length bound."""
        comment = bridge.create_comment(event_id, "alice", "x")
        assert comment.content == "x"

    def test_max_length_is_accepted(self, bridge, event_id):
        """Test the upper length bound."""
        content = "a" * MAX_COMMENT_LENGTH
        comment = bridge.create_comment(event_id, "alice", content)
        assert len(comment.content) == MAX_COMMENT_LENGTH

    def test_empty_content_is_rejected(self, bridge, event_id):
        """Test that an empty comment never reaches the store."""
        with pytest.raises(ValidationError) as exc_info:
            bridge.create_comment(event_id, "alice", "")

        assert "content" in exc_info.value.field_errors
        assert bridge.list_comments(event_id) == []

    def test_too_long_content_is_rejected(self, bridge, event_id):
        """Test that 501 characters are refused."""
        with pytest.raises(ValidationError) as exc_info:
            bridge.create_comment(event_id, "alice", "a" * (MAX_COMMENT_LENGTH + 1))

        assert "content" in exc_info.value.field_errors
        assert bridge.list_comments(event_id) == []

    def test_empty_handle_is_rejected(self, bridge, event_id):
        """Test that an anonymous comment is refused."""
        with pytest.raises(ValidationError) as exc_info:
            bridge.create_comment(event_id, "", "hi")
        assert "userHandle" in exc_info.value.field_errors

    def test_all_field_errors_are_collected(self, bridge, event_id):
        """Test that both bad fields are reported at once."""
        with pytest.raises(ValidationError) as exc_info:
            bridge.create_comment(event_id, "", "")
        assert set(exc_info.value.field_errors) == {"content", "userHandle"}

    def test_non_integer_event_id_is_rejected(self, bridge):
        """Test that the event id must be an integer."""
        with pytest.raises(ValidationError) as exc_info:
            bridge.create_comment("abc", "alice", "hi")
        assert exc_info.value.field_errors == {"eventId": "Invalid Event ID"}

    def test_string_event_id_is_accepted(self, bridge, event_id):
        """Test that a decimal string event id is coerced."""
        comment = bridge.create_comment(str(event_id), "alice", "hi")
        assert bridge.list_comments(event_id) == [comment]

    def test_unknown_event_is_storage_failure(self, bridge, event_id):
        """Test that a missing event fails the write."""
        with pytest.raises(StorageFailure) as exc_info:
            bridge.create_comment(event_id + 1000, "alice", "hi")
        assert exc_info.value.operation == "create_comment"

    def test_unknown_user_is_storage_failure(self, bridge, event_id):
        """Test that a missing user fails the write."""
        with pytest.raises(StorageFailure):
            bridge.create_comment(event_id, "mallory", "hi")
        assert bridge.list_comments(event_id) == []


class TestListComments:
    """Tests for list_comments."""

    def test_empty_history(self, bridge, event_id):
        """Test listing an event without comments."""
        assert bridge.list_comments(event_id) == []

    def test_history_is_oldest_first(self, bridge, event_id):
        """Test that history is ordered by creation."""
        for i in range(5):
            bridge.create_comment(event_id, "alice" if i % 2 else "bob", f"m{i}")

        history = bridge.list_comments(event_id)

        assert [c.content for c in history] == ["m0", "m1", "m2", "m3", "m4"]
        assert [c.id for c in history] == sorted(c.id for c in history)

    def test_history_matches_created_comment(self, bridge, event_id):
        """Test that a listed comment equals what create_comment returned."""
        created = bridge.create_comment(event_id, "bob", "see you there")
        assert bridge.list_comments(event_id) == [created]

    def test_history_is_scoped_to_event(self, bridge, event_id, session_factory):
        """Test that comments of other events are not listed."""
        from store import create_event

        other = create_event(session_factory, "Other", "bob")
        bridge.create_comment(event_id, "alice", "mine")
        bridge.create_comment(other, "bob", "theirs")

        assert [c.content for c in bridge.list_comments(event_id)] == ["mine"]
        assert [c.content for c in bridge.list_comments(other)] == ["theirs"]


def test_envelope_wire_form(bridge, event_id):
    """Test the camelCase wire representation."""
    comment = bridge.create_comment(event_id, "alice", "hi")

    assert comment.to_dict() == {
        "id": comment.id,
        "content": "hi",
        "createdAt": comment.created_at,
        "userHandle": "alice",
        "displayName": "Alice",
    }
