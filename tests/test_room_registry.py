"""
Tests for the Room Registry

Membership bookkeeping for event chat rooms.
"""

from relay import RoomRegistry


class FakeSession:
    """Stand-in for a connection session."""

    def __init__(self, name):
        self.name = name

    def __repr__(self):
        return self.name


class TestRoomRegistryJoin:
    """Tests for joining rooms."""

    def test_join_creates_room_on_demand(self):
        """Test that joining an unknown room creates it."""
        registry = RoomRegistry()
        a = FakeSession("a")

        registry.join("42", a)

        assert "42" in registry
        assert registry.members_of("42") == {a}

    def test_join_is_idempotent(self):
        """Test that joining twice leaves a single membership."""
        registry = RoomRegistry()
        a = FakeSession("a")

        registry.join("42", a)
        registry.join("42", a)

        assert len(registry.members_of("42")) == 1

    def test_join_arbitrary_room_id_succeeds(self):
        """Test that any room id is accepted without validation."""
        registry = RoomRegistry()
        registry.join("not-an-event", FakeSession("a"))
        assert registry.rooms() == ["not-an-event"]

    def test_rooms_are_independent(self):
        """Test that members of one room do not appear in another."""
        registry = RoomRegistry()
        a, b = FakeSession("a"), FakeSession("b")

        registry.join("1", a)
        registry.join("2", b)

        assert registry.members_of("1") == {a}
        assert registry.members_of("2") == {b}
        assert len(registry) == 2


class TestRoomRegistryLeave:
    """Tests for leaving rooms."""

    def test_leave_removes_member(self):
        """Test that leave removes only the given session."""
        registry = RoomRegistry()
        a, b = FakeSession("a"), FakeSession("b")
        registry.join("42", a)
        registry.join("42", b)

        registry.leave("42", a)

        assert registry.members_of("42") == {b}

    def test_last_leave_discards_room(self):
        """Test that a room without members is dropped."""
        registry = RoomRegistry()
        a = FakeSession("a")
        registry.join("42", a)

        registry.leave("42", a)

        assert "42" not in registry
        assert len(registry) == 0

    def test_leave_unknown_room_is_noop(self):
        """Test that leaving a room that does not exist does nothing."""
        registry = RoomRegistry()
        registry.leave("missing", FakeSession("a"))
        assert len(registry) == 0

    def test_leave_all(self):
        """Test that leave_all removes a session everywhere."""
        registry = RoomRegistry()
        a, b = FakeSession("a"), FakeSession("b")
        registry.join("1", a)
        registry.join("2", a)
        registry.join("2", b)

        left = registry.leave_all(a)

        assert sorted(left) == ["1", "2"]
        assert "1" not in registry
        assert registry.members_of("2") == {b}

    def test_clear(self):
        """Test that clear drops every room."""
        registry = RoomRegistry()
        registry.join("1", FakeSession("a"))
        registry.clear()
        assert registry.rooms() == []


class TestMembersSnapshot:
    """Tests for members_of snapshots."""

    def test_snapshot_does_not_follow_later_changes(self):
        """Test that a snapshot is unaffected by later joins and leaves."""
        registry = RoomRegistry()
        a, b = FakeSession("a"), FakeSession("b")
        registry.join("42", a)

        snapshot = registry.members_of("42")
        registry.join("42", b)
        registry.leave("42", a)

        assert snapshot == {a}
        assert registry.members_of("42") == {b}

    def test_unknown_room_has_no_members(self):
        """Test members_of for a room nobody joined."""
        registry = RoomRegistry()
        assert registry.members_of("nope") == frozenset()
