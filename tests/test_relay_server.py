"""
Tests for the Relay Server

Tests for frame handling and fan-out in the WebSocket relay:
- join_room registers the session
- send_message relays to every other member of the room, never the sender
- disconnected members silently miss comments
- rooms are isolated from each other
- malformed frames are answered with an error frame
"""

import json

import pytest
from websockets.exceptions import ConnectionClosed

from relay import RelayServer, RoomRegistry

from conftest import MockWebSocket, make_comment_dict


def join_frame(room_id):
    return json.dumps({"type": "join_room", "data": {"roomId": room_id}})


def send_frame(room_id, comment):
    return json.dumps(
        {"type": "send_message", "data": {"eventId": room_id, "comment": comment}}
    )


def received(websocket):
    return [json.loads(m) for m in websocket.sent_messages]


@pytest.fixture
def server():
    return RelayServer(RoomRegistry(), "localhost", 0)


async def joined_session(server, room_id):
    websocket = MockWebSocket()
    session = server.open_session(websocket)
    await server.process_message(session, join_frame(room_id))
    return session, websocket


class TestJoinRoom:
    """Tests for join_room handling."""

    @pytest.mark.asyncio
    async def test_join_room_registers_session(self, server):
        """Test that join_room adds the session to the room."""
        session, websocket = await joined_session(server, "42")

        assert session in server.registry.members_of("42")
        assert session.room_id == "42"
        # No acknowledgment is sent
        assert websocket.sent_messages == []

    @pytest.mark.asyncio
    async def test_join_room_twice(self, server):
        """Test that joining twice yields one membership."""
        session, _ = await joined_session(server, "42")
        await server.process_message(session, join_frame("42"))

        assert len(server.registry.members_of("42")) == 1

    @pytest.mark.asyncio
    async def test_join_room_with_numeric_id(self, server):
        """Test that a numeric room id is keyed by its string form."""
        session = server.open_session(MockWebSocket())
        await server.process_message(
            session, json.dumps({"type": "join_room", "data": {"roomId": 42}})
        )
        assert session in server.registry.members_of("42")


class TestRelay:
    """Tests for send_message fan-out."""

    @pytest.mark.asyncio
    async def test_relay_excludes_sender(self, server):
        """Test that the sender never receives its own comment."""
        alice, alice_ws = await joined_session(server, "42")
        bob, bob_ws = await joined_session(server, "42")
        carol, carol_ws = await joined_session(server, "42")

        comment = make_comment_dict()
        await server.process_message(alice, send_frame("42", comment))

        assert alice_ws.sent_messages == []
        assert received(bob_ws) == [{"type": "receive_message", "roomId": "42", "data": comment}]
        assert received(carol_ws) == [{"type": "receive_message", "roomId": "42", "data": comment}]

    @pytest.mark.asyncio
    async def test_relay_returns_delivery_count(self, server):
        """Test that relay reports how many sessions got the payload."""
        alice, _ = await joined_session(server, "42")
        await joined_session(server, "42")
        await joined_session(server, "42")

        delivered = await server.relay("42", {"type": "receive_message"}, alice)

        assert delivered == 2

    @pytest.mark.asyncio
    async def test_relay_to_empty_room(self, server):
        """Test relaying into a room nobody joined."""
        delivered = await server.relay("nobody", {"type": "receive_message"})
        assert delivered == 0

    @pytest.mark.asyncio
    async def test_scenario_room_42(self, server):
        """Test the two-member scenario: B gets comment 7 exactly once, A never."""
        alice, alice_ws = await joined_session(server, "42")
        bob, bob_ws = await joined_session(server, "42")

        comment = make_comment_dict(7, "hi", "alice", "Alice")
        await server.process_message(alice, send_frame("42", comment))

        assert received(bob_ws) == [{"type": "receive_message", "roomId": "42", "data": comment}]
        assert alice_ws.sent_messages == []

    @pytest.mark.asyncio
    async def test_disconnected_member_misses_comment(self, server):
        """Test that a member who left misses the comment silently."""
        alice, _ = await joined_session(server, "42")
        bob, bob_ws = await joined_session(server, "42")

        server.close_session(bob)
        await server.process_message(alice, send_frame("42", make_comment_dict()))

        assert bob_ws.sent_messages == []
        assert bob not in server.registry.members_of("42")

    @pytest.mark.asyncio
    async def test_member_dropping_mid_send_is_a_silent_miss(self, server):
        """Test that ConnectionClosed during fan-out is swallowed."""
        alice, _ = await joined_session(server, "42")
        bob, bob_ws = await joined_session(server, "42")
        carol, carol_ws = await joined_session(server, "42")
        bob_ws.closed = True

        delivered = await server.relay(
            "42", {"type": "receive_message", "data": make_comment_dict()}, alice
        )

        assert delivered == 1
        assert len(carol_ws.sent_messages) == 1

    @pytest.mark.asyncio
    async def test_rooms_are_isolated(self, server):
        """Test that a comment for room 1 never reaches room 2."""
        alice, _ = await joined_session(server, "1")
        bob, bob_ws = await joined_session(server, "1")
        carol, carol_ws = await joined_session(server, "2")

        await server.process_message(alice, send_frame("1", make_comment_dict()))

        assert len(bob_ws.sent_messages) == 1
        assert carol_ws.sent_messages == []

    @pytest.mark.asyncio
    async def test_fifo_per_sender(self, server):
        """Test that comments from one sender arrive in send order."""
        alice, _ = await joined_session(server, "42")
        bob, bob_ws = await joined_session(server, "42")

        for comment_id in (1, 2, 3):
            await server.process_message(
                alice, send_frame("42", make_comment_dict(comment_id, f"m{comment_id}"))
            )

        assert [m["data"]["id"] for m in received(bob_ws)] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_payload_is_forwarded_unchanged(self, server):
        """Test that the relay does not alter the stored comment."""
        alice, _ = await joined_session(server, "42")
        bob, bob_ws = await joined_session(server, "42")
        comment = make_comment_dict(99, "unchanged", "alice", "")

        await server.process_message(alice, send_frame("42", comment))

        assert received(bob_ws)[0]["data"] == comment


class TestMalformedFrames:
    """Tests for frames rejected at the boundary."""

    @pytest.mark.asyncio
    async def test_invalid_json(self, server):
        """Test that invalid JSON gets an error frame."""
        session = server.open_session(MockWebSocket())

        await server.process_message(session, "not json")

        error = received(session.websocket)[0]
        assert error["type"] == "error"
        assert error["data"]["error_code"] == "INVALID_JSON"

    @pytest.mark.asyncio
    async def test_unknown_type(self, server):
        """Test that an unknown frame type gets an error frame."""
        session = server.open_session(MockWebSocket())

        await server.process_message(session, json.dumps({"type": "dance", "data": {}}))

        assert received(session.websocket)[0]["data"]["error_code"] == "UNKNOWN_TYPE"

    @pytest.mark.asyncio
    async def test_comment_without_id_is_not_relayed(self, server):
        """Test that a comment that was never stored is refused."""
        alice, alice_ws = await joined_session(server, "42")
        bob, bob_ws = await joined_session(server, "42")
        comment = make_comment_dict()
        del comment["id"]

        await server.process_message(alice, send_frame("42", comment))

        assert bob_ws.sent_messages == []
        assert received(alice_ws)[0]["data"]["error_code"] == "NOT_PERSISTED"

    @pytest.mark.asyncio
    async def test_join_without_room_id(self, server):
        """Test that join_room requires a room id."""
        session = server.open_session(MockWebSocket())

        await server.process_message(
            session, json.dumps({"type": "join_room", "data": {}})
        )

        assert received(session.websocket)[0]["data"]["error_code"] == "INVALID_EVENT"
        assert len(server.registry) == 0

    @pytest.mark.asyncio
    async def test_non_string_type_keeps_connection(self, server):
        """Test that a list or object type is refused and later frames still work."""
        session = server.open_session(MockWebSocket())

        await server.process_message(session, json.dumps({"type": [], "data": {}}))
        await server.process_message(session, json.dumps({"type": {"a": 1}, "data": {}}))
        await server.process_message(session, join_frame("42"))

        codes = [f["data"]["error_code"] for f in received(session.websocket)]
        assert codes == ["UNKNOWN_TYPE", "UNKNOWN_TYPE"]
        assert session in server.registry.members_of("42")

    @pytest.mark.asyncio
    async def test_deeply_nested_json(self, server):
        """Test that JSON nested past the parser's limit is answered, not raised."""
        session = server.open_session(MockWebSocket())

        await server.process_message(session, "[" * 100000 + "]" * 100000)

        assert received(session.websocket)[0]["data"]["error_code"] == "INVALID_JSON"

    @pytest.mark.asyncio
    async def test_handle_client_answers_non_string_type(self, server):
        """Test that the connection loop survives a frame with a list type."""
        bob, bob_ws = await joined_session(server, "42")
        comment = make_comment_dict()
        alice_ws = MockWebSocket(
            incoming=[
                json.dumps({"type": [], "data": {}}),
                join_frame("42"),
                send_frame("42", comment),
            ]
        )

        await server.handle_client(alice_ws)

        assert received(alice_ws)[0]["data"]["error_code"] == "UNKNOWN_TYPE"
        assert received(bob_ws) == [{"type": "receive_message", "roomId": "42", "data": comment}]


class TestConnectionLifecycle:
    """Tests for handle_client from handshake to teardown."""

    @pytest.mark.asyncio
    async def test_handle_client_cleans_up_on_close(self, server):
        """Test that a finished connection leaves no membership behind."""
        websocket = MockWebSocket(incoming=[join_frame("42")])

        await server.handle_client(websocket)

        assert "42" not in server.registry
        assert server.sessions == {}

    @pytest.mark.asyncio
    async def test_handle_client_relays_between_connections(self, server):
        """Test that a connection's frames reach a member joined earlier."""
        bob, bob_ws = await joined_session(server, "42")
        comment = make_comment_dict()
        alice_ws = MockWebSocket(incoming=[join_frame("42"), send_frame("42", comment)])

        await server.handle_client(alice_ws)

        assert received(bob_ws) == [{"type": "receive_message", "roomId": "42", "data": comment}]
        assert alice_ws.sent_messages == []

    @pytest.mark.asyncio
    async def test_handle_client_survives_connection_closed(self, server):
        """Test that a dropped transport still cleans the registry."""

        class DroppingWebSocket(MockWebSocket):
            async def _iterate(self):
                yield join_frame("42")
                raise ConnectionClosed(None, None)

        await server.handle_client(DroppingWebSocket())

        assert len(server.registry) == 0
