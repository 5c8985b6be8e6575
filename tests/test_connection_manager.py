"""Tests for ConnectionManager fan-out, driven with fake sockets on one loop.

Frames on the wire:
    server -> client: {"type": "<event>", "data": ...}
"""
import pytest

from chatrelay.services.connection_manager import ConnectionManager

ROOM_A = "11111111-1111-1111-1111-111111111111"
ROOM_B = "22222222-2222-2222-2222-222222222222"


class FakeWebSocket:
    """Records outbound frames; raises on send once `failing` is set."""

    def __init__(self):
        self.accepted = False
        self.failing = False
        self.frames = []

    async def accept(self):
        self.accepted = True

    async def send_json(self, data):
        if self.failing:
            raise RuntimeError("socket is closed")
        self.frames.append(data)

    def take(self):
        frames, self.frames = self.frames, []
        return [(f["type"], f["data"]) for f in frames]


@pytest.fixture
def manager(router):
    return ConnectionManager(router=router)


async def open_socket(manager):
    ws = FakeWebSocket()
    conn_id = await manager.connect(ws)
    return conn_id, ws


async def joined(manager, room_id, username):
    conn_id, ws = await open_socket(manager)
    await manager.join_room(conn_id, room_id, username)
    return conn_id, ws


@pytest.mark.asyncio
async def test_connect_accepts_and_registers(manager):
    conn_id, ws = await open_socket(manager)
    assert ws.accepted
    assert manager.connections[conn_id] is ws


@pytest.mark.asyncio
async def test_two_clients_chat_without_echo(manager):
    alice, alice_ws = await joined(manager, ROOM_A, "alice")
    bob, bob_ws = await joined(manager, ROOM_A, "bob")

    assert alice_ws.take() == [
        ("chat-history", []),
        ("update-users", ["alice"]),
        ("update-users", ["alice", "bob"]),
    ]
    assert bob_ws.take() == [
        ("chat-history", []),
        ("update-users", ["alice", "bob"]),
    ]

    await manager.send_message(alice, ROOM_A, "hi bob", "alice", "12:00")

    assert bob_ws.take() == [
        ("receive-message", {"message": "hi bob", "username": "alice", "timestamp": "12:00"}),
    ]
    assert alice_ws.take() == []


@pytest.mark.asyncio
async def test_late_joiner_gets_backfill(manager):
    alice, _ = await joined(manager, ROOM_A, "alice")
    await manager.send_message(alice, ROOM_A, "hi", "alice")

    _, bob_ws = await joined(manager, ROOM_A, "bob")

    assert bob_ws.take()[0] == (
        "chat-history",
        [{"message": "hi", "username": "alice", "timestamp": "server-time"}],
    )


@pytest.mark.asyncio
async def test_disconnect_updates_users_and_cleans_up(manager, router):
    alice, alice_ws = await joined(manager, ROOM_A, "alice")
    bob, _ = await joined(manager, ROOM_A, "bob")
    alice_ws.take()

    await manager.disconnect(bob)

    assert alice_ws.take() == [("update-users", ["alice"])]
    assert bob not in manager.connections

    await manager.disconnect(alice)

    assert manager.connections == {}
    assert ROOM_A not in router.rooms
    assert len(router.sessions) == 0


@pytest.mark.asyncio
async def test_switching_rooms_notifies_old_room(manager):
    alice, alice_ws = await joined(manager, ROOM_A, "alice")
    bob, bob_ws = await joined(manager, ROOM_A, "bob")
    alice_ws.take()
    bob_ws.take()

    await manager.join_room(bob, ROOM_B, "bob")

    assert alice_ws.take() == [("update-users", ["alice"])]
    assert bob_ws.take() == [("chat-history", []), ("update-users", ["bob"])]


@pytest.mark.asyncio
async def test_spoofed_send_only_answers_sender(manager, router):
    alice, alice_ws = await joined(manager, ROOM_A, "alice")
    bob, bob_ws = await joined(manager, ROOM_A, "bob")
    alice_ws.take()
    bob_ws.take()

    await manager.send_message(bob, ROOM_A, "it's me, alice", "alice")

    assert bob_ws.take() == [("room-error", {"message": "Not joined to this room"})]
    assert alice_ws.take() == []
    assert router.history.size(ROOM_A) == 0


# =============================================================================
# Failed sends
# =============================================================================


@pytest.mark.asyncio
async def test_failed_send_drops_connection_and_updates_survivors(manager, router):
    alice, alice_ws = await joined(manager, ROOM_A, "alice")
    alice_ws.failing = True

    bob, bob_ws = await joined(manager, ROOM_A, "bob")

    assert bob_ws.take() == [
        ("chat-history", []),
        ("update-users", ["alice", "bob"]),
        ("update-users", ["bob"]),
    ]
    assert alice not in manager.connections
    assert alice not in router.sessions
    assert router.rooms.members(ROOM_A) == ["bob"]


@pytest.mark.asyncio
async def test_failed_send_during_message_fanout(manager, router):
    alice, _ = await joined(manager, ROOM_A, "alice")
    bob, bob_ws = await joined(manager, ROOM_A, "bob")
    carol, carol_ws = await joined(manager, ROOM_A, "carol")
    bob_ws.take()
    carol_ws.failing = True

    await manager.send_message(alice, ROOM_A, "hello all", "alice")

    assert bob_ws.take() == [
        ("receive-message", {"message": "hello all", "username": "alice", "timestamp": "server-time"}),
        ("update-users", ["alice", "bob"]),
    ]
    assert router.rooms.members(ROOM_A) == ["alice", "bob"]
    assert carol not in router.sessions


@pytest.mark.asyncio
async def test_events_after_drop_do_not_recreate_session(manager, router):
    alice, alice_ws = await joined(manager, ROOM_A, "alice")
    alice_ws.failing = True
    bob, _ = await joined(manager, ROOM_A, "bob")

    # Frames the dropped socket had already buffered
    await manager.join_room(alice, ROOM_A, "alice")
    await manager.send_message(alice, ROOM_A, "late", "alice")
    await manager.disconnect(alice)

    assert router.rooms.members(ROOM_A) == ["bob"]
    assert len(router.sessions) == 1
    assert router.history.size(ROOM_A) == 0


@pytest.mark.asyncio
async def test_disconnect_clears_session_even_without_socket_entry(manager, router):
    alice, _ = await joined(manager, ROOM_A, "alice")
    del manager.connections[alice]

    await manager.disconnect(alice)

    assert alice not in router.sessions
    assert ROOM_A not in router.rooms
