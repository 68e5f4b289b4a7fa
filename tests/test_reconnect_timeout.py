"""Tests for releasing mid-game slots whose client never came back."""

import asyncio

import pytest

from hostrelay.rooms import ConnectionRouter, RoomRegistry

from .conftest import FakeChannel, assert_invariants

TIMEOUT = 0.05


@pytest.fixture
def timed_router() -> ConnectionRouter:
    return ConnectionRouter(registry=RoomRegistry(), reconnect_timeout=TIMEOUT)


def start_with_player(router: ConnectionRouter, name: str = "carol"):
    host = FakeChannel("host")
    room_id = router.create_room(host)
    player = FakeChannel(name)
    router.join_room(player, room_id, name)
    router.start_game(host)
    host.clear()
    return host, room_id, player


class TestReconnectTimeout:

    @pytest.mark.asyncio
    async def test_slot_released_after_timeout(self, timed_router):
        host, room_id, carol = start_with_player(timed_router)

        timed_router.on_disconnect(carol)
        await asyncio.sleep(TIMEOUT * 4)

        room = timed_router.registry.get_room(room_id)
        assert room.client_count == 0
        assert timed_router.connection_for(carol) is None
        assert host.sent == [{"type": "clientLeft", "name": "carol"}]
        assert_invariants(timed_router)

    @pytest.mark.asyncio
    async def test_takeover_cancels_release(self, timed_router):
        host, room_id, carol = start_with_player(timed_router)

        timed_router.on_disconnect(carol)
        carol_again = FakeChannel("carol-again")
        timed_router.join_room(carol_again, room_id, "carol")
        await asyncio.sleep(TIMEOUT * 4)

        room = timed_router.registry.get_room(room_id)
        assert room.clients == {carol_again}
        assert timed_router.connection_for(carol_again).alive
        assert host.sent == [{"type": "refreshClient", "name": "carol"}]

    @pytest.mark.asyncio
    async def test_room_destruction_cancels_release(self, timed_router):
        host, room_id, carol = start_with_player(timed_router)

        timed_router.on_disconnect(carol)
        timed_router.destroy_room(host)
        await asyncio.sleep(TIMEOUT * 4)

        assert timed_router.registry.get_room(room_id) is None
        assert host.sent == [{"type": "roomDestroyed"}]

    @pytest.mark.asyncio
    async def test_no_timeout_keeps_slot(self):
        router = ConnectionRouter(registry=RoomRegistry(), reconnect_timeout=0)
        host, room_id, carol = start_with_player(router)

        router.on_disconnect(carol)
        await asyncio.sleep(TIMEOUT * 2)

        assert router.registry.get_room(room_id).client_count == 1
        assert router.connection_for(carol).alive is False
