"""
Shared fixtures for the relay test suite.

The router only needs objects with ``send`` and ``close``; ``FakeChannel``
records what it was sent so tests can assert on the outbound traffic.
"""

import pytest

from hostrelay.models import ClientConnection, HostConnection
from hostrelay.rooms import ConnectionRouter, RoomRegistry


class FakeChannel:
    def __init__(self, label: str = ""):
        self.label = label
        self.sent: list = []
        self.closed = False

    def __repr__(self) -> str:
        return f"<FakeChannel {self.label}>"

    def send(self, message) -> None:
        self.sent.append(message)

    def close(self) -> None:
        self.closed = True

    def types(self) -> list:
        return [m.get("type") for m in self.sent if isinstance(m, dict)]

    def last(self):
        return self.sent[-1]

    def clear(self) -> None:
        self.sent.clear()


def assert_invariants(router: ConnectionRouter) -> None:
    """Every room's host and clients carry records that point back at it."""
    for room in router.registry:
        host = router.connections.get(room.host)
        assert isinstance(host, HostConnection)
        assert host.room_id == room.room_id
        for client in room.clients:
            record = router.connections.get(client)
            assert isinstance(record, ClientConnection)
            assert record.room_id == room.room_id
        if room.in_lobby:
            alive_names = [c.name for c in router.roster(room) if c.alive]
            assert len(alive_names) == len(set(alive_names))


@pytest.fixture
def channel_factory():
    def make(label: str = "") -> FakeChannel:
        return FakeChannel(label)

    return make


@pytest.fixture
def router() -> ConnectionRouter:
    return ConnectionRouter(registry=RoomRegistry(), reconnect_timeout=0)


@pytest.fixture
def host(channel_factory) -> FakeChannel:
    return channel_factory("host")


@pytest.fixture
def room_id(router, host) -> str:
    room_id = router.create_room(host)
    host.clear()
    return room_id
