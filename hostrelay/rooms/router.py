import asyncio
from typing import Any

from ..config import RECONNECT_TIMEOUT
from ..models import Channel, ClientConnection, Connection, HostConnection
from .errors import (
    AlreadyInRoom,
    ConnectionNotFound,
    GameInProgress,
    NameInUse,
    RoomNotFound,
    TargetDisconnected,
    TargetNotFound,
    Unauthorized,
)
from .registry import RoomRegistry
from .room_state import RoomPhase, RoomState

import logging

log = logging.getLogger(__name__)


class ConnectionRouter:
    """Maps live channels to their role in a room and routes between them.

    Every public operation is synchronous and finishes before the next
    inbound message is handled, so the connection map and the registry never
    need a lock on a single event loop. Failures are raised as ``RelayError``
    subclasses and leave state untouched.
    """

    def __init__(
        self,
        registry: RoomRegistry | None = None,
        reconnect_timeout: float = RECONNECT_TIMEOUT,
    ):
        self.registry = registry if registry is not None else RoomRegistry()
        self.reconnect_timeout = reconnect_timeout
        self.connections: dict[Channel, Connection] = {}
        self._evictions: dict[Channel, asyncio.Task] = {}

    def connection_for(self, conn: Channel) -> Connection | None:
        return self.connections.get(conn)

    def room_for(self, conn: Channel) -> RoomState | None:
        connection = self.connections.get(conn)
        if connection is None:
            return None
        return self.registry.get_room(connection.room_id)

    def roster(self, room: RoomState) -> list[ClientConnection]:
        records = [self.connections.get(client) for client in room.clients]
        return [r for r in records if isinstance(r, ClientConnection)]

    def create_room(self, conn: Channel) -> str:
        if conn in self.connections:
            raise AlreadyInRoom()

        room_id = self.registry.create_room(conn)
        self.connections[conn] = HostConnection(room_id=room_id)
        log.info(f"Host created room {room_id}")

        conn.send({"type": "roomCreated", "roomId": room_id})
        return room_id

    def destroy_room(self, conn: Channel) -> None:
        connection = self._require_host(conn, "Only hosts can destroy rooms")
        self._teardown(conn, connection.room_id)

    def join_room(self, conn: Channel, room_id: str, name: str) -> None:
        if conn in self.connections:
            raise AlreadyInRoom()

        room = self.registry.get_room(room_id)
        if room is None:
            raise RoomNotFound()

        existing = self._find_client(room, name)
        if existing is not None:
            if not self.connections[existing].alive:
                self._take_over(room, existing, conn, name)
                return
            if room.in_lobby:
                raise NameInUse()
            raise GameInProgress()

        if not room.in_lobby:
            raise GameInProgress()

        self._add_client(room, conn, name)
        log.info(f"Client {name} joined room {room_id}")

        room.host.send({"type": "clientJoined", "name": name})
        conn.send({"type": "joinedRoom", "roomId": room_id, "clients": room.client_count})

    def leave_room(self, conn: Channel) -> None:
        connection = self.connections.get(conn)
        if not isinstance(connection, ClientConnection):
            raise Unauthorized("Only clients can leave rooms")

        room = self.registry.get_room(connection.room_id)
        if room is None:
            return

        room.clients.discard(conn)
        self._forget(conn)
        log.info(f"Client {connection.name} left room {room.room_id}")

        room.host.send({"type": "clientLeft", "name": connection.name})
        conn.send({"type": "leftRoom", "roomId": room.room_id})

    def send_message(self, conn: Channel, target_name: str, payload: Any) -> None:
        room = self.room_for(conn)
        if room is None:
            raise ConnectionNotFound()

        target = self._find_client(room, target_name)
        if target is None:
            raise TargetNotFound()
        if not self.connections[target].alive:
            raise TargetDisconnected()

        target.send(payload)

    def send_to_host(self, conn: Channel, payload: Any) -> None:
        connection = self.connections.get(conn)
        room = self.room_for(conn)
        if room is None:
            raise ConnectionNotFound()

        name = connection.name if isinstance(connection, ClientConnection) else None
        room.host.send({"type": "clientMessage", "name": name, "message": payload})

    def start_game(self, conn: Channel) -> None:
        connection = self._require_host(conn, "Only hosts can start the game")
        room = self.registry.get_room(connection.room_id)
        if room is None:
            return

        self.registry.set_phase(room.room_id, RoomPhase.PLAYING)
        message = {"type": "gameStarted", "roomId": room.room_id}
        for client in list(room.clients):
            client.send(message)
        conn.send(message)

    def set_game_state(self, conn: Channel, state: str) -> None:
        connection = self._require_host(conn, "Only hosts can change the game state")
        room = self.registry.get_room(connection.room_id)
        if room is None:
            return

        self.registry.set_phase(room.room_id, state)
        conn.send({"type": "gameStateChanged", "roomId": room.room_id, "state": room.state})

    def on_disconnect(self, conn: Channel) -> None:
        connection = self.connections.get(conn)
        if connection is None:
            return

        room = self.registry.get_room(connection.room_id)
        if room is None:
            self._forget(conn)
            return

        if isinstance(connection, HostConnection):
            log.info(f"Host of room {room.room_id} disconnected")
            self._teardown(conn, room.room_id)
        elif room.in_lobby:
            room.clients.discard(conn)
            self._forget(conn)
            log.info(f"Client {connection.name} dropped out of lobby {room.room_id}")
            room.host.send({"type": "clientLeft", "name": connection.name})
        else:
            # keep the slot so the same name can take it over
            connection.alive = False
            log.info(f"Client {connection.name} lost connection to room {room.room_id}")
            self._schedule_eviction(conn)

    def close(self) -> None:
        for room in self.registry:
            self._teardown(room.host, room.room_id)
        for task in self._evictions.values():
            task.cancel()
        self._evictions.clear()

    def _require_host(self, conn: Channel, message: str) -> HostConnection:
        connection = self.connections.get(conn)
        if not isinstance(connection, HostConnection):
            raise Unauthorized(message)
        return connection

    def _find_client(self, room: RoomState, name: str) -> Channel | None:
        # linear in the room size
        for client in room.clients:
            connection = self.connections.get(client)
            if isinstance(connection, ClientConnection) and connection.name == name:
                return client
        return None

    def _add_client(self, room: RoomState, conn: Channel, name: str) -> None:
        room.clients.add(conn)
        self.connections[conn] = ClientConnection(room_id=room.room_id, name=name)

    def _take_over(self, room: RoomState, old: Channel, conn: Channel, name: str) -> None:
        room.clients.discard(old)
        self._forget(old)
        self._add_client(room, conn, name)
        log.info(f"Client {name} rejoined room {room.room_id}")

        room.host.send({"type": "refreshClient", "name": name})
        conn.send({"type": "rejoinedRoom", "roomId": room.room_id, "clients": room.client_count})

    def _teardown(self, host: Channel, room_id: str) -> None:
        room = self.registry.get_room(room_id)
        if room is None:
            return

        for client in list(room.clients):
            client.send({"type": "roomDestroyed"})
            self._forget(client)
            client.close()
        room.clients.clear()

        self.registry.destroy_room(room_id)
        self._forget(host)
        log.info(f"Room {room_id} destroyed")

        host.send({"type": "roomDestroyed"})

    def _forget(self, conn: Channel) -> None:
        self.connections.pop(conn, None)
        task = self._evictions.pop(conn, None)
        if task is not None:
            task.cancel()

    def _schedule_eviction(self, conn: Channel) -> None:
        if self.reconnect_timeout <= 0 or conn in self._evictions:
            return
        self._evictions[conn] = asyncio.create_task(self._evict_after_timeout(conn))

    async def _evict_after_timeout(self, conn: Channel) -> None:
        try:
            await asyncio.sleep(self.reconnect_timeout)
        except asyncio.CancelledError:
            log.debug("Eviction cancelled, slot was reclaimed or room closed")
            raise

        self._evictions.pop(conn, None)
        connection = self.connections.get(conn)
        if not isinstance(connection, ClientConnection) or connection.alive:
            return

        room = self.registry.get_room(connection.room_id)
        self.connections.pop(conn, None)
        if room is not None:
            room.clients.discard(conn)
            log.info(f"Client {connection.name} did not return to room {room.room_id}, slot released")
            room.host.send({"type": "clientLeft", "name": connection.name})
