import secrets
import string
from typing import Iterator

from ..config import ROOM_ID_LENGTH
from ..models import Channel
from .room_state import RoomPhase, RoomState

import logging

log = logging.getLogger(__name__)

ROOM_ID_ALPHABET = string.ascii_uppercase


class RoomRegistry:
    """Room id -> room state. Knows nothing about connection records."""

    def __init__(self, room_id_length: int = ROOM_ID_LENGTH):
        self.room_id_length = room_id_length
        self.rooms: dict[str, RoomState] = {}

    def __len__(self) -> int:
        return len(self.rooms)

    def __iter__(self) -> Iterator[RoomState]:
        return iter(list(self.rooms.values()))

    def _new_room_id(self) -> str:
        while True:
            room_id = "".join(
                secrets.choice(ROOM_ID_ALPHABET) for _ in range(self.room_id_length)
            )
            if room_id not in self.rooms:
                return room_id

    def create_room(self, host: Channel) -> str:
        room_id = self._new_room_id()
        self.rooms[room_id] = RoomState(room_id, host)
        return room_id

    def destroy_room(self, room_id: str) -> None:
        if self.rooms.pop(room_id, None) is not None:
            log.info(f"Room {room_id} removed")

    def set_phase(self, room_id: str, phase: RoomPhase | str) -> None:
        room = self.rooms.get(room_id)
        if room is None:
            return
        room.state = phase.value if isinstance(phase, RoomPhase) else phase
        log.info(f"Room {room_id} state set to {room.state!r}")

    def get_room(self, room_id: str) -> RoomState | None:
        return self.rooms.get(room_id)
