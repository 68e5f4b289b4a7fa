from enum import Enum

from ..models import Channel

import logging

log = logging.getLogger(__name__)


class RoomPhase(str, Enum):
    LOBBY = "LOBBY"
    PLAYING = "playing"


class RoomState:

    def __init__(self, room_id: str, host: Channel):
        log.info(f"Creating new room state for room {room_id}")
        self.room_id = room_id
        self.host = host
        self.clients: set[Channel] = set()
        # free-form, the host may overwrite it with any label
        self.state: str = RoomPhase.LOBBY.value

    @property
    def client_count(self) -> int:
        return len(self.clients)

    @property
    def phase(self) -> RoomPhase:
        if self.state == RoomPhase.LOBBY.value:
            return RoomPhase.LOBBY
        return RoomPhase.PLAYING

    @property
    def in_lobby(self) -> bool:
        return self.phase is RoomPhase.LOBBY
