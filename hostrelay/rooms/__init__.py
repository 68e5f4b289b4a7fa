from .room_state import RoomPhase, RoomState
from .registry import RoomRegistry
from .router import ConnectionRouter

__all__ = ["RoomPhase", "RoomState", "RoomRegistry", "ConnectionRouter"]
