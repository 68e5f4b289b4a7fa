from .connection import Channel, ClientConnection, Connection, HostConnection
from .room import ClientInfo, RoomDetail, RoomSummary
from .schemas import (
    Envelope,
    GameStateRequest,
    JoinRoomRequest,
    SendMessageRequest,
    SendToHostRequest,
)

__all__ = [
    "Channel",
    "ClientConnection",
    "Connection",
    "HostConnection",
    "ClientInfo",
    "RoomDetail",
    "RoomSummary",
    "Envelope",
    "GameStateRequest",
    "JoinRoomRequest",
    "SendMessageRequest",
    "SendToHostRequest",
]
