from pydantic import BaseModel


class ClientInfo(BaseModel):
    name: str
    alive: bool


class RoomSummary(BaseModel):
    room_id: str
    state: str
    phase: str
    client_count: int


class RoomDetail(RoomSummary):
    clients: list[ClientInfo]
