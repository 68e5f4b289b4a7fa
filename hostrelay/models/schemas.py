from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Envelope(BaseModel):
    type: str
    data: Optional[dict[str, Any]] = None


class JoinRoomRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    room_id: str = Field(alias="roomId", min_length=1)
    name: str = Field(min_length=1)


class SendMessageRequest(BaseModel):
    client_name: str
    message: Any = None


class SendToHostRequest(BaseModel):
    message: Any = None


class GameStateRequest(BaseModel):
    state: str = Field(min_length=1)
