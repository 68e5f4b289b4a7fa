from fastapi import APIRouter, HTTPException

from ..dependencies import RelayDep
from ..models import ClientInfo, RoomDetail, RoomSummary
from ..rooms import ConnectionRouter, RoomState

router = APIRouter(tags=["rooms"])


def summarize(room: RoomState) -> RoomSummary:
    return RoomSummary(
        room_id=room.room_id,
        state=room.state,
        phase=room.phase.name.lower(),
        client_count=room.client_count,
    )


def describe(room: RoomState, relay: ConnectionRouter) -> RoomDetail:
    clients = sorted(relay.roster(room), key=lambda c: c.name)
    return RoomDetail(
        **summarize(room).model_dump(),
        clients=[ClientInfo(name=c.name, alive=c.alive) for c in clients],
    )


@router.get("/")
async def root(relay: RelayDep):
    return {"status": "ok", "rooms": len(relay.registry)}


@router.get("/rooms", response_model=list[RoomSummary])
async def get_rooms(relay: RelayDep):
    return [summarize(room) for room in relay.registry]


@router.get("/rooms/{room_id}", response_model=RoomDetail)
async def get_room(room_id: str, relay: RelayDep):
    room = relay.registry.get_room(room_id)
    if room is None:
        raise HTTPException(status_code=404, detail="Room not found")
    return describe(room, relay)
