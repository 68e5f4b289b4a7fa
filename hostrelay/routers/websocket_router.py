import logging

import anyio
from fastapi import APIRouter, WebSocket

from ..dependencies import RelayDep
from .websocket_handler import WebSocketChannel, WebSocketHandler

log = logging.getLogger(__name__)
router = APIRouter()


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket, relay: RelayDep) -> None:
    """Main WebSocket endpoint; the first message decides host or client"""
    await websocket.accept()
    channel = WebSocketChannel(websocket)
    log.debug(f"Accepted socket from {websocket.client}")

    try:
        # Start concurrent tasks for inbound handling and outbound delivery
        async with anyio.create_task_group() as task_group:

            async def run_message_handler() -> None:
                """Task to handle incoming WebSocket messages"""
                await WebSocketHandler.handle_messages(
                    websocket=websocket,
                    channel=channel,
                    router=relay,
                )
                task_group.cancel_scope.cancel()

            task_group.start_soon(run_message_handler)

            # Drain this socket's outbound queue until it is closed
            await channel.pump()
            task_group.cancel_scope.cancel()

    except Exception as e:
        log.error(f"WebSocket error for {websocket.client}: {e}")
        raise
