import json
import logging
import math
from typing import Any

import anyio
from fastapi import WebSocket, WebSocketDisconnect
from fastapi.websockets import WebSocketState

from ..models import (
    Envelope,
    GameStateRequest,
    JoinRoomRequest,
    SendMessageRequest,
    SendToHostRequest,
)
from ..rooms import ConnectionRouter
from ..rooms.errors import InvalidMessageFormat, RelayError, UnknownMessageType

log = logging.getLogger(__name__)


class WebSocketChannel:
    """Outbound side of one socket.

    ``send`` only queues; ``pump`` writes the queue to the socket from its own
    task. ``close`` lets queued messages drain, then closes the socket.
    """

    def __init__(self, websocket: WebSocket):
        self.websocket = websocket
        self.closed = False
        self._send_stream, self._receive_stream = anyio.create_memory_object_stream(
            max_buffer_size=math.inf
        )

    def send(self, message: Any) -> None:
        if self.closed:
            log.debug(f"Dropping {message!r} for closed channel")
            return
        try:
            self._send_stream.send_nowait(message)
        except anyio.BrokenResourceError:
            # pump already gave up on the socket
            log.debug(f"Dropping {message!r} for a socket that stopped reading")
            self.closed = True

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._send_stream.close()

    async def pump(self) -> None:
        async with self._receive_stream:
            async for message in self._receive_stream:
                if self.websocket.client_state != WebSocketState.CONNECTED:
                    break
                try:
                    await self.websocket.send_json(message)
                except (WebSocketDisconnect, RuntimeError) as e:
                    log.warning(f"Could not deliver message: {e}")
                    break

        if (
            self.websocket.application_state == WebSocketState.CONNECTED
            and self.websocket.client_state == WebSocketState.CONNECTED
        ):
            await self.websocket.close()


class WebSocketHandler:
    """Handles WebSocket message processing and communication"""

    @staticmethod
    async def handle_messages(
            websocket: WebSocket,
            channel: WebSocketChannel,
            router: ConnectionRouter,
    ) -> None:
        """Main message handling loop for WebSocket connections"""
        try:
            while True:
                frame = await websocket.receive()
                if frame["type"] == "websocket.disconnect":
                    break
                message = WebSocketHandler.decode_frame(frame)
                if message is None:
                    channel.send(InvalidMessageFormat().to_message())
                    continue
                WebSocketHandler.process_message(message, channel, router)
        finally:
            channel.close()
            router.on_disconnect(channel)

    @staticmethod
    def decode_frame(frame: dict) -> str | None:
        """Text of a text or binary frame, None if it is not UTF-8"""
        if frame.get("text") is not None:
            return frame["text"]
        try:
            return (frame.get("bytes") or b"").decode("utf-8")
        except UnicodeDecodeError as e:
            log.error(f"Undecodable binary frame: {e}")
            return None

    @staticmethod
    def process_message(
            message: str,
            channel: WebSocketChannel,
            router: ConnectionRouter,
    ) -> None:
        """Parse one envelope and run it to completion against the router"""
        try:
            envelope = Envelope.model_validate(json.loads(message))
            handler = WebSocketHandler.HANDLERS.get(envelope.type)
            if handler is None:
                raise UnknownMessageType()
            handler(envelope.data or {}, channel, router)
        except RelayError as e:
            log.info(f"Rejected {message[:80]!r}: {e.message}")
            channel.send(e.to_message())
        except (json.JSONDecodeError, ValueError) as e:
            log.error(f"Error processing message: {e}")
            channel.send(InvalidMessageFormat().to_message())
        except Exception:
            log.exception("Unexpected error while handling message")
            channel.send(InvalidMessageFormat().to_message())

    @staticmethod
    def _handle_create_room(data: dict, channel: WebSocketChannel, router: ConnectionRouter) -> None:
        router.create_room(channel)

    @staticmethod
    def _handle_destroy_room(data: dict, channel: WebSocketChannel, router: ConnectionRouter) -> None:
        router.destroy_room(channel)

    @staticmethod
    def _handle_join_room(data: dict, channel: WebSocketChannel, router: ConnectionRouter) -> None:
        request = JoinRoomRequest.model_validate(data)
        router.join_room(channel, request.room_id, request.name)

    @staticmethod
    def _handle_send_message(data: dict, channel: WebSocketChannel, router: ConnectionRouter) -> None:
        request = SendMessageRequest.model_validate(data)
        router.send_message(channel, request.client_name, request.message)

    @staticmethod
    def _handle_send_to_host(data: dict, channel: WebSocketChannel, router: ConnectionRouter) -> None:
        request = SendToHostRequest.model_validate(data)
        router.send_to_host(channel, request.message)

    @staticmethod
    def _handle_game_state(data: dict, channel: WebSocketChannel, router: ConnectionRouter) -> None:
        request = GameStateRequest.model_validate(data)
        router.set_game_state(channel, request.state)

    @staticmethod
    def _handle_leave_room(data: dict, channel: WebSocketChannel, router: ConnectionRouter) -> None:
        router.leave_room(channel)

    @staticmethod
    def _handle_start_game(data: dict, channel: WebSocketChannel, router: ConnectionRouter) -> None:
        router.start_game(channel)

    HANDLERS = {
        "createRoom": _handle_create_room,
        "destroyRoom": _handle_destroy_room,
        "joinRoom": _handle_join_room,
        "sendMessage": _handle_send_message,
        "sendToHost": _handle_send_to_host,
        "gameState": _handle_game_state,
        "leaveRoom": _handle_leave_room,
        "startGame": _handle_start_game,
    }
