"""WebSocket handler of the loopback demo backend."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from prime_sdr_console.protocol import encode_magnitude_frame, parse_control_message
from prime_sdr_console.server.backend import DemoBackend

LOGGER = logging.getLogger(__name__)

router = APIRouter()


async def _receive_control(websocket: WebSocket, backend: DemoBackend) -> None:
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            raise WebSocketDisconnect(message.get("code", 1000))
        text = message.get("text")
        if text is None:
            continue
        config = parse_control_message(text)
        if config is None:
            # Malformed control messages are ignored.
            LOGGER.debug("Ignored control message: %.80s", text)
            continue
        backend.apply(config)


async def _stream_frames(websocket: WebSocket, backend: DemoBackend) -> None:
    while True:
        if backend.playing:
            frame = backend.next_frame()
            await websocket.send_bytes(encode_magnitude_frame(frame))
        await asyncio.sleep(backend.frame_interval_s)


@router.websocket("/")
async def stream(websocket: WebSocket) -> None:
    await websocket.accept()
    backend: DemoBackend = websocket.app.state.backend
    LOGGER.info("Console connected")
    tasks = [
        asyncio.ensure_future(_receive_control(websocket, backend)),
        asyncio.ensure_future(_stream_frames(websocket, backend)),
    ]
    try:
        done, _pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        for task in done:
            exc = task.exception()
            if exc is not None and not isinstance(exc, WebSocketDisconnect):
                LOGGER.warning("Stream to console ended: %s", exc)
    finally:
        for task in tasks:
            task.cancel()
        LOGGER.info("Console disconnected")
