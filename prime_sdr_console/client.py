"""Websocket client thread for the SDR backend.

Runs an asyncio event loop off the UI thread, feeds telemetry into the engine
and retries lost connections after a fixed delay, indefinitely. This module
must not import UI classes.
"""

from __future__ import annotations

import asyncio
import json
import logging
import threading
from typing import Any, Dict, Optional, Union

import websockets
from websockets.exceptions import WebSocketException

from prime_sdr_console.engine import ConsoleEngine

LOGGER = logging.getLogger(__name__)


class BackendClient(threading.Thread):
    def __init__(
        self,
        uri: str,
        engine: ConsoleEngine,
        reconnect_delay_s: float = 3.0,
    ) -> None:
        super().__init__(daemon=True, name="backend-client")
        self.uri = uri
        self.engine = engine
        self.reconnect_delay_s = reconnect_delay_s
        self._running = threading.Event()
        self._running.set()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._ws: Optional[Any] = None
        self._wakeup: Optional[asyncio.Event] = None

    @property
    def running(self) -> bool:
        return self._running.is_set()

    def run(self) -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        self._loop = loop
        try:
            loop.run_until_complete(self._serve())
        finally:
            self._loop = None
            loop.close()

    def stop(self) -> None:
        self._running.clear()
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        try:
            if self._wakeup is not None:
                loop.call_soon_threadsafe(self._wakeup.set)
            ws = self._ws
            if ws is not None:
                asyncio.run_coroutine_threadsafe(ws.close(), loop)
        except RuntimeError:
            # Loop finished between the check and the call.
            pass

    def send_json(self, message: Dict[str, Any]) -> None:
        """Queue a control message; dropped while disconnected."""

        ws = self._ws
        loop = self._loop
        if ws is None or loop is None:
            LOGGER.debug("Control message dropped while disconnected")
            return
        asyncio.run_coroutine_threadsafe(self._send(ws, json.dumps(message)), loop)

    async def _send(self, ws: Any, text: str) -> None:
        try:
            await ws.send(text)
        except WebSocketException as exc:
            LOGGER.debug("Control message not sent: %s", exc)

    async def _serve(self) -> None:
        self._wakeup = asyncio.Event()
        while self._running.is_set():
            try:
                async with websockets.connect(self.uri) as ws:
                    self._ws = ws
                    LOGGER.info("Connected to backend %s", self.uri)
                    self.engine.on_connection(True)
                    async for message in ws:
                        self.dispatch(message)
                LOGGER.warning("Backend %s closed the connection", self.uri)
            except (OSError, asyncio.TimeoutError, WebSocketException) as exc:
                LOGGER.warning("Backend %s unavailable: %s", self.uri, exc)
            finally:
                self._ws = None
                self.engine.on_connection(False)

            if not self._running.is_set():
                break
            try:
                await asyncio.wait_for(self._wakeup.wait(), timeout=self.reconnect_delay_s)
            except asyncio.TimeoutError:
                continue

    def dispatch(self, message: Union[str, bytes]) -> None:
        if isinstance(message, (bytes, bytearray, memoryview)):
            self.engine.ingest_binary(bytes(message))
        else:
            self.engine.ingest_text(message)
