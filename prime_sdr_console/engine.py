"""Headless engine tying backend telemetry to console state.

Owns the latest magnitude frame, the derived signal level, connection status
and outbound control messages. This module must not import UI classes.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Optional

import jsonschema
import numpy as np

from prime_sdr_console.protocol import (
    FRAME_BINS,
    MalformedFrameError,
    build_update_config,
    decode_magnitude_frame,
    parse_text_message,
)
from prime_sdr_console.render.level import signal_level
from prime_sdr_console.state import ConsoleState, ReceiverSettings

LOGGER = logging.getLogger(__name__)

# Shown until the first frame arrives.
INITIAL_FRAME_DB = -100.0

Sender = Callable[[Dict[str, Any]], None]
LevelCallback = Callable[[float], None]
StatusCallback = Callable[[bool], None]


class FrameSlot:
    """Latest-wins holder with exactly one writer (the network path).

    Writers replace the whole array reference; readers take the reference at
    the start of a render pass and never see a partially written frame.
    """

    def __init__(self, n_bins: int = FRAME_BINS, fill_db: float = INITIAL_FRAME_DB) -> None:
        self._frame = np.full(n_bins, fill_db, dtype=np.float32)
        self._generation = 0
        self._lock = threading.Lock()

    def store(self, frame: np.ndarray) -> None:
        frame.setflags(write=False)
        with self._lock:
            self._frame = frame
            self._generation += 1

    def latest(self) -> np.ndarray:
        with self._lock:
            return self._frame

    @property
    def generation(self) -> int:
        return self._generation


class ConsoleEngine:
    """Routes inbound frames and outbound control for one console."""

    def __init__(self, state: ConsoleState) -> None:
        self.state = state
        self.frames = FrameSlot(FRAME_BINS)
        self._level = 0.0
        self._connected = False
        self._sender: Optional[Sender] = None
        self._level_subscribers: list[LevelCallback] = []
        self._status_subscribers: list[StatusCallback] = []
        self._last_advisory: Optional[dict[str, Any]] = None
        self.frames_dropped = 0
        self.state.subscribe_settings(self._on_settings_changed)

    @property
    def signal_level(self) -> float:
        return self._level

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def last_advisory(self) -> Optional[dict[str, Any]]:
        return self._last_advisory

    def attach_sender(self, sender: Optional[Sender]) -> None:
        self._sender = sender

    def subscribe_level(self, callback: LevelCallback) -> None:
        self._level_subscribers.append(callback)

    def subscribe_status(self, callback: StatusCallback) -> None:
        self._status_subscribers.append(callback)

    def control_message(self) -> Dict[str, Any]:
        return build_update_config(self.state.settings)

    def ingest_binary(self, payload: bytes) -> bool:
        """Accept one telemetry message; wrong-length frames are dropped."""

        try:
            frame = decode_magnitude_frame(payload)
        except MalformedFrameError as exc:
            self.frames_dropped += 1
            LOGGER.debug("Dropped telemetry frame: %s", exc)
            return False
        self.frames.store(frame)
        self._level = signal_level(frame)
        self._emit(self._level_subscribers, self._level)
        return True

    def ingest_text(self, text: str) -> None:
        message = parse_text_message(text)
        if message is None:
            LOGGER.debug("Ignored unparsable text message")
            return
        self._last_advisory = message

    def on_connection(self, connected: bool) -> None:
        changed = connected != self._connected
        self._connected = connected
        if changed:
            self._emit(self._status_subscribers, connected)
        if connected:
            # The backend always gets the full state right after connecting.
            self._send_settings(self.state.settings)

    def _on_settings_changed(self, settings: ReceiverSettings) -> None:
        if self._connected:
            self._send_settings(settings)

    def _send_settings(self, settings: ReceiverSettings) -> None:
        try:
            message = build_update_config(settings)
        except jsonschema.ValidationError as exc:
            LOGGER.warning("Control message not sent, invalid settings: %s", exc.message)
            return
        self._send(message)

    def _send(self, message: Dict[str, Any]) -> None:
        if self._sender is None:
            return
        self._sender(message)

    @staticmethod
    def _emit(callbacks: list, value: object) -> None:
        for callback in list(callbacks):
            try:
                callback(value)
            except Exception:
                LOGGER.exception("Engine subscriber failed")
