"""Receiver state of the loopback demo backend."""

from __future__ import annotations

import threading
from typing import Any, Dict, Mapping, Optional

import numpy as np

from prime_sdr_console.server.synth import SyntheticSpectrum

# Roughly the refresh rate of a real backend.
DEFAULT_FRAME_RATE_HZ = 20.0


class DemoBackend:
    """Holds the last applied UPDATE_CONFIG and produces frames for it."""

    def __init__(
        self,
        synth: Optional[SyntheticSpectrum] = None,
        frame_rate_hz: float = DEFAULT_FRAME_RATE_HZ,
    ) -> None:
        self.synth = synth or SyntheticSpectrum()
        self.frame_interval_s = 1.0 / max(1.0, float(frame_rate_hz))
        self._lock = threading.Lock()
        self._config: Dict[str, Any] = {
            "frequency": 145_350_000,
            "sampleRate": 1_024_000,
            "playing": False,
        }
        self.frames_sent = 0
        self.updates_applied = 0

    @property
    def playing(self) -> bool:
        return bool(self._config.get("playing", False))

    def config(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self._config)

    def apply(self, config: Mapping[str, Any]) -> None:
        with self._lock:
            self._config.update(config)
            self.updates_applied += 1

    def next_frame(self) -> np.ndarray:
        cfg = self.config()
        frame = self.synth.frame(float(cfg["frequency"]), float(cfg["sampleRate"]))
        self.frames_sent += 1
        return frame
