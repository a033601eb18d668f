"""Band scanner stepping through a fixed range.

The scanner advances one tuning step per tick and wraps at the top of the
range. Signal detection is simulated: each tick locks onto the frequency it
just reached with a fixed probability. This module must not import UI classes.
"""

from __future__ import annotations

import random
from typing import Optional

SCAN_START_HZ = 144_000_000
SCAN_STOP_HZ = 148_000_000
SCAN_INTERVAL_MS = 100


class FrequencyScanner:
    def __init__(
        self,
        start_hz: int = SCAN_START_HZ,
        stop_hz: int = SCAN_STOP_HZ,
        lock_probability: float = 0.05,
        rng: Optional[random.Random] = None,
    ) -> None:
        if stop_hz <= start_hz:
            raise ValueError("stop_hz must be above start_hz")
        self.start_hz = int(start_hz)
        self.stop_hz = int(stop_hz)
        self.lock_probability = float(lock_probability)
        self._rng = rng or random.Random()
        self.current_hz = self.start_hz
        self.active = False

    def start(self) -> None:
        self.active = True

    def pause(self) -> None:
        self.active = False

    def stop(self) -> None:
        self.active = False
        self.current_hz = self.start_hz

    def tick(self, step_hz: int) -> Optional[int]:
        """Advance one step; return a frequency to tune to when a lock fires."""

        if not self.active:
            return None
        next_hz = self.current_hz + int(step_hz)
        if next_hz > self.stop_hz:
            next_hz = self.start_hz
        self.current_hz = next_hz
        # Lock onto the frequency shown for this tick, not the previous one.
        if self._rng.random() < self.lock_probability:
            return self.current_hz
        return None
