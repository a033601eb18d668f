"""Synthetic magnitude frames for the loopback demo backend.

Frames are generated directly in dB (noise floor plus a few carriers at fixed
absolute frequencies); nothing here samples or transforms RF data.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from prime_sdr_console.protocol import FRAME_BINS

DEFAULT_CARRIERS_HZ = (145_350_000, 145_500_000, 145_800_000, 439_400_000)


class SyntheticSpectrum:
    def __init__(
        self,
        n_bins: int = FRAME_BINS,
        noise_floor_db: float = -100.0,
        noise_sigma_db: float = 3.0,
        carrier_db: float = -45.0,
        carriers_hz: Sequence[int] = DEFAULT_CARRIERS_HZ,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.n_bins = n_bins
        self.noise_floor_db = noise_floor_db
        self.noise_sigma_db = noise_sigma_db
        self.carrier_db = carrier_db
        self.carriers_hz = tuple(carriers_hz)
        self._rng = rng or np.random.default_rng()

    def carrier_bins(self, center_hz: float, sample_rate_hz: float) -> np.ndarray:
        if sample_rate_hz <= 0:
            return np.zeros(0, dtype=np.int64)
        start_hz = center_hz - sample_rate_hz / 2.0
        positions = (np.asarray(self.carriers_hz, dtype=np.float64) - start_hz) / sample_rate_hz
        bins = np.floor(positions * self.n_bins).astype(np.int64)
        return bins[(bins >= 0) & (bins < self.n_bins)]

    def frame(self, center_hz: float, sample_rate_hz: float) -> np.ndarray:
        row = self._rng.normal(self.noise_floor_db, self.noise_sigma_db, self.n_bins)
        for idx in self.carrier_bins(center_hz, sample_rate_hz):
            lo = max(0, idx - 2)
            hi = min(self.n_bins, idx + 3)
            # Simple triangular skirt around each carrier.
            skirt = self.carrier_db - 6.0 * np.abs(np.arange(lo, hi) - idx)
            row[lo:hi] = np.maximum(row[lo:hi], skirt)
        return row.astype(np.float32)
