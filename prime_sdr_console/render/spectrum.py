"""Spectrum line geometry in viewport pixel space.

Produces the polyline, its fill baseline and the idle indication as plain
arrays so any immediate-mode painter can draw them. Pixel y grows downward:
the window maximum maps to y=0 and the window minimum to y=height.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from prime_sdr_console.render.colormap import ColorWindow

LINE_COLOR = (74, 222, 128, 230)
FILL_COLOR = (34, 197, 94, 26)
IDLE_COLOR = (20, 83, 45, 255)
MARKER_COLOR = (255, 0, 0, 128)


@dataclass(frozen=True)
class SpectrumTrace:
    x: np.ndarray
    y: np.ndarray
    baseline: float
    live: bool

    @property
    def filled(self) -> bool:
        return self.live


def vertex_x(n_points: int, width: float) -> np.ndarray:
    """``x = i / (N - 1) * W`` for each of the N vertices."""

    if n_points <= 0:
        return np.zeros(0, dtype=np.float64)
    if n_points == 1:
        return np.zeros(1, dtype=np.float64)
    return np.arange(n_points, dtype=np.float64) / (n_points - 1) * float(width)


def db_to_y(values: np.ndarray, window: ColorWindow, height: float) -> np.ndarray:
    """Linear dB scale, unclamped, like a plotting library's linear scale."""

    span = window.max_db - window.min_db
    v = np.asarray(values, dtype=np.float64)
    if span <= 0:
        return np.full(v.shape, float(height))
    return float(height) - (v - window.min_db) / span * float(height)


def live_trace(frame: np.ndarray, window: ColorWindow, width: float, height: float) -> SpectrumTrace:
    return SpectrumTrace(
        x=vertex_x(int(frame.size), width),
        y=db_to_y(frame, window, height),
        baseline=float(height),
        live=True,
    )


def idle_trace(n_points: int, width: float, height: float) -> SpectrumTrace:
    """Flat line at the plot's vertical centre, independent of any data."""

    return SpectrumTrace(
        x=vertex_x(n_points, width),
        y=np.full(max(0, n_points), float(height) / 2.0),
        baseline=float(height),
        live=False,
    )
