"""Decibel windows and the five-segment hue ramp used by the waterfall.

The ramp runs black/deep blue -> blue -> cyan -> green -> yellow -> red over
five equal segments of normalized intensity. Each segment moves one channel
between 0 and 255 while the others sit at a segment extremum, so the ramp is
continuous at every boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np

SEGMENTS = 5
ALPHA_OPAQUE = 255

ArrayLike = Union[float, np.ndarray]


@dataclass(frozen=True)
class ColorWindow:
    min_db: float
    max_db: float


def waterfall_window(offset: float, contrast: float) -> ColorWindow:
    # Contrast only tightens the waterfall's upper bound.
    return ColorWindow(-120.0 + offset, -40.0 + offset - contrast * 1.5)


def spectrum_window(offset: float, vertical_range: float) -> ColorWindow:
    # Smaller range values widen the window.
    return ColorWindow(-120.0 + offset, -20.0 + offset + (200.0 - vertical_range))


def normalize(values: ArrayLike, window: ColorWindow) -> np.ndarray:
    """Clamp ``(v - min) / (max - min)`` into [0, 1]; NaN maps to 0."""

    v = np.asarray(values, dtype=np.float64)
    span = window.max_db - window.min_db
    if span <= 0:
        # Collapsed window: everything at or above max saturates.
        t = (v >= window.max_db).astype(np.float64)
    else:
        with np.errstate(invalid="ignore"):
            t = (v - window.min_db) / span
    t = np.nan_to_num(t, nan=0.0, posinf=1.0, neginf=0.0)
    return np.clip(t, 0.0, 1.0)


def ramp(t: ArrayLike) -> np.ndarray:
    """Map normalized intensity to float RGB channels, shape ``(..., 3)``."""

    t = np.clip(np.asarray(t, dtype=np.float64), 0.0, 1.0)
    scaled = t * SEGMENTS * 255.0
    seg = np.minimum((t * SEGMENTS).astype(np.int64), SEGMENTS - 1)

    zeros = np.zeros_like(t)
    full = np.full_like(t, 255.0)
    rising = [scaled - k * 255.0 for k in range(SEGMENTS)]
    conditions = [seg == k for k in range(SEGMENTS)]

    r = np.select(conditions, [zeros, zeros, zeros, rising[3], full])
    g = np.select(conditions, [zeros, rising[1], full, full, 255.0 - rising[4]])
    b = np.select(conditions, [rising[0], full, 255.0 - rising[2], zeros, zeros])
    return np.stack([r, g, b], axis=-1)


def map_colors(values: ArrayLike, window: ColorWindow) -> np.ndarray:
    """Map dB values to opaque RGBA uint8 pixels, shape ``(..., 4)``."""

    rgb = np.clip(np.rint(ramp(normalize(values, window))), 0, 255).astype(np.uint8)
    alpha = np.full(rgb.shape[:-1] + (1,), ALPHA_OPAQUE, dtype=np.uint8)
    return np.concatenate([rgb, alpha], axis=-1)


def map_color(value: float, window: ColorWindow) -> Tuple[int, int, int, int]:
    r, g, b, a = map_colors(np.array([value]), window)[0]
    return int(r), int(g), int(b), int(a)


ZERO_INTENSITY = (0, 0, 0, ALPHA_OPAQUE)
FULL_INTENSITY = (255, 0, 0, ALPHA_OPAQUE)
