"""Scrolling waterfall raster.

Row 0 is always the newest data. Each painted frame block-copies the history
down one row and writes a freshly colored row 0 from the current magnitude
frame.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from prime_sdr_console.render.colormap import ALPHA_OPAQUE, ColorWindow, map_colors


def column_indices(width: int, n_bins: int) -> np.ndarray:
    """Nearest-neighbour source bin for each output column: ``floor(x / W * N)``."""

    if width <= 0 or n_bins <= 0:
        return np.zeros(0, dtype=np.int64)
    # Integer arithmetic avoids float rounding at exact bin boundaries.
    return (np.arange(width, dtype=np.int64) * n_bins) // width


class WaterfallRaster:
    """RGBA pixel grid of shape ``(height, width, 4)``."""

    def __init__(self, width: int = 0, height: int = 0) -> None:
        self.pixels = self._blank(0, 0)
        self._indices: Optional[np.ndarray] = None
        self._indices_key = (0, 0)
        self.resize(width, height)

    @staticmethod
    def _blank(width: int, height: int) -> np.ndarray:
        pixels = np.zeros((height, width, 4), dtype=np.uint8)
        pixels[..., 3] = ALPHA_OPAQUE
        return pixels

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def resize(self, width: int, height: int) -> None:
        """Reallocate at the new size, cleared to black. History is dropped."""

        self.pixels = self._blank(max(0, int(width)), max(0, int(height)))

    def clear(self) -> None:
        self.pixels[..., :3] = 0
        self.pixels[..., 3] = ALPHA_OPAQUE

    def scroll(self) -> None:
        if self.height > 1:
            # numpy copes with the overlapping slices.
            self.pixels[1:] = self.pixels[:-1]

    def paint_row(self, frame: np.ndarray, window: ColorWindow) -> None:
        if self.is_empty or frame.size == 0:
            return
        key = (self.width, int(frame.size))
        if self._indices is None or self._indices_key != key:
            self._indices = column_indices(self.width, int(frame.size))
            self._indices_key = key
        self.pixels[0] = map_colors(frame[self._indices], window)

    def scroll_and_paint(self, frame: np.ndarray, window: ColorWindow) -> bool:
        """Shift history down one row and paint ``frame`` into row 0.

        Returns False (and leaves the raster untouched) for an empty viewport.
        """

        if self.is_empty or frame.size == 0:
            return False
        self.scroll()
        self.paint_row(frame, window)
        return True

    def row(self, index: int) -> np.ndarray:
        return self.pixels[index]
