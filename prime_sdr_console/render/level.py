"""Peak-based signal level estimate for the S-meter."""

from __future__ import annotations

import numpy as np

LEVEL_FLOOR_DB = -80.0
LEVEL_SCALE = 1.5


def signal_level(frame: np.ndarray) -> float:
    """Reduce one magnitude frame to a level in [0, 100].

    ``clamp((max(frame) + 80) * 1.5, 0, 100)``. Stateless, no smoothing. An
    empty or all-NaN frame reads as 0.
    """

    values = np.asarray(frame, dtype=np.float64)
    if values.size == 0 or np.all(np.isnan(values)):
        return 0.0
    peak = float(np.nanmax(values))
    return float(np.clip((peak - LEVEL_FLOOR_DB) * LEVEL_SCALE, 0.0, 100.0))
