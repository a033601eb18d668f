"""Screen-x to frequency mapping for pointer tuning and hover readout."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


def pixel_to_frequency(x: float, width: float, center_hz: float, bandwidth_hz: float) -> float:
    """Map a pointer x-coordinate to an absolute frequency.

    The viewport centre maps to ``center_hz`` and the full width spans
    ``bandwidth_hz``. A zero width maps everything to the centre.
    """

    if width <= 0:
        return float(center_hz)
    return float(center_hz) + ((float(x) - width / 2.0) / float(width)) * float(bandwidth_hz)


def quantize(freq_hz: float, step_hz: int) -> Union[int, float]:
    """Round to the nearest multiple of ``step_hz``; step 0 leaves it as is."""

    if step_hz <= 0:
        return float(freq_hz)
    # Integer multiply after rounding the ratio keeps the result an exact multiple.
    return int(round(freq_hz / step_hz)) * int(step_hz)


# Qt reports one notch of a standard mouse wheel as 120 eighths of a degree.
WHEEL_NOTCH = 120


def wheel_ticks(angle_delta: int) -> int:
    """Signed notch count for a wheel event; any nonzero delta is at least one."""

    if angle_delta == 0:
        return 0
    ticks = max(1, abs(int(angle_delta)) // WHEEL_NOTCH)
    return ticks if angle_delta > 0 else -ticks


@dataclass(frozen=True)
class FrequencyMapper:
    width: float
    center_hz: float
    bandwidth_hz: float
    step_hz: int = 0

    def hover(self, x: float) -> float:
        return pixel_to_frequency(x, self.width, self.center_hz, self.bandwidth_hz)

    def tune(self, x: float) -> Union[int, float]:
        return quantize(self.hover(x), self.step_hz)

    def wheel(self, ticks: int) -> float:
        """Move the centre one step per wheel tick; positive ticks tune up."""

        return float(self.center_hz) + int(ticks) * self.step_hz
