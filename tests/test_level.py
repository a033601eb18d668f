import numpy as np
import pytest

from prime_sdr_console.render.level import signal_level


@pytest.mark.parametrize(
    "peak, expected",
    [(-10.0, 100.0), (50.0, 100.0), (-200.0, 0.0), (-80.0, 0.0), (-50.0, 45.0)],
)
def test_signal_level(peak: float, expected: float) -> None:
    frame = np.full(4096, -150.0, dtype=np.float32)
    frame[1234] = peak
    assert signal_level(frame) == pytest.approx(expected)


def test_empty_and_nan_frames() -> None:
    assert signal_level(np.zeros(0, dtype=np.float32)) == 0.0
    assert signal_level(np.full(16, np.nan, dtype=np.float32)) == 0.0
    frame = np.full(16, np.nan, dtype=np.float32)
    frame[3] = -60.0
    assert signal_level(frame) == pytest.approx(30.0)
