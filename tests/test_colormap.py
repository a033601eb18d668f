import numpy as np
import pytest

from prime_sdr_console.render import colormap
from prime_sdr_console.render.colormap import ColorWindow


def test_windows() -> None:
    assert colormap.waterfall_window(0, 0) == ColorWindow(-120.0, -40.0)
    assert colormap.waterfall_window(-20, 15) == ColorWindow(-140.0, -82.5)
    assert colormap.spectrum_window(0, 200) == ColorWindow(-120.0, -20.0)
    assert colormap.spectrum_window(10, 67) == ColorWindow(-110.0, 123.0)


def test_default_waterfall_extremes() -> None:
    window = colormap.waterfall_window(0, 0)
    assert colormap.map_color(-40.0, window) == colormap.FULL_INTENSITY
    assert colormap.map_color(-120.0, window) == colormap.ZERO_INTENSITY
    assert colormap.map_color(-200.0, window) == colormap.ZERO_INTENSITY
    assert colormap.map_color(0.0, window) == colormap.FULL_INTENSITY


def test_midpoint_is_green() -> None:
    # -80 dB sits halfway through [-120, -40], inside the cyan-to-green segment.
    r, g, b, a = colormap.map_color(-80.0, colormap.waterfall_window(0, 0))
    assert (r, g, a) == (0, 255, 255)
    assert b == 128


def test_segment_boundaries() -> None:
    window = ColorWindow(0.0, 5.0)
    expected = [
        (0, 0, 0),
        (0, 0, 255),
        (0, 255, 255),
        (0, 255, 0),
        (255, 255, 0),
        (255, 0, 0),
    ]
    for level, rgb in enumerate(expected):
        assert colormap.map_color(float(level), window)[:3] == rgb


def test_ramp_is_continuous() -> None:
    t = np.linspace(0.0, 1.0, 5001)
    rgb = colormap.ramp(t)
    assert rgb.min() >= 0.0
    assert rgb.max() <= 255.0
    steps = np.abs(np.diff(rgb, axis=0))
    assert steps.max() < 1.0


def test_map_colors_shape_and_alpha() -> None:
    window = colormap.waterfall_window(0, 0)
    values = np.linspace(-130.0, -30.0, 64, dtype=np.float32)
    pixels = colormap.map_colors(values, window)
    assert pixels.shape == (64, 4)
    assert pixels.dtype == np.uint8
    assert np.all(pixels[:, 3] == 255)


def test_nan_maps_to_zero_intensity() -> None:
    window = colormap.waterfall_window(0, 0)
    assert colormap.map_color(float("nan"), window) == colormap.ZERO_INTENSITY


def test_collapsed_window_saturates_at_max() -> None:
    window = colormap.waterfall_window(0, 60)
    assert window.max_db <= window.min_db
    assert colormap.map_color(window.max_db, window) == colormap.FULL_INTENSITY
    assert colormap.map_color(window.max_db - 1.0, window) == colormap.ZERO_INTENSITY


@pytest.mark.parametrize("contrast", [0, 10, 30])
def test_contrast_brightens(contrast: int) -> None:
    base = colormap.normalize(-70.0, colormap.waterfall_window(0, 0))
    tighter = colormap.normalize(-70.0, colormap.waterfall_window(0, contrast))
    assert tighter >= base


def test_channels_monotonic_within_segments() -> None:
    for k in range(colormap.SEGMENTS):
        t = np.linspace(k / 5.0 + 1e-9, (k + 1) / 5.0 - 1e-9, 200)
        rgb = colormap.ramp(t)
        for channel in range(3):
            steps = np.diff(rgb[:, channel])
            assert np.all(steps >= -1e-9) or np.all(steps <= 1e-9)
