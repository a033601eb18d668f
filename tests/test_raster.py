import numpy as np

from prime_sdr_console.render.colormap import FULL_INTENSITY, ZERO_INTENSITY, waterfall_window
from prime_sdr_console.render.raster import WaterfallRaster, column_indices

WINDOW = waterfall_window(0, 0)


def test_column_indices() -> None:
    idx = column_indices(1000, 4096)
    assert idx.shape == (1000,)
    assert idx[0] == 0
    assert idx[500] == 2048
    assert idx[-1] == (999 * 4096) // 1000
    assert np.all(np.diff(idx) >= 0)
    assert column_indices(0, 4096).size == 0
    assert np.array_equal(column_indices(4, 4), np.arange(4))


def test_new_raster_is_opaque_black() -> None:
    raster = WaterfallRaster(8, 4)
    assert raster.pixels.shape == (4, 8, 4)
    assert np.all(raster.pixels[..., :3] == 0)
    assert np.all(raster.pixels[..., 3] == 255)


def test_scroll_keeps_history_causal() -> None:
    raster = WaterfallRaster(16, 5)
    hot = np.full(4096, -40.0, dtype=np.float32)
    cold = np.full(4096, -120.0, dtype=np.float32)

    assert raster.scroll_and_paint(hot, WINDOW)
    assert tuple(raster.row(0)[0]) == FULL_INTENSITY
    assert raster.scroll_and_paint(cold, WINDOW)
    assert tuple(raster.row(0)[0]) == ZERO_INTENSITY
    assert tuple(raster.row(1)[0]) == FULL_INTENSITY
    for _ in range(3):
        raster.scroll_and_paint(cold, WINDOW)
    assert tuple(raster.row(4)[0]) == FULL_INTENSITY
    raster.scroll_and_paint(cold, WINDOW)
    # The oldest row falls off the bottom.
    assert np.all(raster.pixels[..., 0] == 0)


def test_row_uses_nearest_bin() -> None:
    raster = WaterfallRaster(4, 2)
    frame = np.full(4096, -120.0, dtype=np.float32)
    frame[2048] = -40.0
    raster.scroll_and_paint(frame, WINDOW)
    colors = [tuple(px) for px in raster.row(0)]
    assert colors == [ZERO_INTENSITY, ZERO_INTENSITY, FULL_INTENSITY, ZERO_INTENSITY]


def test_resize_clears_history() -> None:
    raster = WaterfallRaster(8, 4)
    raster.scroll_and_paint(np.full(4096, -40.0, dtype=np.float32), WINDOW)
    raster.resize(10, 6)
    assert raster.pixels.shape == (6, 10, 4)
    assert np.all(raster.pixels[..., :3] == 0)


def test_empty_viewport_is_noop() -> None:
    raster = WaterfallRaster(0, 0)
    assert raster.is_empty
    assert not raster.scroll_and_paint(np.zeros(4096, dtype=np.float32), WINDOW)
    raster = WaterfallRaster(8, 0)
    assert not raster.scroll_and_paint(np.zeros(4096, dtype=np.float32), WINDOW)


def test_clear() -> None:
    raster = WaterfallRaster(3, 3)
    raster.scroll_and_paint(np.full(4096, -40.0, dtype=np.float32), WINDOW)
    raster.clear()
    assert np.all(raster.pixels[..., :3] == 0)
    assert np.all(raster.pixels[..., 3] == 255)
