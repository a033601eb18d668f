import numpy as np
import pytest

from prime_sdr_console.render.colormap import ColorWindow, spectrum_window
from prime_sdr_console.render.spectrum import db_to_y, idle_trace, live_trace, vertex_x


def test_vertex_x_spans_width() -> None:
    xs = vertex_x(4096, 800.0)
    assert xs[0] == 0.0
    assert xs[-1] == pytest.approx(800.0)
    assert vertex_x(1, 800.0).tolist() == [0.0]
    assert vertex_x(0, 800.0).size == 0


def test_db_to_y() -> None:
    window = ColorWindow(-120.0, -20.0)
    y = db_to_y(np.array([-120.0, -70.0, -20.0, 0.0]), window, 200.0)
    assert y.tolist() == pytest.approx([200.0, 100.0, 0.0, -40.0])


def test_live_trace() -> None:
    frame = np.full(4096, -70.0, dtype=np.float32)
    trace = live_trace(frame, spectrum_window(0, 200), 1000.0, 200.0)
    assert trace.live
    assert trace.filled
    assert trace.baseline == 200.0
    assert trace.x.shape == trace.y.shape == (4096,)
    assert np.allclose(trace.y, 100.0)


def test_idle_trace_is_flat_at_center() -> None:
    trace = idle_trace(4096, 1000.0, 150.0)
    assert not trace.live
    assert not trace.filled
    assert np.all(trace.y == 75.0)
    assert trace.x[-1] == pytest.approx(1000.0)
