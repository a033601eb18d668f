import numpy as np

from prime_sdr_console.config import ConsoleConfig
from prime_sdr_console.render.raster import WaterfallRaster
from prime_sdr_console.render.scheduler import RenderScheduler, SchedulerState
from prime_sdr_console.state import ConsoleState


class FakeTicker:
    def __init__(self) -> None:
        self.callback = None
        self.starts = 0
        self.stops = 0

    def start(self, callback) -> None:
        self.callback = callback
        self.starts += 1

    def stop(self) -> None:
        self.callback = None
        self.stops += 1

    def fire(self, times: int = 1) -> None:
        for _ in range(times):
            assert self.callback is not None
            self.callback()


def _make(frame=None):
    state = ConsoleState.from_config(ConsoleConfig())
    ticker = FakeTicker()
    painted = []
    frame = np.full(4096, -40.0, dtype=np.float32) if frame is None else frame
    scheduler = RenderScheduler(
        WaterfallRaster(),
        frame_source=lambda: frame,
        view_source=state.view,
        ticker=ticker,
        painter=painted.append,
    )
    state.subscribe(scheduler.on_view_changed)
    return state, scheduler, ticker, painted


def test_idle_renders_flat_line_without_touching_raster() -> None:
    state, scheduler, ticker, painted = _make()
    scheduler.resize(100, 40, 60)
    assert scheduler.state is SchedulerState.IDLE
    assert ticker.starts == 0
    rendered = painted[-1]
    assert not rendered.trace.live
    assert np.all(rendered.trace.y == 20.0)
    assert rendered.marker_x == 50.0
    assert not rendered.raster_changed
    assert np.all(scheduler.raster.pixels[..., :3] == 0)


def test_power_on_starts_ticking() -> None:
    state, scheduler, ticker, painted = _make()
    scheduler.resize(100, 40, 60)
    state.toggle_power()
    assert scheduler.state is SchedulerState.RUNNING
    assert ticker.starts == 1
    ticker.fire(3)
    assert painted[-1].trace.live
    assert painted[-1].raster_changed
    assert tuple(scheduler.raster.row(2)[0]) == (255, 0, 0, 255)

    # Toggling an unrelated control does not restart the ticker.
    state.update_controls(offset=4)
    assert ticker.starts == 1


def test_power_off_stops_and_renders_idle() -> None:
    state, scheduler, ticker, painted = _make()
    scheduler.resize(100, 40, 60)
    state.toggle_power()
    ticker.fire()
    before = scheduler.raster.pixels.copy()
    state.toggle_power()
    assert scheduler.state is SchedulerState.IDLE
    assert ticker.stops == 1
    assert ticker.callback is None
    assert not painted[-1].trace.live
    assert np.array_equal(before, scheduler.raster.pixels)


def test_resize_while_running_clears() -> None:
    state, scheduler, ticker, painted = _make()
    scheduler.resize(100, 40, 60)
    state.toggle_power()
    ticker.fire(2)
    count = len(painted)
    scheduler.resize(50, 20, 30)
    assert len(painted) == count
    assert scheduler.raster.pixels.shape == (30, 50, 4)
    assert np.all(scheduler.raster.pixels[..., :3] == 0)
    assert scheduler.spectrum_size == (50, 20)


def test_zero_size_viewport_is_safe() -> None:
    state, scheduler, ticker, painted = _make()
    state.toggle_power()
    ticker.fire()
    assert not painted[-1].raster_changed
    assert painted[-1].trace.x.tolist() == [0.0] * 4096


def test_teardown_releases_once() -> None:
    state, scheduler, ticker, painted = _make()
    released = []
    scheduler.bind_resize_observer(lambda: released.append(True))
    scheduler.resize(100, 40, 60)
    state.toggle_power()
    scheduler.teardown()
    scheduler.teardown()
    assert released == [True]
    assert scheduler.closed
    assert ticker.callback is None
    count = len(painted)
    assert scheduler.render_frame() is None
    scheduler.resize(10, 10, 10)
    state.toggle_power()
    assert len(painted) == count


def test_idle_passes_ignore_frame_contents() -> None:
    frame = np.full(4096, -40.0, dtype=np.float32)
    state, scheduler, ticker, painted = _make(frame)
    scheduler.resize(64, 16, 32)
    before = scheduler.raster.pixels.copy()
    for value in (-200.0, 0.0, np.nan, 50.0):
        frame[:] = value
        rendered = scheduler.render_frame()
        assert not rendered.trace.live
        assert np.all(rendered.trace.y == 8.0)
    assert np.array_equal(before, scheduler.raster.pixels)
