"""Render scheduling for the spectrum/waterfall visualizer.

The scheduler is Idle while the receiver is off and Running while it plays.
Running drives a repeating ticker at display cadence; every tick scrolls and
paints the waterfall, rebuilds the spectrum trace and hands the result to the
painter. All calls happen on the rendering thread, so a resize can never
interleave with a draw.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

import numpy as np

from prime_sdr_console.render.colormap import spectrum_window, waterfall_window
from prime_sdr_console.render.raster import WaterfallRaster
from prime_sdr_console.render.spectrum import SpectrumTrace, idle_trace, live_trace
from prime_sdr_console.state import ViewState

LOGGER = logging.getLogger(__name__)


class Ticker(Protocol):
    def start(self, callback: Callable[[], None]) -> None: ...

    def stop(self) -> None: ...


class SchedulerState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass(frozen=True)
class RenderedFrame:
    trace: SpectrumTrace
    marker_x: float
    raster_changed: bool


Painter = Callable[[RenderedFrame], None]


class RenderScheduler:
    """Owns the timing of every raster mutation."""

    def __init__(
        self,
        raster: WaterfallRaster,
        frame_source: Callable[[], np.ndarray],
        view_source: Callable[[], ViewState],
        ticker: Ticker,
        painter: Optional[Painter] = None,
        n_bins: int = 4096,
    ) -> None:
        self.raster = raster
        self._frame_source = frame_source
        self._view_source = view_source
        self._ticker = ticker
        self._painter = painter
        self._n_bins = n_bins
        self._state = SchedulerState.IDLE
        self._spectrum_size = (0, 0)
        self._release_resize: Optional[Callable[[], None]] = None
        self._closed = False

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def spectrum_size(self) -> tuple[int, int]:
        return self._spectrum_size

    def bind_resize_observer(self, release: Callable[[], None]) -> None:
        """Register the callable that detaches the viewport resize observer."""

        self._release_resize = release

    def on_view_changed(self, view: ViewState) -> None:
        self.set_playing(view.is_playing)

    def set_playing(self, playing: bool) -> None:
        if self._closed:
            return
        if playing and self._state is SchedulerState.IDLE:
            self._state = SchedulerState.RUNNING
            LOGGER.debug("Render scheduler running")
            self._ticker.start(self.render_frame)
        elif not playing and self._state is SchedulerState.RUNNING:
            self._state = SchedulerState.IDLE
            LOGGER.debug("Render scheduler idle")
            self._ticker.stop()
            self.render_frame()

    def resize(self, width: int, spectrum_height: int, waterfall_height: int) -> None:
        """Apply new viewport sizes; waterfall history is cleared."""

        if self._closed:
            return
        width = max(0, int(width))
        self._spectrum_size = (width, max(0, int(spectrum_height)))
        self.raster.resize(width, waterfall_height)
        if self._state is SchedulerState.IDLE:
            self.render_frame()

    def render_frame(self) -> Optional[RenderedFrame]:
        if self._closed:
            return None
        view = self._view_source()
        width, height = self._spectrum_size
        changed = False
        if view.is_playing:
            frame = self._frame_source()
            changed = self.raster.scroll_and_paint(
                frame, waterfall_window(view.vertical_offset, view.contrast)
            )
            trace = live_trace(
                frame,
                spectrum_window(view.vertical_offset, view.vertical_range),
                width,
                height,
            )
        else:
            trace = idle_trace(self._n_bins, width, height)
        rendered = RenderedFrame(trace=trace, marker_x=width / 2.0, raster_changed=changed)
        if self._painter is not None:
            self._painter(rendered)
        return rendered

    def teardown(self) -> None:
        """Cancel the pending tick and release the resize observer."""

        if self._closed:
            return
        self._closed = True
        self._ticker.stop()
        self._state = SchedulerState.IDLE
        if self._release_resize is not None:
            release, self._release_resize = self._release_resize, None
            release()
