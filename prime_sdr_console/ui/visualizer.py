"""Qt visualizer: spectrum plot over a scrolling waterfall.

Paints what the RenderScheduler produces and turns pointer input into tuning
requests. This module must not implement mapping or color math itself beyond
delegating to the render helpers.
"""

from __future__ import annotations

from typing import Callable, Optional

import pyqtgraph as pg
from pyqtgraph.Qt import QtCore, QtWidgets

from prime_sdr_console.render.mapping import FrequencyMapper, wheel_ticks
from prime_sdr_console.render.raster import WaterfallRaster
from prime_sdr_console.render.scheduler import RenderedFrame
from prime_sdr_console.render.spectrum import FILL_COLOR, IDLE_COLOR, LINE_COLOR, MARKER_COLOR
from prime_sdr_console.state import ViewState


class QtFrameTicker:
    """Repeating QTimer task bound to the render cadence."""

    def __init__(self, interval_ms: int = 16, parent: Optional[QtCore.QObject] = None) -> None:
        self._timer = QtCore.QTimer(parent)
        self._timer.setInterval(int(interval_ms))
        self._callback: Optional[Callable[[], None]] = None
        self._timer.timeout.connect(self._fire)

    def start(self, callback: Callable[[], None]) -> None:
        self._callback = callback
        self._timer.start()

    def stop(self) -> None:
        self._timer.stop()
        self._callback = None

    def _fire(self) -> None:
        if self._callback is not None:
            self._callback()


class ResizeObserver(QtCore.QObject):
    """Event filter reporting size changes of one widget."""

    def __init__(self, target: QtWidgets.QWidget, callback: Callable[[int, int], None]) -> None:
        super().__init__(target)
        self._target = target
        self._callback = callback
        target.installEventFilter(self)

    def eventFilter(self, obj, event):
        if obj is self._target and event.type() == QtCore.QEvent.Resize:
            size = event.size()
            self._callback(size.width(), size.height())
        return False

    def release(self) -> None:
        self._target.removeEventFilter(self)


def _event_x(event) -> float:
    if hasattr(event, "position"):
        return float(event.position().x())
    return float(event.pos().x())


def _bare_plot() -> pg.PlotWidget:
    plot = pg.PlotWidget(enableMenu=False)
    item = plot.getPlotItem()
    item.hideAxis("left")
    item.hideAxis("bottom")
    item.hideButtons()
    item.setContentsMargins(0, 0, 0, 0)
    item.setMouseEnabled(x=False, y=False)
    item.getViewBox().invertY(True)
    plot.setBackground("k")
    plot.viewport().setMouseTracking(True)
    return plot


class VisualizerWidget(QtWidgets.QWidget):
    """Spectrum (top quarter) and waterfall (bottom three quarters)."""

    tuneRequested = QtCore.Signal(float)
    hoverChanged = QtCore.Signal(object)
    bandMenuRequested = QtCore.Signal(object)

    def __init__(
        self,
        raster: WaterfallRaster,
        spectrum_fraction: float = 0.25,
        parent: Optional[QtWidgets.QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.raster = raster
        self.spectrum_fraction = spectrum_fraction
        self.view: Optional[ViewState] = None
        self.setCursor(QtCore.Qt.CrossCursor)

        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self.spectrum_plot = _bare_plot()
        self.curve = pg.PlotDataItem(pen=pg.mkPen(LINE_COLOR, width=1))
        self.curve.setBrush(pg.mkBrush(FILL_COLOR))
        self.idle_curve = pg.PlotDataItem(pen=pg.mkPen(IDLE_COLOR, width=1))
        self.center_marker = pg.InfiniteLine(
            angle=90,
            movable=False,
            pen=pg.mkPen(MARKER_COLOR, style=QtCore.Qt.DashLine),
        )
        self.spectrum_plot.addItem(self.curve)
        self.spectrum_plot.addItem(self.idle_curve)
        self.spectrum_plot.addItem(self.center_marker, ignoreBounds=True)

        self.waterfall_plot = _bare_plot()
        self.waterfall_image = pg.ImageItem(axisOrder="row-major")
        self.waterfall_plot.addItem(self.waterfall_image)

        stretch = max(1, int(round(spectrum_fraction * 4)))
        layout.addWidget(self.spectrum_plot, stretch)
        layout.addWidget(self.waterfall_plot, 4 - stretch)

        for plot in (self.spectrum_plot, self.waterfall_plot):
            plot.viewport().installEventFilter(self)

    def set_view(self, view: ViewState) -> None:
        self.view = view

    def split_heights(self, height: int) -> tuple[int, int]:
        spectrum_height = int(height * self.spectrum_fraction)
        return spectrum_height, max(0, height - spectrum_height)

    def mapper(self) -> Optional[FrequencyMapper]:
        if self.view is None:
            return None
        return FrequencyMapper(
            width=float(self.width()),
            center_hz=float(self.view.center_frequency_hz),
            bandwidth_hz=float(self.view.view_bandwidth_hz),
            step_hz=int(self.view.step_hz),
        )

    def paint(self, rendered: RenderedFrame) -> None:
        trace = rendered.trace
        width = float(self.raster.width)
        spectrum_height = float(trace.baseline)
        if trace.live:
            self.idle_curve.setData([], [])
            self.curve.setData(trace.x, trace.y)
            self.curve.setFillLevel(trace.baseline)
        else:
            self.curve.setData([], [])
            self.idle_curve.setData(trace.x, trace.y)
        self.center_marker.setPos(rendered.marker_x)
        self.spectrum_plot.setRange(
            xRange=(0, max(1.0, width)), yRange=(0, max(1.0, spectrum_height)), padding=0
        )

        if self.raster.is_empty:
            self.waterfall_image.clear()
            return
        self.waterfall_image.setImage(self.raster.pixels, autoLevels=False)
        self.waterfall_plot.setRange(
            xRange=(0, self.raster.width), yRange=(0, self.raster.height), padding=0
        )

    def eventFilter(self, obj, event):
        kind = event.type()
        if kind == QtCore.QEvent.MouseButtonPress and event.button() == QtCore.Qt.LeftButton:
            mapper = self.mapper()
            if mapper is not None:
                self.tuneRequested.emit(float(mapper.tune(_event_x(event))))
            return True
        if kind == QtCore.QEvent.MouseMove:
            mapper = self.mapper()
            if mapper is not None:
                self.hoverChanged.emit(mapper.hover(_event_x(event)))
            return False
        if kind == QtCore.QEvent.ContextMenu:
            self.bandMenuRequested.emit(event.globalPos())
            return True
        if kind == QtCore.QEvent.Leave:
            self.hoverChanged.emit(None)
            return False
        if kind == QtCore.QEvent.Wheel:
            mapper = self.mapper()
            delta = event.angleDelta().y() if hasattr(event, "angleDelta") else event.delta()
            ticks = wheel_ticks(delta)
            if mapper is not None and ticks != 0:
                self.tuneRequested.emit(mapper.wheel(ticks))
            return True
        return False
