"""Qt UI for the PrimeSDR console main window.

Defines the receiver controls, the visualizer strip and the event handlers
that feed ConsoleState. This module must not implement rendering math or
network I/O beyond delegating to the engine, scheduler and client.
"""

import logging
from typing import Dict, Optional

from pyqtgraph.Qt import QtCore, QtWidgets

from prime_sdr_console.client import BackendClient
from prime_sdr_console.config import (
    BANDS,
    CONTROL_LIMITS,
    STEPS_HZ,
    ConsoleConfig,
    DemodMode,
    format_frequency,
    format_step,
)
from prime_sdr_console.engine import ConsoleEngine
from prime_sdr_console.persistence import save_state, snapshot_state
from prime_sdr_console.render.mapping import wheel_ticks
from prime_sdr_console.render.raster import WaterfallRaster
from prime_sdr_console.render.scheduler import RenderScheduler
from prime_sdr_console.state import ConsoleState, ReceiverSettings, ViewState
from prime_sdr_console.ui.dialogs import AboutDialog, ConfigDialog, ScannerDialog
from prime_sdr_console.ui.visualizer import QtFrameTicker, ResizeObserver, VisualizerWidget

LOGGER = logging.getLogger(__name__)

_ARROW_KEYS = {
    QtCore.Qt.Key_Up: "up",
    QtCore.Qt.Key_Down: "down",
    QtCore.Qt.Key_Left: "left",
    QtCore.Qt.Key_Right: "right",
}

_INPUT_WIDGETS = (
    QtWidgets.QLineEdit,
    QtWidgets.QAbstractSpinBox,
    QtWidgets.QComboBox,
    QtWidgets.QTextEdit,
    QtWidgets.QPlainTextEdit,
)

_STATUS_STYLE = "QLabel { padding: 4px; font-family: monospace; color: %s; }"


class EngineBridge(QtCore.QObject):
    """Re-emits engine callbacks from the client thread as queued Qt signals."""

    levelChanged = QtCore.Signal(float)
    statusChanged = QtCore.Signal(bool)

    def __init__(self, engine: ConsoleEngine, parent: Optional[QtCore.QObject] = None):
        super().__init__(parent)
        engine.subscribe_level(self.levelChanged.emit)
        engine.subscribe_status(self.statusChanged.emit)


class ConsoleWindow(QtWidgets.QMainWindow):
    """
    Main UI class.
    All receiver changes go through ConsoleState.
    All drawing is timed by RenderScheduler.
    """

    def __init__(self, cfg: ConsoleConfig, client: Optional[BackendClient] = None):
        super().__init__()
        self.cfg = cfg
        self.state = ConsoleState.from_config(cfg)
        self.engine = ConsoleEngine(self.state)
        self.client = client or BackendClient(cfg.uri, self.engine, cfg.reconnect_delay_s)
        self.engine.attach_sender(self.client.send_json)
        self.bridge = EngineBridge(self.engine, self)
        self._syncing = False
        self._closed = False

        self.setWindowTitle("PrimeSDR Console")
        self.resize(1280, 760)

        self.raster = WaterfallRaster()
        self._build_ui()

        self.ticker = QtFrameTicker(cfg.render_interval_ms, self)
        self.scheduler = RenderScheduler(
            self.raster,
            frame_source=self.engine.frames.latest,
            view_source=self.state.view,
            ticker=self.ticker,
            painter=self.visualizer.paint,
            n_bins=cfg.frame_bins,
        )
        self.resize_observer = ResizeObserver(self.visualizer, self._on_visualizer_resized)
        self.scheduler.bind_resize_observer(self.resize_observer.release)

        self.state.subscribe(self.scheduler.on_view_changed)
        self.state.subscribe(self._on_view_changed)
        self.state.subscribe_settings(self._on_settings_changed)
        self._wire_events()

        self._sync_widgets(self.state.settings)
        self.visualizer.set_view(self.state.view())
        self._on_status_changed(False)
        QtWidgets.QApplication.instance().installEventFilter(self)

    def start(self) -> None:
        if not self.client.is_alive():
            self.client.start()

    def closeEvent(self, event):
        if not self._closed:
            self._closed = True
            QtWidgets.QApplication.instance().removeEventFilter(self)
            self.scheduler.teardown()
            self.client.stop()
            if self.client.is_alive():
                self.client.join(timeout=2.0)
            self._persist_state()
        event.accept()

    def _persist_state(self) -> None:
        try:
            save_state(snapshot_state(self.state.settings, self.state.controls))
        except OSError as exc:
            LOGGER.warning("Could not save console state: %s", exc)

    def _build_ui(self):
        self._build_menu()
        cw = QtWidgets.QWidget()
        self.setCentralWidget(cw)
        layout = QtWidgets.QHBoxLayout(cw)
        layout.setSpacing(6)

        layout.addWidget(self._build_controls())

        self.visualizer = VisualizerWidget(self.raster, self.cfg.spectrum_fraction)
        layout.addWidget(self.visualizer, 1)

        layout.addWidget(self._build_display_strip())

    def _build_menu(self):
        menu = self.menuBar()
        file_menu = menu.addMenu("File")
        self.config_action = QtWidgets.QAction("Device Configuration...", self)
        self.scanner_action = QtWidgets.QAction("Scanner...", self)
        self.exit_action = QtWidgets.QAction("Exit", self)
        file_menu.addAction(self.config_action)
        file_menu.addAction(self.scanner_action)
        file_menu.addSeparator()
        file_menu.addAction(self.exit_action)

        help_menu = menu.addMenu("Help")
        self.about_action = QtWidgets.QAction("About", self)
        help_menu.addAction(self.about_action)

    def _build_controls(self) -> QtWidgets.QWidget:
        panel = QtWidgets.QWidget()
        panel.setFixedWidth(300)
        layout = QtWidgets.QVBoxLayout(panel)
        layout.setContentsMargins(0, 0, 0, 0)

        top = QtWidgets.QHBoxLayout()
        self.power_btn = QtWidgets.QPushButton("Start")
        self.power_btn.setCheckable(True)
        self.config_btn = QtWidgets.QPushButton("Config")
        self.scanner_btn = QtWidgets.QPushButton("Scanner")
        top.addWidget(self.power_btn)
        top.addWidget(self.config_btn)
        top.addWidget(self.scanner_btn)
        layout.addLayout(top)

        self.freq_edit = QtWidgets.QLineEdit()
        self.freq_edit.setAlignment(QtCore.Qt.AlignRight)
        self.freq_edit.setStyleSheet(
            "QLineEdit { font-size: 24px; font-family: monospace; color: #4ade80; }"
        )
        layout.addWidget(self.freq_edit)

        self.hover_label = QtWidgets.QLabel("")
        self.hover_label.setStyleSheet("QLabel { font-family: monospace; color: #9aa0a6; }")
        layout.addWidget(self.hover_label)

        mode_box = QtWidgets.QGroupBox("Mode")
        mode_layout = QtWidgets.QGridLayout(mode_box)
        self.mode_group = QtWidgets.QButtonGroup(self)
        self.mode_group.setExclusive(True)
        self.mode_buttons: Dict[str, QtWidgets.QPushButton] = {}
        for idx, mode in enumerate(DemodMode):
            button = QtWidgets.QPushButton(mode.value)
            button.setCheckable(True)
            self.mode_group.addButton(button)
            self.mode_buttons[mode.value] = button
            mode_layout.addWidget(button, idx // 3, idx % 3)
        layout.addWidget(mode_box)

        form = QtWidgets.QFormLayout()
        self.bandwidth_spin = QtWidgets.QSpinBox()
        self.bandwidth_spin.setRange(100, 250_000)
        self.bandwidth_spin.setSingleStep(500)
        self.bandwidth_spin.setSuffix(" Hz")
        self.step_cb = QtWidgets.QComboBox()
        for step in STEPS_HZ:
            self.step_cb.addItem(format_step(step), step)
        self.volume_slider = QtWidgets.QSlider(QtCore.Qt.Horizontal)
        self.volume_slider.setRange(0, 100)
        self.squelch_slider = QtWidgets.QSlider(QtCore.Qt.Horizontal)
        self.squelch_slider.setRange(0, 100)
        self.gain_spin = QtWidgets.QDoubleSpinBox()
        self.gain_spin.setRange(0.0, 50.0)
        self.gain_spin.setSingleStep(0.1)
        self.gain_spin.setDecimals(1)
        self.gain_spin.setSuffix(" dB")
        self.nr_check = QtWidgets.QCheckBox("Noise reduction")
        form.addRow("Bandwidth", self.bandwidth_spin)
        form.addRow("Step", self.step_cb)
        form.addRow("Volume", self.volume_slider)
        form.addRow("Squelch", self.squelch_slider)
        form.addRow("RF Gain", self.gain_spin)
        form.addRow("", self.nr_check)
        layout.addLayout(form)

        self.s_meter = QtWidgets.QProgressBar()
        self.s_meter.setRange(0, 100)
        self.s_meter.setTextVisible(False)
        layout.addWidget(QtWidgets.QLabel("Signal"))
        layout.addWidget(self.s_meter)

        layout.addStretch(1)
        self.connection_status = QtWidgets.QLabel("")
        layout.addWidget(self.connection_status)
        return panel

    def _build_display_strip(self) -> QtWidgets.QWidget:
        strip = QtWidgets.QWidget()
        layout = QtWidgets.QHBoxLayout(strip)
        layout.setContentsMargins(0, 0, 0, 0)
        self.control_sliders: Dict[str, QtWidgets.QSlider] = {}
        controls = self.state.controls
        for name, (low, high, step) in CONTROL_LIMITS.items():
            column = QtWidgets.QVBoxLayout()
            slider = QtWidgets.QSlider(QtCore.Qt.Vertical)
            slider.setRange(low, high)
            slider.setSingleStep(step)
            slider.setPageStep(step)
            slider.setValue(getattr(controls, name))
            caption = QtWidgets.QLabel(name[:3].upper())
            caption.setAlignment(QtCore.Qt.AlignCenter)
            column.addWidget(slider, 1, QtCore.Qt.AlignHCenter)
            column.addWidget(caption)
            layout.addLayout(column)
            self.control_sliders[name] = slider
        self._slider_names = {slider: name for name, slider in self.control_sliders.items()}
        return strip

    def _wire_events(self):
        self.exit_action.triggered.connect(self.close)
        self.config_action.triggered.connect(self.on_open_config)
        self.scanner_action.triggered.connect(self.on_open_scanner)
        self.about_action.triggered.connect(self.on_open_about)
        self.config_btn.clicked.connect(self.on_open_config)
        self.scanner_btn.clicked.connect(self.on_open_scanner)

        self.power_btn.toggled.connect(self.on_power_toggled)
        self.freq_edit.returnPressed.connect(self.on_frequency_entered)
        self.mode_group.buttonClicked.connect(self.on_mode_clicked)
        self.bandwidth_spin.editingFinished.connect(self.on_bandwidth_changed)
        self.step_cb.currentIndexChanged.connect(self.on_step_changed)
        self.volume_slider.valueChanged.connect(lambda v: self._set_settings(volume=int(v)))
        self.squelch_slider.valueChanged.connect(lambda v: self._set_settings(squelch=float(v)))
        self.gain_spin.valueChanged.connect(
            lambda v: self._set_settings(gain_db=round(float(v), 1))
        )
        self.nr_check.toggled.connect(lambda v: self._set_settings(nr_enabled=bool(v)))
        for name, slider in self.control_sliders.items():
            slider.valueChanged.connect(
                lambda v, name=name: self._set_controls(**{name: int(v)})
            )

        self.visualizer.tuneRequested.connect(self.state.tune)
        self.visualizer.hoverChanged.connect(self.on_hover_changed)
        self.visualizer.bandMenuRequested.connect(self.on_band_menu)
        self.bridge.levelChanged.connect(self.on_level_changed)
        self.bridge.statusChanged.connect(self._on_status_changed)

    def eventFilter(self, obj, event):
        if event.type() == QtCore.QEvent.Wheel and obj in self._slider_names:
            ticks = wheel_ticks(event.angleDelta().y())
            for _ in range(abs(ticks)):
                self.state.nudge_control(self._slider_names[obj], ticks)
            return True
        if event.type() == QtCore.QEvent.KeyPress and self.isActiveWindow():
            key = _ARROW_KEYS.get(event.key())
            focus = QtWidgets.QApplication.focusWidget()
            if key is not None and not isinstance(focus, _INPUT_WIDGETS):
                self.state.key_tune(key)
                return True
        return super().eventFilter(obj, event)

    def _set_settings(self, **changes) -> None:
        if not self._syncing:
            self.state.update_settings(**changes)

    def _set_controls(self, **changes) -> None:
        if not self._syncing:
            self.state.update_controls(**changes)

    def _on_visualizer_resized(self, width: int, height: int) -> None:
        spectrum_height, waterfall_height = self.visualizer.split_heights(height)
        self.scheduler.resize(width, spectrum_height, waterfall_height)

    def _on_view_changed(self, view: ViewState) -> None:
        self.visualizer.set_view(view)
        self._syncing = True
        try:
            for name, value in (
                ("offset", view.vertical_offset),
                ("range", view.vertical_range),
                ("contrast", view.contrast),
            ):
                self.control_sliders[name].setValue(value)
        finally:
            self._syncing = False

    def _on_settings_changed(self, settings: ReceiverSettings) -> None:
        self._sync_widgets(settings)

    def _sync_widgets(self, settings: ReceiverSettings) -> None:
        self._syncing = True
        try:
            self.freq_edit.setText(format_frequency(settings.frequency_hz))
            self.power_btn.setChecked(settings.is_playing)
            self.power_btn.setText("Stop" if settings.is_playing else "Start")
            button = self.mode_buttons.get(settings.mode)
            if button is not None:
                button.setChecked(True)
            self.bandwidth_spin.setValue(int(settings.bandwidth_hz))
            idx = self.step_cb.findData(settings.step_hz)
            if idx < 0:
                self.step_cb.addItem(format_step(settings.step_hz), settings.step_hz)
                idx = self.step_cb.count() - 1
            self.step_cb.setCurrentIndex(idx)
            self.volume_slider.setValue(int(settings.volume))
            self.squelch_slider.setValue(int(settings.squelch))
            self.gain_spin.setValue(float(settings.gain_db))
            self.nr_check.setChecked(settings.nr_enabled)
        finally:
            self._syncing = False

    def _on_status_changed(self, connected: bool) -> None:
        if connected:
            self.connection_status.setText(f"Backend: Connected ({self.cfg.uri})")
            self.connection_status.setStyleSheet(_STATUS_STYLE % "#81c995")
        else:
            self.connection_status.setText("Backend: Disconnected")
            self.connection_status.setStyleSheet(_STATUS_STYLE % "#f28b82")

    def on_power_toggled(self, checked: bool):
        if not self._syncing:
            self.state.update_settings(is_playing=bool(checked))

    def on_frequency_entered(self):
        digits = "".join(ch for ch in self.freq_edit.text() if ch.isdigit())
        if digits:
            self.state.tune(int(digits))
        # Re-render the canonical formatting even when nothing changed.
        self.freq_edit.setText(format_frequency(self.state.settings.frequency_hz))
        self.freq_edit.clearFocus()

    def on_mode_clicked(self, button: QtWidgets.QAbstractButton):
        self._set_settings(mode=button.text())

    def on_bandwidth_changed(self):
        self._set_settings(bandwidth_hz=int(self.bandwidth_spin.value()))

    def on_step_changed(self, index: int):
        step = self.step_cb.itemData(index)
        if step is not None:
            self._set_settings(step_hz=int(step))

    def on_hover_changed(self, hz):
        self.hover_label.setText("" if hz is None else f"{format_frequency(hz)} Hz")

    def on_level_changed(self, level: float):
        self.s_meter.setValue(int(round(level)))

    def on_band_menu(self, global_pos: QtCore.QPoint):
        menu = QtWidgets.QMenu(self)
        for preset in BANDS:
            action = menu.addAction(f"{preset.name}  {format_frequency(preset.freq_hz)}")
            action.triggered.connect(lambda _checked=False, p=preset: self.state.select_band(p))
        menu.exec(global_pos)

    def on_open_config(self):
        ConfigDialog(self, self.state.settings, self.state.update_settings).exec()

    def on_open_scanner(self):
        ScannerDialog(
            self,
            step_cb=lambda: self.state.settings.step_hz,
            tune_cb=self.state.tune,
        ).exec()

    def on_open_about(self):
        AboutDialog(self).exec()

