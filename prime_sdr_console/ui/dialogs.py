"""Dialog windows for device configuration, scanning and about/help.

Defines the secondary windows used by the console. This module should not
perform network I/O or embed rendering logic.
"""

from __future__ import annotations

from typing import Callable

from pyqtgraph.Qt import QtCore, QtWidgets

from prime_sdr_console import __version__
from prime_sdr_console.config import SAMPLE_RATES, SAMPLING_MODES, SOURCES, format_step
from prime_sdr_console.scanner import SCAN_INTERVAL_MS, FrequencyScanner
from prime_sdr_console.state import ReceiverSettings


class ConfigDialog(QtWidgets.QDialog):
    """Device source, sample rate, sampling mode, AGC and PPM."""

    def __init__(
        self,
        parent: QtWidgets.QWidget,
        settings: ReceiverSettings,
        apply_cb: Callable[..., None],
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Device Configuration")
        self.apply_cb = apply_cb

        layout = QtWidgets.QVBoxLayout(self)
        source_row = QtWidgets.QHBoxLayout()
        self.source_buttons = {}
        for source in SOURCES:
            label = "RTL-SDR USB" if source == "RTL-SDR" else "TCP-IP NET"
            button = QtWidgets.QRadioButton(label)
            button.setChecked(settings.source == source)
            button.toggled.connect(self._update_tcp_enabled)
            self.source_buttons[source] = button
            source_row.addWidget(button)
        layout.addLayout(source_row)

        self.tcp_group = QtWidgets.QGroupBox("TCP network settings")
        tcp_form = QtWidgets.QFormLayout(self.tcp_group)
        self.host_edit = QtWidgets.QLineEdit(settings.tcp_host)
        self.port_spin = QtWidgets.QSpinBox()
        self.port_spin.setRange(1, 65535)
        self.port_spin.setValue(int(settings.tcp_port))
        tcp_form.addRow("Host IP", self.host_edit)
        tcp_form.addRow("Port", self.port_spin)
        layout.addWidget(self.tcp_group)

        form = QtWidgets.QFormLayout()
        self.rate_combo = QtWidgets.QComboBox()
        for label, value in SAMPLE_RATES:
            self.rate_combo.addItem(label, value)
        idx = self.rate_combo.findData(settings.sample_rate_hz)
        self.rate_combo.setCurrentIndex(max(0, idx))
        self.sampling_combo = QtWidgets.QComboBox()
        self.sampling_combo.addItems(list(SAMPLING_MODES))
        self.sampling_combo.setCurrentText(settings.sampling_mode)
        self.agc_check = QtWidgets.QCheckBox("Tuner AGC")
        self.agc_check.setChecked(settings.tuner_agc)
        self.ppm_spin = QtWidgets.QSpinBox()
        self.ppm_spin.setRange(-200, 200)
        self.ppm_spin.setValue(int(settings.ppm))
        form.addRow("Sample Rate", self.rate_combo)
        form.addRow("Sampling Mode", self.sampling_combo)
        form.addRow("", self.agc_check)
        form.addRow("PPM Correction", self.ppm_spin)
        layout.addLayout(form)

        buttons = QtWidgets.QDialogButtonBox(
            QtWidgets.QDialogButtonBox.Ok | QtWidgets.QDialogButtonBox.Cancel
        )
        buttons.accepted.connect(self._apply)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)
        self._update_tcp_enabled()

    def _selected_source(self) -> str:
        for source, button in self.source_buttons.items():
            if button.isChecked():
                return source
        return SOURCES[0]

    def _update_tcp_enabled(self) -> None:
        self.tcp_group.setEnabled(self._selected_source() == "TCP")

    def _apply(self) -> None:
        self.apply_cb(
            source=self._selected_source(),
            tcp_host=self.host_edit.text().strip(),
            tcp_port=int(self.port_spin.value()),
            sample_rate_hz=int(self.rate_combo.currentData()),
            sampling_mode=self.sampling_combo.currentText(),
            tuner_agc=self.agc_check.isChecked(),
            ppm=int(self.ppm_spin.value()),
        )
        self.accept()


class ScannerDialog(QtWidgets.QDialog):
    """Steps through the scan range and tunes when the scanner locks."""

    def __init__(
        self,
        parent: QtWidgets.QWidget,
        step_cb: Callable[[], int],
        tune_cb: Callable[[int], None],
        scanner: FrequencyScanner | None = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Scanner")
        self.scanner = scanner or FrequencyScanner()
        self.step_cb = step_cb
        self.tune_cb = tune_cb

        layout = QtWidgets.QVBoxLayout(self)
        self.freq_label = QtWidgets.QLabel("")
        self.freq_label.setAlignment(QtCore.Qt.AlignCenter)
        self.freq_label.setStyleSheet("QLabel { font-size: 20px; font-family: monospace; }")
        layout.addWidget(self.freq_label)

        row = QtWidgets.QHBoxLayout()
        start_btn = QtWidgets.QPushButton("Start")
        pause_btn = QtWidgets.QPushButton("Pause")
        stop_btn = QtWidgets.QPushButton("Stop")
        for btn in (start_btn, pause_btn, stop_btn):
            row.addWidget(btn)
        layout.addLayout(row)

        self.range_label = QtWidgets.QLabel("")
        self.range_label.setAlignment(QtCore.Qt.AlignCenter)
        layout.addWidget(self.range_label)

        start_btn.clicked.connect(self.scanner.start)
        pause_btn.clicked.connect(self.scanner.pause)
        stop_btn.clicked.connect(self._stop)

        self.timer = QtCore.QTimer(self)
        self.timer.timeout.connect(self._tick)
        self.timer.start(SCAN_INTERVAL_MS)
        self._refresh()

    def _stop(self) -> None:
        self.scanner.stop()
        self._refresh()

    def _tick(self) -> None:
        locked = self.scanner.tick(self.step_cb())
        if locked is not None:
            self.tune_cb(locked)
        self._refresh()

    def _refresh(self) -> None:
        self.freq_label.setText(f"{self.scanner.current_hz / 1e6:.4f} MHz")
        self.range_label.setText(
            f"Range: {self.scanner.start_hz / 1e6:g}-{self.scanner.stop_hz / 1e6:g} MHz | "
            f"Step: {format_step(self.step_cb())}"
        )

    def closeEvent(self, event):
        self.timer.stop()
        self.scanner.pause()
        event.accept()


class AboutDialog(QtWidgets.QDialog):
    def __init__(self, parent: QtWidgets.QWidget) -> None:
        super().__init__(parent)
        self.setWindowTitle("About PrimeSDR Console")
        layout = QtWidgets.QVBoxLayout(self)
        text = QtWidgets.QLabel(
            f"PrimeSDR Console {__version__}\n\n"
            "Spectrum and waterfall console for an external SDR backend.\n"
            "Click to tune (snapped to the step), wheel to step, right-click for bands.\n"
            "Arrow keys: Up/Down 1 MHz, Left/Right 10 kHz."
        )
        text.setWordWrap(True)
        layout.addWidget(text)
        buttons = QtWidgets.QDialogButtonBox(QtWidgets.QDialogButtonBox.Close)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)
