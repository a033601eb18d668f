"""Receiver settings, display controls and the observable console state.

ViewState is an immutable snapshot read by the renderers each frame. Only user
interaction and configuration events mutate ConsoleState; every mutation
replaces whole values and notifies subscribers synchronously.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import Callable, Optional

from prime_sdr_console.config import CONTROL_LIMITS, BandPreset, ConsoleConfig

LOGGER = logging.getLogger(__name__)

# Keyboard tuning increments.
KEY_STEPS_HZ = {
    "up": 1_000_000,
    "down": -1_000_000,
    "right": 10_000,
    "left": -10_000,
}


@dataclass(frozen=True)
class ReceiverSettings:
    """Every receiver field that is mirrored to the backend."""

    frequency_hz: int
    mode: str
    bandwidth_hz: int
    squelch: float
    gain_db: float
    step_hz: int
    sample_rate_hz: int
    sampling_mode: str
    tuner_agc: bool
    ppm: int
    volume: int
    nr_enabled: bool
    source: str
    tcp_host: str
    tcp_port: int
    is_playing: bool = False

    @classmethod
    def from_config(cls, cfg: ConsoleConfig) -> "ReceiverSettings":
        names = {f.name for f in fields(cls)} - {"is_playing"}
        return cls(**{name: getattr(cfg, name) for name in names})


@dataclass(frozen=True)
class DisplayControls:
    offset: int
    range: int
    contrast: int

    def clamped(self) -> "DisplayControls":
        values = {}
        for name, (low, high, _step) in CONTROL_LIMITS.items():
            values[name] = max(low, min(high, int(getattr(self, name))))
        return DisplayControls(**values)

    @classmethod
    def from_config(cls, cfg: ConsoleConfig) -> "DisplayControls":
        return cls(offset=cfg.offset, range=cfg.range, contrast=cfg.contrast).clamped()


@dataclass(frozen=True)
class ViewState:
    center_frequency_hz: int
    view_bandwidth_hz: int
    step_hz: int
    vertical_offset: int
    vertical_range: int
    contrast: int
    is_playing: bool

    @classmethod
    def from_parts(cls, settings: ReceiverSettings, controls: DisplayControls) -> "ViewState":
        return cls(
            center_frequency_hz=settings.frequency_hz,
            view_bandwidth_hz=settings.sample_rate_hz,
            step_hz=settings.step_hz,
            vertical_offset=controls.offset,
            vertical_range=controls.range,
            contrast=controls.contrast,
            is_playing=settings.is_playing,
        )


SettingsCallback = Callable[[ReceiverSettings], None]
ViewCallback = Callable[[ViewState], None]


class ConsoleState:
    """Single owner of receiver settings and display controls."""

    def __init__(
        self,
        settings: ReceiverSettings,
        controls: Optional[DisplayControls] = None,
    ) -> None:
        self._settings = settings
        self._controls = (controls or DisplayControls(-20, 67, 15)).clamped()
        self._view_subscribers: list[ViewCallback] = []
        self._settings_subscribers: list[SettingsCallback] = []

    @classmethod
    def from_config(cls, cfg: ConsoleConfig) -> "ConsoleState":
        return cls(ReceiverSettings.from_config(cfg), DisplayControls.from_config(cfg))

    @property
    def settings(self) -> ReceiverSettings:
        return self._settings

    @property
    def controls(self) -> DisplayControls:
        return self._controls

    def view(self) -> ViewState:
        return ViewState.from_parts(self._settings, self._controls)

    def subscribe(self, callback: ViewCallback) -> None:
        self._view_subscribers.append(callback)

    def unsubscribe(self, callback: ViewCallback) -> None:
        if callback in self._view_subscribers:
            self._view_subscribers.remove(callback)

    def subscribe_settings(self, callback: SettingsCallback) -> None:
        self._settings_subscribers.append(callback)

    def unsubscribe_settings(self, callback: SettingsCallback) -> None:
        if callback in self._settings_subscribers:
            self._settings_subscribers.remove(callback)

    def update_settings(self, **changes: object) -> bool:
        updated = replace(self._settings, **changes)
        if updated == self._settings:
            return False
        previous_view = self.view()
        self._settings = updated
        self._notify_settings(updated)
        self._notify_view(previous_view)
        return True

    def update_controls(self, **changes: object) -> bool:
        updated = replace(self._controls, **changes).clamped()
        if updated == self._controls:
            return False
        previous_view = self.view()
        self._controls = updated
        self._notify_view(previous_view)
        return True

    def tune(self, frequency_hz: float) -> bool:
        return self.update_settings(frequency_hz=max(0, int(round(frequency_hz))))

    def tune_by(self, delta_hz: float) -> bool:
        return self.tune(self._settings.frequency_hz + delta_hz)

    def key_tune(self, key: str) -> bool:
        delta = KEY_STEPS_HZ.get(key)
        if delta is None:
            return False
        return self.tune_by(delta)

    def toggle_power(self) -> bool:
        return self.update_settings(is_playing=not self._settings.is_playing)

    def select_band(self, preset: BandPreset) -> bool:
        return self.update_settings(
            frequency_hz=preset.freq_hz,
            mode=preset.mode.value,
            step_hz=preset.step_hz,
        )

    def nudge_control(self, name: str, direction: int) -> bool:
        """Move a display control one wheel step up (+1) or down (-1)."""

        _low, _high, step = CONTROL_LIMITS[name]
        current = getattr(self._controls, name)
        sign = 1 if direction > 0 else -1
        return self.update_controls(**{name: current + sign * step})

    def _notify_settings(self, settings: ReceiverSettings) -> None:
        for callback in list(self._settings_subscribers):
            try:
                callback(settings)
            except Exception:
                LOGGER.exception("Settings subscriber failed")

    def _notify_view(self, previous: ViewState) -> None:
        view = self.view()
        if view == previous:
            return
        for callback in list(self._view_subscribers):
            try:
                callback(view)
            except Exception:
                LOGGER.exception("View subscriber failed")
