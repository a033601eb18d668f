"""Console configuration defaults and static tables.

Defines the ConsoleConfig dataclass, band/step/sample-rate tables and the
frequency formatter. This module should not import UI or network classes, and
it should stay focused on configuration data only.
"""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass


class DemodMode(str, enum.Enum):
    NFM = "NFM"
    WFM = "WFM"
    AM = "AM"
    LSB = "LSB"
    USB = "USB"
    CW = "CW"


SAMPLING_MODES = ("Quadrature", "Direct Q")
SOURCES = ("RTL-SDR", "TCP")

# Manual tuning step choices: 0.5 kHz .. 200 kHz.
STEPS_HZ = [500, 1000, 2500, 5000, 10000, 25000, 50000, 100000, 200000]

SAMPLE_RATES = [
    ("512 KSPS", 512_000),
    ("1.024 MSPS", 1_024_000),
    ("1.2 MSPS", 1_200_000),
    ("1.5 MSPS", 1_500_000),
    ("1.8 MSPS", 1_800_000),
    ("2.0 MSPS", 2_000_000),
    ("2.4 MSPS", 2_400_000),
]


@dataclass(frozen=True)
class BandPreset:
    name: str
    freq_hz: int
    mode: DemodMode
    step_hz: int


BANDS = [
    BandPreset("OM", 940_000, DemodMode.AM, 10_000),
    BandPreset("160m", 1_745_000, DemodMode.LSB, 500),
    BandPreset("80m", 3_710_000, DemodMode.LSB, 500),
    BandPreset("60m", 5_360_000, DemodMode.LSB, 500),
    BandPreset("40m", 7_100_000, DemodMode.LSB, 500),
    BandPreset("30m", 10_100_000, DemodMode.USB, 500),
    BandPreset("20m", 14_200_000, DemodMode.USB, 500),
    BandPreset("17m", 18_100_000, DemodMode.USB, 500),
    BandPreset("15m", 21_200_000, DemodMode.USB, 500),
    BandPreset("11m", 27_455_000, DemodMode.USB, 500),
    BandPreset("10m", 28_460_000, DemodMode.USB, 500),
    BandPreset("6m", 50_150_000, DemodMode.USB, 1000),
    BandPreset("AIR", 119_450_000, DemodMode.AM, 25_000),
    BandPreset("VHF", 145_350_000, DemodMode.NFM, 10_000),
    BandPreset("UHF", 439_400_000, DemodMode.NFM, 10_000),
    BandPreset("ADSB", 1_090_000_000, DemodMode.AM, 25_000),
    BandPreset("SAT", 1_545_000_000, DemodMode.USB, 1000),
]

# (min, max, wheel step) for the visualizer strip controls.
CONTROL_LIMITS = {
    "offset": (-50, 50, 2),
    "range": (10, 200, 5),
    "contrast": (0, 50, 2),
}


def format_frequency(hz: float) -> str:
    """Render a frequency as ``MHz.kHz.Hz``, e.g. ``145.350.000``."""

    val = max(0, int(round(hz)))
    mhz = val // 1_000_000
    khz = (val % 1_000_000) // 1000
    rest = val % 1000
    return f"{mhz}.{khz:03d}.{rest:03d}"


def format_step(step_hz: int) -> str:
    if step_hz < 1000:
        return f"{step_hz} Hz"
    return f"{step_hz / 1000:g} kHz"


@dataclass
class ConsoleConfig:
    """
    Configuration for the operator console.

    Notes
    The view bandwidth of the visualizer equals the receiver sample rate.
    Receiver fields are the startup values; persisted state overrides them.
    """

    # Backend websocket endpoint and fixed reconnect delay.
    uri: str = "ws://localhost:8765"
    reconnect_delay_s: float = 3.0

    # Magnitude frames always carry this many bins.
    frame_bins: int = 4096

    # Redraw cadence while running (~60 Hz) and visualizer split.
    render_interval_ms: int = 16
    spectrum_fraction: float = 0.25

    # Receiver settings.
    frequency_hz: int = 145_350_000
    mode: str = DemodMode.NFM.value
    bandwidth_hz: int = 10_000
    squelch: float = 0.0
    gain_db: float = 49.6
    step_hz: int = 10_000
    sample_rate_hz: int = 1_024_000
    sampling_mode: str = "Quadrature"
    tuner_agc: bool = True
    ppm: int = 0
    volume: int = 75
    nr_enabled: bool = False
    source: str = "RTL-SDR"
    tcp_host: str = "127.0.0.1"
    tcp_port: int = 1234

    # Visualizer strip.
    offset: int = -20
    range: int = 67
    contrast: int = 15

    @classmethod
    def from_env(cls) -> "ConsoleConfig":
        cfg = cls()
        uri = os.environ.get("PRIME_SDR_URI")
        if uri:
            cfg.uri = uri
        return cfg
