"""Persistence helpers for console state.

Stores and retrieves receiver settings and display controls as JSON. This
module must not import UI or network classes; it only handles filesystem I/O.
"""

from __future__ import annotations

import json
import logging
import math
import os
from dataclasses import asdict, fields
from typing import Any, Dict, Mapping, Optional

from prime_sdr_console.config import SAMPLING_MODES, SOURCES, ConsoleConfig, DemodMode

LOGGER = logging.getLogger(__name__)

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
STATE_PATH = os.path.join(ROOT_DIR, "prime-sdr-console-state.json")

# Only receiver and display fields are restored; transport settings come from config/env.
PERSISTED_FIELDS = (
    "frequency_hz",
    "mode",
    "bandwidth_hz",
    "squelch",
    "gain_db",
    "step_hz",
    "sample_rate_hz",
    "sampling_mode",
    "tuner_agc",
    "ppm",
    "volume",
    "nr_enabled",
    "source",
    "tcp_host",
    "tcp_port",
    "offset",
    "range",
    "contrast",
)

# Allowed values for enumerated fields and lower bounds for numeric ones.
FIELD_CHOICES = {
    "mode": tuple(mode.value for mode in DemodMode),
    "sampling_mode": SAMPLING_MODES,
    "source": SOURCES,
}
FIELD_MINIMUMS = {
    "frequency_hz": 0,
    "sample_rate_hz": 1,
    "bandwidth_hz": 0,
    "step_hz": 0,
    "tcp_port": 1,
}


def load_state(path: Optional[str] = None) -> Dict:
    path = path or STATE_PATH
    if not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        LOGGER.warning("Ignoring unreadable state file %s: %s", path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_state(data: Dict, path: Optional[str] = None) -> None:
    with open(path or STATE_PATH, "w", encoding="utf-8") as handle:
        json.dump(data, handle, indent=2)


def _coerce(value: Any, default: Any) -> Any:
    # bool is an int subclass; never accept it where a number is expected.
    if isinstance(default, bool):
        return value if isinstance(value, bool) else default
    if isinstance(value, bool):
        return default
    if isinstance(value, float) and not math.isfinite(value):
        return default
    if isinstance(default, int):
        return int(value) if isinstance(value, (int, float)) else default
    if isinstance(default, float):
        return float(value) if isinstance(value, (int, float)) else default
    if isinstance(default, str):
        return value if isinstance(value, str) else default
    return default


def _validated(name: str, value: Any, default: Any) -> Any:
    value = _coerce(value, default)
    choices = FIELD_CHOICES.get(name)
    if choices is not None and value not in choices:
        return default
    minimum = FIELD_MINIMUMS.get(name)
    if minimum is not None and value < minimum:
        return default
    return value


def apply_state(cfg: ConsoleConfig, state: Mapping[str, Any]) -> ConsoleConfig:
    """Overlay persisted values onto ``cfg`` with type validation."""

    for name in PERSISTED_FIELDS:
        if name in state:
            setattr(cfg, name, _validated(name, state[name], getattr(cfg, name)))
    return cfg


def snapshot_state(settings: Any, controls: Any) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    data.update({k: v for k, v in asdict(settings).items() if k in PERSISTED_FIELDS})
    data.update({f.name: getattr(controls, f.name) for f in fields(controls)})
    return data
