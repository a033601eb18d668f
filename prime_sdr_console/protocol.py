"""Wire helpers for the backend telemetry and control protocol.

Inbound binary messages carry exactly FRAME_BINS little-endian float32 dB
values. Inbound text messages are JSON and advisory only. Outbound control is
a single UPDATE_CONFIG JSON object built via helpers and validated against
control_json_schema().
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional, Sequence, Union

import jsonschema
import numpy as np

from prime_sdr_console.config import SAMPLING_MODES, DemodMode

FRAME_BINS = 4096
FRAME_DTYPE = np.dtype("<f4")
MESSAGE_UPDATE_CONFIG = "UPDATE_CONFIG"

DEMOD_MODES = [mode.value for mode in DemodMode]


class ProtocolError(ValueError):
    """Base error for undecodable backend messages."""


class MalformedFrameError(ProtocolError):
    """Binary payload does not hold exactly one magnitude frame."""


def control_json_schema() -> dict[str, Any]:
    """Return the JSON schema for outbound UPDATE_CONFIG messages."""

    return {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "title": "Receiver Control Message",
        "type": "object",
        "properties": {
            "type": {"const": MESSAGE_UPDATE_CONFIG},
            "config": {
                "type": "object",
                "properties": {
                    "frequency": {"type": "integer", "minimum": 0},
                    "sampleRate": {"type": "integer", "minimum": 1},
                    "gain": {"type": "number"},
                    "agc": {"type": "boolean"},
                    "ppm": {"type": "integer"},
                    "mode": {"enum": DEMOD_MODES},
                    "bw": {"type": "integer", "minimum": 0},
                    "squelch": {"type": "number"},
                    "playing": {"type": "boolean"},
                    "samplingMode": {"enum": list(SAMPLING_MODES)},
                },
                "required": [
                    "frequency",
                    "sampleRate",
                    "gain",
                    "agc",
                    "ppm",
                    "mode",
                    "bw",
                    "squelch",
                    "playing",
                    "samplingMode",
                ],
                "additionalProperties": False,
            },
        },
        "required": ["type", "config"],
        "additionalProperties": False,
    }


def decode_magnitude_frame(payload: Union[bytes, bytearray, memoryview]) -> np.ndarray:
    """Decode one binary telemetry message into a float32 frame.

    Raises MalformedFrameError unless the payload holds exactly FRAME_BINS
    values; a frame is never partially applied.
    """

    raw = bytes(payload)
    if len(raw) % FRAME_DTYPE.itemsize != 0:
        raise MalformedFrameError(f"Payload of {len(raw)} bytes is not a float32 array")
    count = len(raw) // FRAME_DTYPE.itemsize
    if count != FRAME_BINS:
        raise MalformedFrameError(f"Expected {FRAME_BINS} bins, got {count}")
    return np.frombuffer(raw, dtype=FRAME_DTYPE).astype(np.float32)


def encode_magnitude_frame(values: Sequence[float]) -> bytes:
    frame = np.asarray(values, dtype=FRAME_DTYPE)
    if frame.shape != (FRAME_BINS,):
        raise MalformedFrameError(f"Expected {FRAME_BINS} bins, got shape {frame.shape}")
    return frame.tobytes()


def make_update_config(
    *,
    frequency: int,
    sample_rate: int,
    gain: float,
    agc: bool,
    ppm: int,
    mode: str,
    bw: int,
    squelch: float,
    playing: bool,
    sampling_mode: str,
) -> dict[str, Any]:
    message = {
        "type": MESSAGE_UPDATE_CONFIG,
        "config": {
            "frequency": int(frequency),
            "sampleRate": int(sample_rate),
            "gain": float(gain),
            "agc": bool(agc),
            "ppm": int(ppm),
            "mode": str(mode),
            "bw": int(bw),
            "squelch": float(squelch),
            "playing": bool(playing),
            "samplingMode": str(sampling_mode),
        },
    }
    jsonschema.validate(message, control_json_schema())
    return message


def build_update_config(settings: Any) -> dict[str, Any]:
    """Build the UPDATE_CONFIG message for a ReceiverSettings snapshot."""

    return make_update_config(
        frequency=settings.frequency_hz,
        sample_rate=settings.sample_rate_hz,
        gain=settings.gain_db,
        agc=settings.tuner_agc,
        ppm=settings.ppm,
        mode=settings.mode,
        bw=settings.bandwidth_hz,
        squelch=settings.squelch,
        playing=settings.is_playing,
        sampling_mode=settings.sampling_mode,
    )


def parse_control_message(text: str) -> Optional[Mapping[str, Any]]:
    """Parse and validate an UPDATE_CONFIG message; None if invalid."""

    message = parse_text_message(text)
    if message is None:
        return None
    try:
        jsonschema.validate(message, control_json_schema())
    except jsonschema.ValidationError:
        return None
    return message["config"]


def parse_text_message(text: str) -> Optional[dict[str, Any]]:
    """Parse an advisory JSON text message. Parse failures yield None."""

    try:
        message = json.loads(text)
    except (TypeError, ValueError):
        return None
    if not isinstance(message, dict):
        return None
    return message
