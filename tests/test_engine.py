import numpy as np
import pytest

from prime_sdr_console.config import ConsoleConfig
from prime_sdr_console.engine import INITIAL_FRAME_DB, ConsoleEngine, FrameSlot
from prime_sdr_console.state import ConsoleState


def _engine():
    state = ConsoleState.from_config(ConsoleConfig())
    engine = ConsoleEngine(state)
    sent = []
    engine.attach_sender(sent.append)
    return state, engine, sent


def _payload(value: float, count: int = 4096) -> bytes:
    return np.full(count, value, dtype="<f4").tobytes()


def test_initial_frame() -> None:
    slot = FrameSlot()
    frame = slot.latest()
    assert frame.shape == (4096,)
    assert np.all(frame == INITIAL_FRAME_DB)
    assert slot.generation == 0


def test_frame_slot_latest_wins() -> None:
    slot = FrameSlot(4)
    first = np.zeros(4, dtype=np.float32)
    second = np.ones(4, dtype=np.float32)
    slot.store(first)
    slot.store(second)
    assert slot.latest() is second
    assert slot.generation == 2
    with pytest.raises(ValueError):
        slot.latest()[0] = 5.0


def test_ingest_binary_updates_frame_and_level() -> None:
    _state, engine, _sent = _engine()
    levels = []
    engine.subscribe_level(levels.append)
    assert engine.ingest_binary(_payload(-40.0))
    assert np.all(engine.frames.latest() == -40.0)
    assert engine.signal_level == pytest.approx(60.0)
    assert levels == [pytest.approx(60.0)]


def test_malformed_frame_is_dropped() -> None:
    _state, engine, _sent = _engine()
    engine.ingest_binary(_payload(-40.0))
    assert not engine.ingest_binary(_payload(-10.0, count=2048))
    assert not engine.ingest_binary(b"\x00\x01\x02")
    assert engine.frames_dropped == 2
    assert np.all(engine.frames.latest() == -40.0)
    assert engine.signal_level == pytest.approx(60.0)


def test_connect_sends_full_state() -> None:
    _state, engine, sent = _engine()
    statuses = []
    engine.subscribe_status(statuses.append)
    assert not engine.connected
    engine.on_connection(True)
    assert engine.connected
    assert statuses == [True]
    assert sent[-1]["type"] == "UPDATE_CONFIG"
    assert sent[-1]["config"]["frequency"] == 145_350_000

    engine.on_connection(False)
    engine.on_connection(False)
    assert statuses == [True, False]


def test_settings_changes_are_sent_only_while_connected() -> None:
    state, engine, sent = _engine()
    state.tune(100_000_000)
    assert sent == []

    engine.on_connection(True)
    sent.clear()
    state.toggle_power()
    state.update_settings(gain_db=20.0)
    assert [m["config"]["playing"] for m in sent] == [True, True]
    assert sent[-1]["config"]["gain"] == 20.0
    assert sent[-1]["config"]["frequency"] == 100_000_000


def test_display_controls_send_nothing() -> None:
    state, engine, sent = _engine()
    engine.on_connection(True)
    sent.clear()
    state.update_controls(offset=10, range=100, contrast=20)
    assert sent == []


def test_text_messages_are_advisory() -> None:
    state, engine, _sent = _engine()
    before = state.settings
    engine.ingest_text('{"frequency": 1}')
    engine.ingest_text("garbage")
    assert engine.last_advisory == {"frequency": 1}
    assert state.settings == before


def test_invalid_settings_do_not_escape_on_connect() -> None:
    state, engine, sent = _engine()
    statuses = []
    engine.subscribe_status(statuses.append)
    state.update_settings(mode="FOO")
    engine.on_connection(True)
    assert statuses == [True]
    assert engine.connected
    assert sent == []

    state.update_settings(mode="AM")
    assert sent[-1]["config"]["mode"] == "AM"
