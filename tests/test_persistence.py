import json

from prime_sdr_console.config import ConsoleConfig
from prime_sdr_console.persistence import apply_state, load_state, save_state, snapshot_state
from prime_sdr_console.protocol import build_update_config
from prime_sdr_console.state import ConsoleState, ReceiverSettings


def test_roundtrip(tmp_path) -> None:
    path = str(tmp_path / "state.json")
    state = ConsoleState.from_config(ConsoleConfig())
    state.tune(7_100_000)
    state.update_controls(contrast=30)
    state.toggle_power()
    save_state(snapshot_state(state.settings, state.controls), path)

    data = load_state(path)
    assert "is_playing" not in data
    cfg = apply_state(ConsoleConfig(), data)
    assert cfg.frequency_hz == 7_100_000
    assert cfg.contrast == 30


def test_missing_or_broken_file(tmp_path) -> None:
    assert load_state(str(tmp_path / "missing.json")) == {}
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    assert load_state(str(broken)) == {}
    listing = tmp_path / "list.json"
    listing.write_text(json.dumps([1, 2]), encoding="utf-8")
    assert load_state(str(listing)) == {}


def test_apply_state_validates_types() -> None:
    cfg = apply_state(
        ConsoleConfig(),
        {
            "frequency_hz": True,
            "gain_db": 12,
            "tuner_agc": "yes",
            "mode": "AM",
            "ppm": 3.7,
            "uri": "ws://elsewhere",
        },
    )
    assert cfg.frequency_hz == 145_350_000
    assert cfg.gain_db == 12.0
    assert cfg.tuner_agc is True
    assert cfg.mode == "AM"
    assert cfg.ppm == 3
    assert cfg.uri == "ws://localhost:8765"


def test_apply_state_rejects_out_of_range_values() -> None:
    cfg = apply_state(
        ConsoleConfig(),
        {
            "mode": "FOO",
            "sampling_mode": "x",
            "source": "HackRF",
            "frequency_hz": -5,
            "sample_rate_hz": 0,
            "tcp_port": 0,
        },
    )
    defaults = ConsoleConfig()
    assert cfg.mode == defaults.mode
    assert cfg.sampling_mode == defaults.sampling_mode
    assert cfg.source == defaults.source
    assert cfg.frequency_hz == defaults.frequency_hz
    assert cfg.sample_rate_hz == defaults.sample_rate_hz
    assert cfg.tcp_port == defaults.tcp_port


def test_apply_state_rejects_non_finite_numbers(tmp_path) -> None:
    path = tmp_path / "state.json"
    path.write_text(
        '{"frequency_hz": Infinity, "gain_db": NaN, "squelch": -Infinity, "ppm": NaN}',
        encoding="utf-8",
    )
    cfg = apply_state(ConsoleConfig(), load_state(str(path)))
    defaults = ConsoleConfig()
    assert cfg.frequency_hz == defaults.frequency_hz
    assert cfg.gain_db == defaults.gain_db
    assert cfg.squelch == defaults.squelch
    assert cfg.ppm == defaults.ppm


def test_restored_state_always_builds_a_control_message() -> None:
    cfg = apply_state(ConsoleConfig(), {"mode": "FOO", "frequency_hz": -1, "sample_rate_hz": 0})
    message = build_update_config(ReceiverSettings.from_config(cfg))
    assert message["config"]["mode"] == "NFM"
