import logging

from prime_sdr_console.log import setup_logging


def test_setup_logging_writes_rotating_file(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path))
    monkeypatch.setenv("PRIME_SDR_LOG", "debug")
    logger = setup_logging("prime_sdr_console_test")
    assert logger.level == logging.DEBUG
    assert not logger.propagate
    logger.info("hello")
    for handler in logger.handlers:
        handler.flush()
    log_file = tmp_path / "prime-sdr-console" / "logs" / "console.log"
    assert "hello" in log_file.read_text(encoding="utf-8")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_setup_logging_without_file() -> None:
    logger = setup_logging("prime_sdr_console_test_stderr", to_file=False)
    assert len(logger.handlers) == 1
