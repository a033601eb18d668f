"""Logging setup for the console and the demo backend."""

from __future__ import annotations

import logging
import os
import pathlib
import sys
from logging.handlers import RotatingFileHandler

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _state_dir() -> pathlib.Path:
    # ~/.local/state/prime-sdr-console/logs on Linux.
    base = os.environ.get("XDG_STATE_HOME", os.path.expanduser("~/.local/state"))
    path = pathlib.Path(base) / "prime-sdr-console" / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


def setup_logging(name: str = "prime_sdr_console", to_file: bool = True) -> logging.Logger:
    level_name = os.environ.get("PRIME_SDR_LOG", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = False
    fmt = logging.Formatter(LOG_FORMAT)

    if to_file:
        try:
            log_path = _state_dir() / "console.log"
            fh = RotatingFileHandler(str(log_path), maxBytes=1_000_000, backupCount=5, encoding="utf-8")
        except OSError as exc:
            print(f"File logging disabled: {exc}", file=sys.stderr)
        else:
            fh.setLevel(level)
            fh.setFormatter(fmt)
            logger.addHandler(fh)

    sh = logging.StreamHandler(stream=sys.stderr)
    sh.setLevel(level)
    sh.setFormatter(fmt)
    logger.addHandler(sh)

    logger.debug("Logging initialized at %s", logging.getLevelName(level))
    return logger
