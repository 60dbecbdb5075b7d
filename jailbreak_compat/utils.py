from __future__ import annotations

import logging
import os
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

_LOGGER_NAME = "jailbreak_compat"
_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(log_dir: Optional[Path | str] = None, verbose: bool = False) -> Optional[Path]:
    """
    Configure package-wide logging.

    Always attaches a console handler; when ``log_dir`` is given a rotating
    session log is written there as well. Returns the session log path (or
    None without a log directory). Subsequent calls keep the existing handlers.
    """
    os.environ.setdefault("PYTHONUTF8", "1")
    log_path: Optional[Path] = None
    if log_dir is not None:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        log_path = directory / f"session-{datetime.now(UTC).strftime('%Y%m%d-%H%M%S')}.log"

    logger = logging.getLogger(_LOGGER_NAME)
    if logger.handlers:
        return log_path

    level = logging.DEBUG if verbose else logging.INFO
    logger.setLevel(level)

    formatter = logging.Formatter(_FORMAT)

    if log_path is not None:
        file_handler = RotatingFileHandler(log_path, maxBytes=5 * 1024 * 1024, backupCount=5, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return log_path


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Return a child logger of the package logger. Defaults to the package root logger.
    """
    if name:
        if name == _LOGGER_NAME or name.startswith(f"{_LOGGER_NAME}."):
            return logging.getLogger(name)
        return logging.getLogger(f"{_LOGGER_NAME}.{name}")
    return logging.getLogger(_LOGGER_NAME)
