"""Rotating log file for the CLI, the timer and the proxy client.

Modules log through ``logging.getLogger(__name__)``; every ``lifeforge_cli.*``
logger propagates to the ``lifeforge_cli`` logger configured here, which
writes under platformdirs' user_log_dir. ``LIFEFORGE_LOG_LEVEL`` raises the
threshold (DEBUG by default).
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

from platformdirs import user_log_dir

_APP_NAME = "lifeforge_cli"
_LEVEL_ENV = "LIFEFORGE_LOG_LEVEL"
_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

_logger: logging.Logger | None = None


def log_file_path() -> Path:
    """Where the application log is written."""
    return Path(user_log_dir(_APP_NAME)) / "lifeforge.log"


def _level_from_env() -> int:
    name = os.environ.get(_LEVEL_ENV, "").strip().upper()
    level = logging.getLevelName(name) if name else logging.DEBUG
    return level if isinstance(level, int) else logging.DEBUG


def _file_handler(path: Path) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
    )
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT))
    return handler


def get_logger() -> logging.Logger:
    """Configure the ``lifeforge_cli`` logger on first call and return it."""
    global _logger
    if _logger is None:
        logger = logging.getLogger(_APP_NAME)
        logger.setLevel(_level_from_env())
        if not logger.handlers:
            logger.addHandler(_file_handler(log_file_path()))
        logger.propagate = False
        _logger = logger
    return _logger
