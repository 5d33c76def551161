"""Logging setup for hexpanel: rotating log file plus an optional console echo."""

from __future__ import annotations

import logging
import sys
import traceback
from logging.handlers import RotatingFileHandler
from pathlib import Path

from hexpanel.core.config import CACHE_DIR

LOG_FILE = CACHE_DIR / "hexpanel.log"
LOG_MAX_BYTES = 512 * 1024  # 512 KB
LOG_BACKUP_COUNT = 2
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: int = logging.DEBUG, console: bool = False) -> None:
    """Attach the log file handler to the ``hexpanel`` logger and install the excepthook.

    The shell runs without a terminal most of the time, so the file is the
    primary sink. ``console`` echoes warnings and above to stderr as well.
    Calling this twice does not duplicate handlers.
    """
    root = logging.getLogger("hexpanel")
    root.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    if not root.handlers:
        try:
            LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
            handler: logging.Handler = RotatingFileHandler(
                LOG_FILE,
                maxBytes=LOG_MAX_BYTES,
                backupCount=LOG_BACKUP_COUNT,
                encoding="utf-8",
            )
        except OSError:
            handler = logging.StreamHandler(sys.stderr)
            console = False
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)

        if console:
            echo = logging.StreamHandler(sys.stderr)
            echo.setLevel(logging.WARNING)
            echo.setFormatter(formatter)
            root.addHandler(echo)

    sys.excepthook = _excepthook


def _excepthook(exc_type: type, exc_value: BaseException, exc_tb) -> None:
    """Log uncaught exceptions, then defer to the default hook."""
    msg = "".join(traceback.format_exception(exc_type, exc_value, exc_tb))
    logging.getLogger("hexpanel").critical("Uncaught exception:\n%s", msg)
    sys.__excepthook__(exc_type, exc_value, exc_tb)


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name."""
    return logging.getLogger(f"hexpanel.{name}")


def get_log_path() -> Path:
    return LOG_FILE
