# src/quote_todo/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

PACKAGE_LOGGER = "quote_todo"
SEEDER_THREAD_NAME = "quote-seeder"

_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s [%(threadName)s] %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


class _PromptFriendlyFilter(logging.Filter):
    """
    Console filter for the REPL.

    The user is typing while the startup seed is in flight, so records from the
    seeder thread only reach the console at WARNING+. Library records
    (httpx, httpcore, sqlite3 warnings) only at ERROR+. Everything still goes
    to the log file.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.threadName == SEEDER_THREAD_NAME:
            return record.levelno >= logging.WARNING
        if record.name == PACKAGE_LOGGER or record.name.startswith(PACKAGE_LOGGER + "."):
            return True
        return record.levelno >= logging.ERROR


def console_level_for(settings) -> int:
    level = logging.getLevelName(str(getattr(settings, "log_level", "INFO")).strip().upper())
    return level if isinstance(level, int) else logging.INFO


def log_file_for(settings) -> Path:
    app_name = str(getattr(settings, "app_name", "") or "quote-todo")
    return Path(settings.data_dir) / f"{app_name}.log"


def setup_logging(settings) -> Path:
    """
    Route all logging to stderr (filtered, at settings.log_level) and to
    <data_dir>/<app_name>.log (DEBUG). Replaces any handlers already on the
    root logger. Returns the log file path.
    """
    log_file = log_file_for(settings)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level_for(settings))
    console.setFormatter(fmt)
    console.addFilter(_PromptFriendlyFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)

    # Request lines from the quote fetch are noise even in the file.
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug("Logging to %s", log_file)
    return log_file
