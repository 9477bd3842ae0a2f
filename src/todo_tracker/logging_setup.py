# src/todo_tracker/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "todo.log"

# Minimum console level per logger-name prefix; first match wins.
# The core publishes a debug line per snapshot, so it only surfaces problems.
_CONSOLE_FLOORS: tuple[tuple[str, int], ...] = (
    ("todo_tracker.core.", logging.WARNING),
    ("todo_tracker.", logging.NOTSET),
    ("py.warnings", logging.ERROR),
)
_OTHER_FLOOR = logging.ERROR


class _ConsoleNoiseFilter(logging.Filter):
    """Keeps stderr readable while the REPL is in use. The log file gets everything."""

    def filter(self, record: logging.LogRecord) -> bool:
        for prefix, floor in _CONSOLE_FLOORS:
            if record.name.startswith(prefix):
                return record.levelno >= floor
        return record.levelno >= _OTHER_FLOOR


def setup_logging(
    *,
    log_dir: str | Path = ".local/todo",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Replace the root logger's handlers with a filtered stderr handler and a
    file handler writing `<log_dir>/todo.log`.

    Returns the log file path. Meant to run once at startup; a second call
    resets the handlers instead of stacking them.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)

    root.addHandler(console)
    root.addHandler(file_handler)

    # warnings.warn() goes through the "py.warnings" logger from here on.
    logging.captureWarnings(True)
    return log_file
