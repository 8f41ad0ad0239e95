# src/todo_keeper/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "todo_keeper.log"
LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Minimum console level per logger prefix; the longest matching prefix wins.
# Saves happen on every mutation, so storage chatter stays in the file log.
CONSOLE_THRESHOLDS: dict[str, int] = {
    "todo_keeper": logging.DEBUG,
    "todo_keeper.tasks.slot_store": logging.WARNING,
    "todo_keeper.tasks.task_codec": logging.WARNING,
}


class ConsoleThresholdFilter(logging.Filter):
    """Per-prefix console thresholds; anything not listed needs ERROR+."""

    def __init__(self, thresholds: dict[str, int] | None = None, default: int = logging.ERROR) -> None:
        super().__init__()
        self._thresholds = dict(CONSOLE_THRESHOLDS if thresholds is None else thresholds)
        self._default = default

    def threshold_for(self, name: str) -> int:
        best, level = -1, self._default
        for prefix, lvl in self._thresholds.items():
            if (name == prefix or name.startswith(prefix + ".")) and len(prefix) > best:
                best, level = len(prefix), lvl
        return level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= self.threshold_for(record.name)


def level_from_name(name: str | None, default: int = logging.INFO) -> int:
    level = logging.getLevelName(str(name or "").strip().upper())
    return level if isinstance(level, int) else default


def setup_logging(
    *,
    log_dir: str | Path = ".local/todo_keeper",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    log_file_name: str = LOG_FILE_NAME,
) -> Path:
    """
    Route all logging to a filtered stderr handler and a full file log.

    Replaces any handlers already on the root logger, so call it once at
    startup. Returns the log file path.
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    log_file = log_path / log_file_name
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.addFilter(ConsoleThresholdFilter())

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(file_level)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(min(console_level, file_level))
    for handler in (console, file_handler):
        handler.setFormatter(formatter)
        root.addHandler(handler)

    # warnings.warn(...) arrives as 'py.warnings', which the console drops below ERROR
    logging.captureWarnings(True)
    return log_file
