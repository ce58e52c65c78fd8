# src/taskminder/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "taskminder.log"
LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Minimum console level per logger prefix; the longest matching prefix wins.
# The reminder loop prints reminders itself, so its INFO chatter stays in the file.
CONSOLE_THRESHOLDS: dict[str, int] = {
    "taskminder": logging.NOTSET,
    "taskminder.tasks.task_scheduler": logging.WARNING,
    "py.warnings": logging.ERROR,
}
DEFAULT_CONSOLE_THRESHOLD = logging.ERROR


class ConsoleThresholdFilter(logging.Filter):
    """Drop console records below the threshold configured for their logger."""

    def __init__(self, thresholds: dict[str, int] | None = None, default: int = DEFAULT_CONSOLE_THRESHOLD) -> None:
        super().__init__()
        self._thresholds = dict(CONSOLE_THRESHOLDS if thresholds is None else thresholds)
        self._default = default

    def threshold_for(self, name: str) -> int:
        best: str | None = None
        for prefix in self._thresholds:
            if name == prefix or name.startswith(prefix + "."):
                if best is None or len(prefix) > len(best):
                    best = prefix
        return self._default if best is None else self._thresholds[best]

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= self.threshold_for(record.name)


def build_console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
    handler.addFilter(ConsoleThresholdFilter())
    return handler


def build_file_handler(log_file: Path, level: int) -> logging.Handler:
    handler = logging.FileHandler(str(log_file), encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
    return handler


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskminder",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Route all logs to a filtered stderr handler and a full log file.

    Replaces any handlers already on the root logger, so calling it twice
    does not duplicate output. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    root.addHandler(build_console_handler(console_level))
    root.addHandler(build_file_handler(log_file, file_level))

    # warnings.warn(...) -> 'py.warnings' logger
    logging.captureWarnings(True)
    return log_file
