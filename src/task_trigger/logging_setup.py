# src/task_trigger/logging_setup.py

"""
Logging for task-trigger.

stderr carries what an operator at the console wants to see; the log file under the
data dir keeps everything, including each line a task printed.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "task-trigger.log"
LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"

# Loggers that run constantly or duplicate what the console already prints.
_QUIET_LOGGERS = ("task_trigger.tasks.watcher", "task_trigger.tasks.output")


class _ConsoleNoiseFilter(logging.Filter):
    """Own logs pass; watcher polls and task output need WARNING; everything else needs ERROR."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not record.name.startswith("task_trigger."):
            return record.levelno >= logging.ERROR
        if record.name.startswith(_QUIET_LOGGERS):
            return record.levelno >= logging.WARNING
        return True


def setup_logging(
    *,
    log_dir: str | Path = ".local/task-trigger",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """Install the console and file handlers on the root logger. Returns the log file path."""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(formatter)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    to_file = logging.FileHandler(log_file, encoding="utf-8")
    to_file.setLevel(file_level)
    to_file.setFormatter(formatter)
    root.addHandler(to_file)

    # Python warnings go through "py.warnings", filtered like other foreign loggers.
    logging.captureWarnings(True)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    return log_file
