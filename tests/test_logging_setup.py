# tests/test_logging_setup.py

from __future__ import annotations

import logging

import pytest

from task_trigger.logging_setup import LOG_FILE_NAME, _ConsoleNoiseFilter, setup_logging


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
    logging.captureWarnings(False)


@pytest.mark.parametrize(
    ("name", "level", "shown"),
    [
        ("task_trigger.tree.model", logging.INFO, True),
        ("task_trigger.tasks.watcher", logging.INFO, False),
        ("task_trigger.tasks.watcher", logging.WARNING, True),
        ("task_trigger.tasks.output", logging.INFO, False),
        ("py.warnings", logging.WARNING, False),
        ("urllib3", logging.ERROR, True),
    ],
)
def test_console_filter(name: str, level: int, shown: bool) -> None:
    assert _ConsoleNoiseFilter().filter(_record(name, level)) is shown


def test_setup_logging_writes_task_output_to_file(tmp_path, restore_root_logger) -> None:
    log_file = setup_logging(log_dir=tmp_path / "logs")

    logging.getLogger("task_trigger.tasks.output").info("[build] compiling")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert log_file == tmp_path / "logs" / LOG_FILE_NAME
    assert "[build] compiling" in log_file.read_text(encoding="utf-8")
