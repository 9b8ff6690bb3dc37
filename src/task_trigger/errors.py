# src/task_trigger/errors.py

from __future__ import annotations


class TaskTriggerError(Exception):
    """Base class for errors raised by task_trigger."""


class ConfigurationError(TaskTriggerError):
    pass


class SeparatorPatternError(ConfigurationError):
    """The configured separator is not a valid regular expression."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"Invalid separator pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class TaskFetchError(TaskTriggerError):
    """A task source failed to return a task list."""


class TaskExecutionError(TaskTriggerError):
    """A task could not be started or exited unsuccessfully."""

    def __init__(self, task_name: str, message: str, *, returncode: int | None = None) -> None:
        super().__init__(f"Task {task_name!r}: {message}")
        self.task_name = task_name
        self.returncode = returncode
