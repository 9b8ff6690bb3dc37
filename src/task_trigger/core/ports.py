# src/task_trigger/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The tree model depends on Protocols instead of concrete implementations.
This keeps task providers, the executor and the settings store swappable
and makes testing easier.
"""

from typing import TYPE_CHECKING, Any, Awaitable, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import Task
    from .events import EventEmitter


class TaskSource(Protocol):
    """Returns the current task list. May raise TaskFetchError."""

    def fetch_tasks(self) -> Awaitable[list[Task]]: ...


class TaskSink(Protocol):
    """Runs a task. Failures are raised to the caller; no retry."""

    def execute_task(self, task: Task) -> Awaitable[None]: ...


class ConfigurationReader(Protocol):
    """
    Read-only settings store for the tree options.

    get() must not cache: each rebuild reads the current value.
    """

    on_did_change: EventEmitter[frozenset[str]]

    def get(self, key: str, default: Any = None) -> Any: ...
