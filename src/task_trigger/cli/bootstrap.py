# src/task_trigger/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires providers, executor, configuration and tree model into AppState,
- registers the host command that tree items invoke.
"""

from __future__ import annotations

import logging

from ..config import Configuration, get_settings
from ..core.state import AppState
from ..tasks.task_models import Task
from ..tasks.task_provider import CompositeTaskSource, MakefileTaskProvider, TasksFileProvider
from ..tasks.task_runner import OutputCallback, SubprocessTaskExecutor
from ..tree.model import TaskTreeModel
from .commands import register_host_commands

logger = logging.getLogger(__name__)


def _print_output(task: Task, line: str) -> None:
    print(f"  [{task.name}] {line}", flush=True)


def create_initial_state(*, settings=None, on_output: OutputCallback | None = _print_output) -> AppState:
    """
    Create AppState from the provided settings.

    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    settings.data_dir.mkdir(parents=True, exist_ok=True)

    configuration = Configuration(env_file=settings.env_file)
    task_source = CompositeTaskSource(
        [
            TasksFileProvider(settings.tasks_file),
            MakefileTaskProvider(settings.makefile),
        ]
    )
    executor = SubprocessTaskExecutor(
        timeout_seconds=settings.task_timeout_seconds,
        on_output=on_output,
    )
    tree_model = TaskTreeModel(task_source, executor, configuration)

    state = AppState(
        settings=settings,
        configuration=configuration,
        task_source=task_source,
        executor=executor,
        tree_model=tree_model,
    )
    register_host_commands(state)
    logger.debug(
        "State created (tasks_file=%s makefile=%s env_file=%s)",
        settings.tasks_file,
        settings.makefile,
        settings.env_file,
    )
    return state
