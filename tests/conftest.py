# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from task_trigger.cli.commands import register_host_commands
from task_trigger.core.state import AppState
from task_trigger.tree.model import TaskTreeModel

from .fakes import FakeConfiguration, FakeTaskSink, FakeTaskSource, make_task


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the command handlers.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's environment and .env.
    """
    return SimpleNamespace(
        app_name="task-trigger-test",
        data_dir=tmp_path / "data",
        tasks_file=tmp_path / ".vscode" / "tasks.json",
        makefile=tmp_path / "Makefile",
        env_file=tmp_path / ".env",
        watch_interval_seconds=0.01,
        task_timeout_seconds=None,
    )


@pytest.fixture()
def task_source() -> FakeTaskSource:
    return FakeTaskSource(
        [
            make_task("Build: Debug", "Workspace", detail="debug build"),
            make_task("Build: Release", "Workspace"),
            make_task("Lint", "Workspace"),
            make_task("clean", "make"),
        ]
    )


@pytest.fixture()
def task_sink() -> FakeTaskSink:
    return FakeTaskSink()


@pytest.fixture()
def configuration() -> FakeConfiguration:
    return FakeConfiguration(separatorRegex=":", autoCollapseLimit=5)


@pytest.fixture()
def model(task_source, task_sink, configuration) -> TaskTreeModel:
    return TaskTreeModel(task_source, task_sink, configuration)


@pytest.fixture()
def state(settings, task_source, task_sink, configuration, model) -> AppState:
    """AppState wired with deterministic fakes; host commands point at this state's model."""
    st = AppState(
        settings=settings,
        configuration=configuration,
        task_source=task_source,
        executor=task_sink,
        tree_model=model,
    )
    register_host_commands(st)
    return st
