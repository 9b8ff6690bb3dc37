# src/task_trigger/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..config import Configuration
from ..tree.model import TaskTreeModel
from ..tree.nodes import TaskNode


@dataclass
class AppState:
    # Settings are stored on the state so command handlers can read them.
    settings: Any

    configuration: Configuration
    task_source: Any
    executor: Any
    tree_model: TaskTreeModel

    # Console view state (not persisted).
    toggled_folders: set[str] = field(default_factory=set)
    visible_tasks: list[tuple[str, TaskNode]] = field(default_factory=list)
