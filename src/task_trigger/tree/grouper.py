# src/task_trigger/tree/grouper.py

from __future__ import annotations

"""
Task grouping.

Builds the containment structure shown in the tree:

    SourceA
     + TaskA
     > FolderA
       + TaskA_A
       + TaskA_B
     > FolderB
       + TaskB_A
    SourceB
     + ...

Folders come from the task name prefix before the separator (see name_parser).
"""

import logging
import re
from collections.abc import Iterable

from ..tasks.task_models import Task
from .name_parser import parse_task_name
from .nodes import FolderNode, Hierarchy, TaskNode

logger = logging.getLogger(__name__)


def create_source_containers(tasks: Iterable[Task]) -> Hierarchy:
    """One empty, expanded top-level folder per distinct source, in sorted order."""
    sources = sorted({task.source for task in tasks})
    return {source: FolderNode(label=source, entries=[], collapsed=False) for source in sources}


def add_task_to_folder(container: FolderNode, folder_name: str, node: TaskNode) -> None:
    existing = container.find_folder(folder_name)
    if existing is not None:
        existing.entries.append(node)
    else:
        container.entries.append(FolderNode(label=folder_name, entries=[node], collapsed=False))


def build_hierarchy(tasks: Iterable[Task], separator: str | re.Pattern[str]) -> Hierarchy:
    """
    Group tasks by source, then by folder prefix.

    Pure: returns a fresh Hierarchy. Raises SeparatorPatternError for a bad separator.
    """
    tasks = list(tasks)
    hierarchy = create_source_containers(tasks)

    for task in tasks:
        folder_name, display_name = parse_task_name(task.name, separator)
        node = TaskNode(display_name=display_name, task=task)

        container = hierarchy.get(task.source)
        if container is None:
            logger.warning("Dropping task %r: source %r has no container", task.name, task.source)
            continue

        if folder_name:
            add_task_to_folder(container, folder_name, node)
        else:
            container.entries.append(node)

    return hierarchy
