# src/task_trigger/tree/nodes.py

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Literal

from ..tasks.task_models import Task

TRIGGER_TASK_COMMAND = "tasktrigger.triggerTask"


class NodeKind(StrEnum):
    TASK = "task"
    FOLDER = "folder"


class TreeItemCollapsibleState(StrEnum):
    NONE = "none"
    COLLAPSED = "collapsed"
    EXPANDED = "expanded"


@dataclass(slots=True)
class TaskNode:
    display_name: str
    task: Task
    kind: Literal[NodeKind.TASK] = field(default=NodeKind.TASK, init=False)

    @property
    def label(self) -> str:
        return self.display_name

    @property
    def description(self) -> str | None:
        return self.task.detail


@dataclass(slots=True)
class FolderNode:
    """
    Container node.

    Top-level folders are labelled with a source name; second-level folders with the
    folder prefix parsed out of task names.
    """

    label: str
    entries: list[TreeNode] = field(default_factory=list)
    collapsed: bool = False
    kind: Literal[NodeKind.FOLDER] = field(default=NodeKind.FOLDER, init=False)

    def find_folder(self, label: str) -> FolderNode | None:
        for entry in self.entries:
            if entry.kind is NodeKind.FOLDER and entry.label == label:
                return entry
        return None

    def iter_tasks(self) -> Iterator[TaskNode]:
        """Yield every TaskNode below this folder (depth-first, in entry order)."""
        for entry in self.entries:
            if entry.kind is NodeKind.FOLDER:
                yield from entry.iter_tasks()
            else:
                yield entry


TreeNode = TaskNode | FolderNode

# Source name -> top-level folder. Insertion order = sorted source names.
Hierarchy = dict[str, FolderNode]


@dataclass(frozen=True, slots=True)
class Command:
    command: str
    title: str
    arguments: tuple[Any, ...] = ()


@dataclass(frozen=True, slots=True)
class TreeItem:
    """What the rendering surface shows for one node."""

    label: str
    collapsible_state: TreeItemCollapsibleState
    description: str | None = None
    command: Command | None = None


def to_tree_item(node: TreeNode) -> TreeItem:
    if node.kind is NodeKind.FOLDER:
        state = TreeItemCollapsibleState.COLLAPSED if node.collapsed else TreeItemCollapsibleState.EXPANDED
        return TreeItem(label=node.label, collapsible_state=state)

    return TreeItem(
        label=node.label,
        collapsible_state=TreeItemCollapsibleState.NONE,
        description=node.description,
        command=Command(command=TRIGGER_TASK_COMMAND, title="Trigger", arguments=(node.task,)),
    )
