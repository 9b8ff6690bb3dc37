# src/task_trigger/tree/collapse.py

from __future__ import annotations

from ..config import DEFAULT_AUTO_COLLAPSE_LIMIT
from .nodes import FolderNode, Hierarchy, NodeKind


def apply_collapse_policy(hierarchy: Hierarchy, threshold: int = DEFAULT_AUTO_COLLAPSE_LIMIT) -> None:
    """Mark every folder with more than `threshold` entries as collapsed (in place)."""
    stack: list[FolderNode] = list(hierarchy.values())

    while stack:
        folder = stack.pop()
        folder.collapsed = len(folder.entries) > threshold

        for entry in folder.entries:
            if entry.kind is NodeKind.FOLDER:
                stack.append(entry)
