# tests/test_collapse.py

from __future__ import annotations

from task_trigger.tree.collapse import apply_collapse_policy
from task_trigger.tree.grouper import build_hierarchy
from task_trigger.tree.nodes import NodeKind

from .fakes import make_task

SCENARIO = [
    make_task("FolderA: Task1", "S1"),
    make_task("FolderA: Task2", "S1"),
    make_task("Solo", "S1"),
]


def _folder(hierarchy, source: str, label: str):
    return hierarchy[source].find_folder(label)


def test_large_threshold_keeps_folders_expanded() -> None:
    hierarchy = build_hierarchy(SCENARIO, ":")
    apply_collapse_policy(hierarchy, 10)

    assert _folder(hierarchy, "S1", "FolderA").collapsed is False
    assert hierarchy["S1"].collapsed is False


def test_folder_above_threshold_collapses() -> None:
    hierarchy = build_hierarchy(SCENARIO, ":")
    apply_collapse_policy(hierarchy, 1)

    assert _folder(hierarchy, "S1", "FolderA").collapsed is True
    # Source container has 2 entries (FolderA + Solo).
    assert hierarchy["S1"].collapsed is True


def test_threshold_boundary_is_strict() -> None:
    hierarchy = build_hierarchy(SCENARIO, ":")
    apply_collapse_policy(hierarchy, 2)

    assert _folder(hierarchy, "S1", "FolderA").collapsed is False
    assert hierarchy["S1"].collapsed is False


def test_policy_applies_to_every_folder() -> None:
    tasks = [make_task(f"G{i % 4}: t{i}", f"S{i % 3}") for i in range(40)]
    hierarchy = build_hierarchy(tasks, ":")
    threshold = 3

    apply_collapse_policy(hierarchy, threshold)

    stack = list(hierarchy.values())
    seen = 0
    while stack:
        folder = stack.pop()
        seen += 1
        assert folder.collapsed == (len(folder.entries) > threshold)
        stack.extend(e for e in folder.entries if e.kind is NodeKind.FOLDER)
    assert seen == 3 + 3 * 4


def test_reapplying_with_higher_threshold_expands_again() -> None:
    hierarchy = build_hierarchy(SCENARIO, ":")
    apply_collapse_policy(hierarchy, 0)
    apply_collapse_policy(hierarchy, 5)

    assert _folder(hierarchy, "S1", "FolderA").collapsed is False
