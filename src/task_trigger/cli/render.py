# src/task_trigger/cli/render.py

from __future__ import annotations

"""
Plain-text rendering of the task tree, driven only by the tree-data-provider
surface (get_children / get_tree_item).

    ▾ Workspace
      ▾ Build
          1. Debug  - debug build
          2. Release
      ▸ Test (7)
          3. Lint
"""

from ..tree.model import TaskTreeModel
from ..tree.nodes import NodeKind, TaskNode, TreeItemCollapsibleState, TreeNode

EXPANDED_MARK = "▾"
COLLAPSED_MARK = "▸"


def node_path(parent_path: str, node: TreeNode) -> str:
    return f"{parent_path}/{node.label}" if parent_path else node.label


async def render_tree(
    model: TaskTreeModel,
    toggled: set[str] | None = None,
) -> tuple[str, list[tuple[str, TaskNode]]]:
    """
    Render the tree. Folders whose path is in `toggled` flip their collapse state.

    Returns the text and the numbered leaves as (path, node) pairs, in display order.
    """
    toggled = toggled or set()
    lines: list[str] = []
    leaves: list[tuple[str, TaskNode]] = []

    async def walk(node: TreeNode, depth: int, path: str) -> None:
        item = model.get_tree_item(node)
        indent = "  " * depth

        if node.kind is NodeKind.FOLDER:
            collapsed = item.collapsible_state is TreeItemCollapsibleState.COLLAPSED
            if path in toggled:
                collapsed = not collapsed
            if collapsed:
                lines.append(f"{indent}{COLLAPSED_MARK} {item.label} ({len(node.entries)})")
                return
            lines.append(f"{indent}{EXPANDED_MARK} {item.label}")
            for child in await model.get_children(node):
                await walk(child, depth + 1, node_path(path, child))
            return

        leaves.append((path, node))
        desc = f"  - {item.description}" if item.description else ""
        lines.append(f"{indent}{len(leaves):>3}. {item.label}{desc}")

    roots = await model.get_children()
    if not roots:
        return "No tasks found.", []

    for root in roots:
        await walk(root, 0, root.label)

    return "\n".join(lines), leaves


def iter_task_paths(model: TaskTreeModel):
    """(path, node) for every task in the committed hierarchy, collapsed folders included."""
    for source, container in model.hierarchy.items():
        for entry in container.entries:
            if entry.kind is NodeKind.FOLDER:
                for leaf in entry.entries:
                    if leaf.kind is NodeKind.TASK:
                        yield f"{source}/{entry.label}/{leaf.label}", leaf
            else:
                yield f"{source}/{entry.label}", entry
