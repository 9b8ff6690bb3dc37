# src/task_trigger/tree/model.py

from __future__ import annotations

"""
Tree data provider for the task tree.

Every root read re-derives the whole hierarchy from live task state; refresh()
does the same and then notifies the rendering surface. A rebuild either commits
a complete new hierarchy or leaves the previous one in place.
"""

import logging

from ..config import AUTO_COLLAPSE_LIMIT, DEFAULT_AUTO_COLLAPSE_LIMIT, DEFAULT_SEPARATOR_REGEX, SEPARATOR_REGEX
from ..core.events import Disposable, EventEmitter
from ..core.ports import ConfigurationReader, TaskSink, TaskSource
from ..tasks.task_models import Task
from .collapse import apply_collapse_policy
from .grouper import build_hierarchy
from .nodes import FolderNode, Hierarchy, NodeKind, TreeItem, TreeNode, to_tree_item

logger = logging.getLogger(__name__)


def _child_sort_key(node: TreeNode) -> tuple[int, str]:
    # Folders first, then by label.
    return (0 if node.kind is NodeKind.FOLDER else 1, node.label)


class TaskTreeModel:
    def __init__(
        self,
        task_source: TaskSource,
        task_sink: TaskSink,
        configuration: ConfigurationReader,
    ) -> None:
        self.task_source = task_source
        self.task_sink = task_sink
        self.configuration = configuration

        self._hierarchy: Hierarchy = {}
        self.on_did_change_tree_data: EventEmitter[TreeNode | None] = EventEmitter("tree.changed")

        self._subscriptions: list[Disposable] = [
            configuration.on_did_change.event(self._on_configuration_changed),
        ]
        source_changed = getattr(task_source, "on_did_change", None)
        if isinstance(source_changed, EventEmitter):
            self._subscriptions.append(source_changed.event(self._on_tasks_changed))

    @property
    def hierarchy(self) -> Hierarchy:
        return self._hierarchy

    async def _on_configuration_changed(self, keys: frozenset[str]) -> None:
        logger.debug("Configuration changed (%s); refreshing tree", ", ".join(sorted(keys)))
        await self.refresh()

    async def _on_tasks_changed(self, _payload: object) -> None:
        logger.debug("Task definitions changed; refreshing tree")
        await self.refresh()

    async def _rebuild(self) -> Hierarchy:
        tasks = await self.task_source.fetch_tasks()

        separator = self.configuration.get(SEPARATOR_REGEX, DEFAULT_SEPARATOR_REGEX)
        threshold = self.configuration.get(AUTO_COLLAPSE_LIMIT, DEFAULT_AUTO_COLLAPSE_LIMIT)

        hierarchy = build_hierarchy(tasks, separator)
        apply_collapse_policy(hierarchy, int(threshold))

        self._hierarchy = hierarchy
        logger.debug("Tree rebuilt: %d tasks in %d sources", len(tasks), len(hierarchy))
        return hierarchy

    async def refresh(self) -> None:
        """Rebuild from live tasks and notify the rendering surface."""
        await self._rebuild()
        self.on_did_change_tree_data.fire(None)

    async def get_children(self, node: TreeNode | None = None) -> list[TreeNode]:
        """
        Children of `node` for the rendering surface.

        - None       -> rebuild, then the top-level source folders
        - FolderNode -> its entries, folders first, then by label
        - TaskNode   -> []

        Only the root read refetches. A folder read returns the entries of the node it
        was given; a rebuild would create new nodes and could not change that answer.
        """
        if node is None:
            hierarchy = await self._rebuild()
            return list(hierarchy.values())

        if node.kind is NodeKind.FOLDER:
            return sorted(node.entries, key=_child_sort_key)

        return []

    def get_tree_item(self, node: TreeNode) -> TreeItem:
        return to_tree_item(node)

    def find_folder(self, path: str) -> FolderNode | None:
        """Look up a folder in the committed hierarchy by 'source' or 'source/folder'."""
        source, _, folder = path.partition("/")
        container = self._hierarchy.get(source)
        if container is None or not folder:
            return container
        return container.find_folder(folder)

    async def trigger_task(self, task: Task) -> None:
        logger.info("Triggering task %s", task.key)
        await self.task_sink.execute_task(task)

    def dispose(self) -> None:
        for sub in self._subscriptions:
            sub.dispose()
        self._subscriptions.clear()
        self.on_did_change_tree_data.dispose()
