# tests/test_tree_model.py

from __future__ import annotations

import pytest

from task_trigger.errors import SeparatorPatternError, TaskExecutionError, TaskFetchError
from task_trigger.tree.model import TaskTreeModel
from task_trigger.tree.nodes import TRIGGER_TASK_COMMAND, FolderNode, NodeKind, TaskNode, TreeItemCollapsibleState

from .fakes import FakeConfiguration, FakeTaskSink, FakeTaskSource, make_task


def _record_changes(model: TaskTreeModel) -> list[object]:
    fired: list[object] = []
    model.on_did_change_tree_data.event(fired.append)
    return fired


@pytest.mark.asyncio
async def test_root_children_are_sources_in_order_and_do_not_notify(model: TaskTreeModel) -> None:
    fired = _record_changes(model)

    roots = await model.get_children()

    assert [r.label for r in roots] == ["Workspace", "make"]
    assert fired == []


@pytest.mark.asyncio
async def test_every_root_read_refetches(model: TaskTreeModel, task_source: FakeTaskSource) -> None:
    await model.get_children()
    task_source.tasks.append(make_task("Deploy", "Workspace"))

    roots = await model.get_children()

    assert task_source.fetch_count == 2
    assert "Deploy" in [n.label for n in roots[0].entries]


@pytest.mark.asyncio
async def test_folder_read_returns_given_node_without_refetch(
    model: TaskTreeModel, task_source: FakeTaskSource
) -> None:
    roots = await model.get_children()
    workspace = roots[0]
    task_source.tasks.append(make_task("Deploy", "Workspace"))

    children = await model.get_children(workspace)

    assert task_source.fetch_count == 1
    assert "Deploy" not in [n.label for n in children]
    assert [n.label for n in children] == ["Build", "Lint"]


@pytest.mark.asyncio
async def test_refresh_fires_once_with_none(model: TaskTreeModel) -> None:
    fired = _record_changes(model)

    await model.refresh()

    assert fired == [None]
    assert list(model.hierarchy) == ["Workspace", "make"]


@pytest.mark.asyncio
async def test_folder_children_folders_first_then_label() -> None:
    source = FakeTaskSource(
        [
            make_task("Zeta"),
            make_task("B: one"),
            make_task("Alpha"),
            make_task("A: two"),
        ]
    )
    model = TaskTreeModel(source, FakeTaskSink(), FakeConfiguration(separatorRegex=":"))

    (root,) = await model.get_children()
    children = await model.get_children(root)

    assert [(c.kind, c.label) for c in children] == [
        (NodeKind.FOLDER, "A"),
        (NodeKind.FOLDER, "B"),
        (NodeKind.TASK, "Alpha"),
        (NodeKind.TASK, "Zeta"),
    ]
    # Build order is untouched.
    assert [e.label for e in root.entries] == ["Zeta", "B", "Alpha", "A"]


@pytest.mark.asyncio
async def test_folder_children_ties_keep_insertion_order() -> None:
    first = make_task("Same", detail="first")
    second = make_task("Same", detail="second")
    model = TaskTreeModel(FakeTaskSource([first, second]), FakeTaskSink(), FakeConfiguration(separatorRegex=":"))

    (root,) = await model.get_children()
    children = await model.get_children(root)

    assert [c.task.detail for c in children] == ["first", "second"]


@pytest.mark.asyncio
async def test_leaf_has_no_children(model: TaskTreeModel) -> None:
    roots = await model.get_children()
    leaf = next(n for n in roots[1].entries if n.kind is NodeKind.TASK)

    assert await model.get_children(leaf) == []


@pytest.mark.asyncio
async def test_fetch_failure_keeps_previous_tree(model: TaskTreeModel, task_source: FakeTaskSource) -> None:
    await model.refresh()
    before = model.hierarchy
    fired = _record_changes(model)

    task_source.error = TaskFetchError("provider down")
    with pytest.raises(TaskFetchError):
        await model.refresh()

    assert model.hierarchy is before
    assert fired == []


@pytest.mark.asyncio
async def test_bad_separator_propagates_and_keeps_previous_tree(
    model: TaskTreeModel, configuration: FakeConfiguration
) -> None:
    await model.refresh()
    before = model.hierarchy

    configuration.values["separatorRegex"] = "("
    with pytest.raises(SeparatorPatternError):
        await model.refresh()

    assert model.hierarchy is before


@pytest.mark.asyncio
async def test_options_are_read_on_every_rebuild(model: TaskTreeModel, configuration: FakeConfiguration) -> None:
    await model.refresh()
    assert model.hierarchy["Workspace"].find_folder("Build").collapsed is False

    configuration.values["autoCollapseLimit"] = 1
    await model.refresh()

    assert model.hierarchy["Workspace"].find_folder("Build").collapsed is True
    assert configuration.reads.count("autoCollapseLimit") == 2


@pytest.mark.asyncio
async def test_configuration_change_triggers_refresh(model: TaskTreeModel, configuration: FakeConfiguration) -> None:
    fired = _record_changes(model)

    configuration.update("separatorRegex", r"\*")
    await configuration.on_did_change.drain()

    assert fired == [None]
    # With "*" as separator "Build: Debug" is no longer split.
    assert model.hierarchy["Workspace"].find_folder("Build") is None


@pytest.mark.asyncio
async def test_task_source_change_triggers_refresh(model: TaskTreeModel, task_source: FakeTaskSource) -> None:
    fired = _record_changes(model)

    task_source.on_did_change.fire(None)
    await task_source.on_did_change.drain()

    assert fired == [None]


@pytest.mark.asyncio
async def test_dispose_unsubscribes(model: TaskTreeModel, configuration: FakeConfiguration) -> None:
    model.dispose()

    assert configuration.on_did_change.listener_count == 0
    configuration.update("autoCollapseLimit", 1)
    await configuration.on_did_change.drain()
    assert model.hierarchy == {}


def test_tree_items(model: TaskTreeModel) -> None:
    task = make_task("Build: Debug", "Workspace", detail="debug build")

    leaf = TaskNode(display_name="Debug", task=task)
    item = model.get_tree_item(leaf)
    assert item.label == "Debug"
    assert item.description == "debug build"
    assert item.collapsible_state is TreeItemCollapsibleState.NONE
    assert item.command is not None
    assert item.command.command == TRIGGER_TASK_COMMAND
    assert item.command.arguments == (task,)

    folder = FolderNode(label="Build", entries=[leaf], collapsed=True)
    folder_item = model.get_tree_item(folder)
    assert folder_item.collapsible_state is TreeItemCollapsibleState.COLLAPSED
    assert folder_item.command is None


@pytest.mark.asyncio
async def test_trigger_task_delegates_to_sink(model: TaskTreeModel, task_sink: FakeTaskSink) -> None:
    task = make_task("Lint", "Workspace")

    await model.trigger_task(task)

    assert task_sink.executed == [task]


@pytest.mark.asyncio
async def test_trigger_task_failure_propagates(model: TaskTreeModel, task_sink: FakeTaskSink) -> None:
    task_sink.fail_with = "boom"

    with pytest.raises(TaskExecutionError):
        await model.trigger_task(make_task("Lint", "Workspace"))

    assert len(task_sink.executed) == 1
