# src/task_trigger/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any, cast

from ..config import TREE_DEFAULTS
from ..core.state import AppState
from ..errors import TaskTriggerError
from ..tree.nodes import TRIGGER_TASK_COMMAND, TaskNode
from .render import iter_task_paths, render_tree

CommandEmitter = Callable[[str], None]
CommandResult = str | Awaitable[str]
CommandHandler2 = Callable[[AppState, list[str]], CommandResult]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], CommandResult]
CommandHandler = CommandHandler2 | CommandHandler3
HostCommand = Callable[..., Any]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """
    Two kinds of commands:
    - slash commands typed in the console (/help, /run, ...)
    - host command ids attached to tree items (tasktrigger.triggerTask)
    """

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        self._host_commands: dict[str, HostCommand] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def register_host_command(self, command_id: str, fn: HostCommand) -> None:
        self._host_commands[command_id] = fn

    async def execute_command(self, command_id: str, *args: Any) -> Any:
        fn = self._host_commands.get(command_id)
        if fn is None:
            raise KeyError(f"Unknown command: {command_id}")
        result = fn(*args)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            result = cast(CommandHandler3, handler)(state, args, emit)
        else:
            result = cast(CommandHandler2, handler)(state, args)

        if inspect.isawaitable(result):
            result = await result
        return result

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - Quit.")
        return "\n".join(lines)


registry = CommandRegistry()


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_tree(state: AppState, args: list[str]) -> str:
    text, leaves = await render_tree(state.tree_model, state.toggled_folders)
    state.visible_tasks = leaves
    return text


def resolve_task(state: AppState, ref: str) -> TaskNode | None:
    """Find a task by its number in the last rendered tree, its tree path, or '<source>/<name>'."""
    if ref.isdigit():
        idx = int(ref) - 1
        if 0 <= idx < len(state.visible_tasks):
            return state.visible_tasks[idx][1]
        return None

    for path, node in iter_task_paths(state.tree_model):
        if path == ref or node.task.key == ref:
            return node
    return None


async def cmd_run(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /run 3                     -> run task #3 of the last rendered tree
    /run Workspace/Build/Debug -> run by tree path
    """
    if not args:
        return "Usage: /run <number|path>"

    ref = " ".join(args)
    node = resolve_task(state, ref)
    if node is None:
        return f"No task matches {ref!r}. Use /tree to list tasks."

    item = state.tree_model.get_tree_item(node)
    if item.command is None:
        return f"{node.label} cannot be run."

    if emit:
        emit(f"Running {node.task.key}...")

    try:
        await registry.execute_command(item.command.command, *item.command.arguments)
    except TaskTriggerError as e:
        return f"Failed: {e}"
    return f"Task {node.task.key} finished."


async def cmd_toggle(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /toggle <source>[/<folder>]"

    path = " ".join(args)
    if state.tree_model.find_folder(path) is None:
        return f"No folder {path!r}."

    if path in state.toggled_folders:
        state.toggled_folders.discard(path)
    else:
        state.toggled_folders.add(path)
    return await cmd_tree(state, [])


async def cmd_refresh(state: AppState, args: list[str]) -> str:
    await state.tree_model.refresh()
    return "Tree refreshed."


def cmd_config(state: AppState, args: list[str]) -> str:
    """
    /config                      -> show tree options
    /config autoCollapseLimit 3  -> override an option for this session
    /config separatorRegex       -> drop the override
    """
    cfg = state.configuration
    if not args:
        lines = [f"Configuration ({cfg.section}):"]
        for key in TREE_DEFAULTS:
            lines.append(f"  {key} = {cfg.get(key)!r}")
        return "\n".join(lines)

    key = args[0]
    if key not in TREE_DEFAULTS:
        return f"Unknown option {key!r}. Known: {', '.join(TREE_DEFAULTS)}."

    value = " ".join(args[1:]) if len(args) > 1 else None
    cfg.update(key, value)
    if value is None:
        return f"{key} reset to {cfg.get(key)!r}."
    return f"{key} set to {value!r}."


def cmd_status(state: AppState, args: list[str]) -> str:
    hierarchy = state.tree_model.hierarchy
    total = sum(sum(1 for _ in folder.iter_tasks()) for folder in hierarchy.values())
    return (
        "Status:\n"
        f"  Sources: {', '.join(hierarchy) or '-'}\n"
        f"  Tasks: {total}\n"
        f"  Tasks file: {getattr(state.settings, 'tasks_file', '-')}"
    )


def register_host_commands(state: AppState) -> None:
    registry.register_host_command(TRIGGER_TASK_COMMAND, state.tree_model.trigger_task)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("tree", cmd_tree, help_text="Show the task tree.", aliases=["ls"])
registry.register("run", cmd_run, help_text="Run a task: /run <number|path>.")
registry.register("toggle", cmd_toggle, help_text="Expand/collapse a folder: /toggle <source>[/<folder>].")
registry.register("refresh", cmd_refresh, help_text="Re-read tasks and rebuild the tree.")
registry.register("config", cmd_config, help_text="Show or override options: /config [key [value]].")
registry.register("status", cmd_status, help_text="Show sources and task counts.")
