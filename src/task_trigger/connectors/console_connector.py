# src/task_trigger/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..cli.commands import cmd_tree
from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..errors import TaskTriggerError

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


async def _read_line(prompt: str) -> str:
    return await asyncio.to_thread(input, prompt)


async def run_console_loop(state: AppState) -> None:
    """
    Interactive console view of the task tree.

    Re-renders whenever the tree model reports a change (config edit, tasks file edit,
    /refresh). Commands are dispatched through the shared registry.
    """
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Use /help for commands, /run <number> to trigger a task, /exit to quit.\n")

    async def _on_tree_changed(_node) -> None:
        try:
            text = await cmd_tree(state, [])
        except TaskTriggerError as e:
            _print_ts(f"[TREE] {e}")
            return
        _print_ts(f"[TREE] updated\n{text}")

    subscription = state.tree_model.on_did_change_tree_data.event(_on_tree_changed)

    def emit(text: str) -> None:
        _print_ts(text)

    try:
        try:
            print(await cmd_tree(state, []))
        except TaskTriggerError as e:
            _print_ts(f"[TREE] {e}")

        while True:
            try:
                user_input = (await _read_line(">>> ")).strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            # A bare number is shorthand for /run <number>.
            if user_input.isdigit():
                user_input = f"/run {user_input}"

            try:
                cmd_response = await command_registry.handle(state, user_input, emit=emit)
            except TaskTriggerError as e:
                cmd_response = f"Error: {e}"
            except Exception:
                logger.exception("Command handler crashed.")
                cmd_response = "Internal error while handling a command."

            if cmd_response is None:
                cmd_response = "Not a command. Use /help to list available commands."

            _print_ts(cmd_response)
    finally:
        subscription.dispose()

    logger.info("Console connector finished.")
