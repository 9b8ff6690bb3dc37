# src/task_trigger/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, starts the change watcher, then runs
the console view (or just the watcher when the console is disabled).
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..errors import TaskTriggerError
from ..logging_setup import setup_logging
from ..tasks.watcher import run_change_watcher

logger = logging.getLogger(__name__)


def _shutdown(state) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        state.tree_model.dispose()
    except Exception:
        logger.debug("Tree model dispose failed.", exc_info=True)

    try:
        state.task_source.dispose()
    except Exception:
        logger.debug("Task source dispose failed.", exc_info=True)


async def _wait_for_signal() -> None:
    stop_main = asyncio.Event()
    loop = asyncio.get_running_loop()

    def _handle_signal(signum: int) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        # Not available on every platform (e.g. Windows event loops).
        with contextlib.suppress(NotImplementedError, RuntimeError):
            loop.add_signal_handler(sig, _handle_signal, sig)

    await stop_main.wait()


async def _run(settings) -> None:
    state = create_initial_state(settings=settings)

    watcher = asyncio.create_task(
        run_change_watcher(
            state.configuration,
            state.task_source,
            interval_seconds=settings.watch_interval_seconds,
        )
    )

    try:
        if settings.console_enabled:
            await run_console_loop(state)
        else:
            logger.info("Console disabled. Watching task definitions only. Press Ctrl+C to stop.")
            try:
                await state.tree_model.refresh()
            except TaskTriggerError as e:
                logger.error("Initial refresh failed: %s", e)
            await _wait_for_signal()
    finally:
        watcher.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await watcher
        _shutdown(state)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    try:
        asyncio.run(_run(settings))
    except KeyboardInterrupt:
        pass
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    main()
