# src/task_trigger/tasks/watcher.py

from __future__ import annotations

"""
Change watcher.

A small polling loop that:
- re-reads the configuration and lets it fire on_did_change when values differ,
- compares (mtime_ns, size) signatures of the watched task files and tells the
  task source which files changed.

Both events end up in TaskTreeModel.refresh() through subscriptions.
To stop the watcher, cancel the coroutine/task.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Protocol

from ..config import Configuration

logger = logging.getLogger(__name__)

FileSignature = tuple[int, int] | None


class WatchedSource(Protocol):
    def watched_paths(self) -> list[Path]: ...
    def notify_changed(self, path: Path) -> None: ...


def file_signature(path: Path) -> FileSignature:
    try:
        st = path.stat()
    except OSError:
        return None
    return (st.st_mtime_ns, st.st_size)


def build_watch_signature(paths: list[Path]) -> dict[Path, FileSignature]:
    return {p: file_signature(p) for p in paths}


def changed_paths(old: dict[Path, FileSignature], new: dict[Path, FileSignature]) -> list[Path]:
    return [p for p, sig in new.items() if old.get(p) != sig]


def poll_once(
    configuration: Configuration,
    task_source: Any,
    signatures: dict[Path, FileSignature],
) -> dict[Path, FileSignature]:
    """One watcher step. Returns the new file signatures."""
    try:
        configuration.reload()
    except Exception:
        logger.exception("configuration reload failed")

    paths = task_source.watched_paths() if hasattr(task_source, "watched_paths") else []
    current = build_watch_signature(paths)
    for path in changed_paths(signatures, current):
        logger.info("Task definitions changed: %s", path)
        try:
            task_source.notify_changed(path)
        except Exception:
            logger.exception("notify_changed failed path=%s", path)
    return current


async def run_change_watcher(
    configuration: Configuration,
    task_source: WatchedSource | Any,
    *,
    interval_seconds: float = 2.0,
) -> None:
    sleep_s = max(0.01, float(interval_seconds))

    paths = task_source.watched_paths() if hasattr(task_source, "watched_paths") else []
    signatures = build_watch_signature(paths)
    logger.debug("Watching %d task files every %.2fs", len(signatures), sleep_s)

    while True:
        await asyncio.sleep(sleep_s)
        signatures = poll_once(configuration, task_source, signatures)
