# src/task_trigger/tasks/task_provider.py

from __future__ import annotations

"""
Task sources.

- TasksFileProvider: tasks declared in a JSON tasks file (VS Code tasks.json shape)
- MakefileTaskProvider: one task per explicit Makefile target
- CompositeTaskSource: merges several providers into one task list

Providers read their files on every fetch; there is no cache to invalidate.
"""

import asyncio
import json
import logging
import re
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from ..core.events import Disposable, EventEmitter
from ..errors import TaskFetchError
from .task_models import Task

logger = logging.getLogger(__name__)

MAKE_TARGET_REGEX = re.compile(r"^([A-Za-z0-9_][^\s:=#%]*(?:\s+[^\s:=#%]+)*)\s*:(?!=)")


# tasks.json is JSONC: comments and trailing commas are allowed outside strings.
_JSON_STRING = r'"(?:\\.|[^"\\\n])*"'
_JSONC_COMMENT = re.compile(rf"({_JSON_STRING})|//[^\n]*|/\*.*?\*/", re.DOTALL)
_JSONC_TRAILING_COMMA = re.compile(rf"({_JSON_STRING})|,(?=\s*[}}\]])")


def _keep_string(match: re.Match[str]) -> str:
    return match.group(1) or ""


def strip_jsonc(text: str) -> str:
    """Turn JSON-with-comments into plain JSON; string contents are left alone."""
    text = _JSONC_COMMENT.sub(_keep_string, text)
    return _JSONC_TRAILING_COMMA.sub(_keep_string, text)


def _str_or_none(value: Any) -> str | None:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


class TasksFileProvider:
    """
    Reads tasks from a JSON file:

        {"version": "2.0.0",
         "tasks": [{"label": "Build: Debug", "command": "make", "args": ["debug"],
                    "detail": "debug build", "options": {"cwd": "src"}}]}

    Entries without a label are skipped. `source` may be set per entry; otherwise the
    provider's source name is used.
    """

    def __init__(self, path: Path, *, source: str = "Workspace") -> None:
        self.path = Path(path)
        self.source = source
        self.on_did_change: EventEmitter[Path] = EventEmitter("tasks_file.changed")

    def watched_paths(self) -> list[Path]:
        return [self.path]

    def notify_changed(self, path: Path) -> None:
        self.on_did_change.fire(path)

    async def fetch_tasks(self) -> list[Task]:
        return await asyncio.to_thread(self._read_tasks)

    def _read_tasks(self) -> list[Task]:
        if not self.path.exists():
            logger.debug("Tasks file %s does not exist", self.path)
            return []

        try:
            raw = self.path.read_text("utf-8")
        except OSError as e:
            raise TaskFetchError(f"Cannot read tasks file {self.path}: {e}") from e

        try:
            data = json.loads(strip_jsonc(raw))
        except json.JSONDecodeError as e:
            raise TaskFetchError(f"Malformed tasks file {self.path}: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("tasks", []), list):
            raise TaskFetchError(f"Malformed tasks file {self.path}: expected an object with a 'tasks' list")

        base_dir = self.path.parent.parent if self.path.parent.name == ".vscode" else self.path.parent

        out: list[Task] = []
        for entry in data.get("tasks", []):
            task = self._task_from_entry(entry, base_dir)
            if task is not None:
                out.append(task)
        logger.debug("Loaded %d tasks from %s", len(out), self.path)
        return out

    def _task_from_entry(self, entry: Any, base_dir: Path) -> Task | None:
        if not isinstance(entry, dict):
            return None
        label = entry.get("label") or entry.get("taskName")
        if not isinstance(label, str) or label == "":
            logger.debug("Skipping tasks file entry without a label: %r", entry)
            return None

        args = entry.get("args") or []
        if not isinstance(args, list):
            args = [args]

        options = entry.get("options") if isinstance(entry.get("options"), dict) else {}
        cwd_raw = _str_or_none(options.get("cwd"))
        cwd = (base_dir / cwd_raw) if cwd_raw else base_dir

        return Task(
            name=label,
            source=_str_or_none(entry.get("source")) or self.source,
            detail=_str_or_none(entry.get("detail")),
            command=_str_or_none(entry.get("command")),
            args=tuple(str(a) for a in args),
            cwd=cwd,
            definition=dict(entry),
        )


def parse_make_targets(lines: Iterable[str]) -> list[str]:
    """Explicit targets in file order, without duplicates, special (.X) or pattern (%) rules."""
    targets: list[str] = []
    seen: set[str] = set()
    for line in lines:
        if not line or line[0] in " \t#":
            continue
        m = MAKE_TARGET_REGEX.match(line)
        if not m:
            continue
        for target in m.group(1).split():
            if target.startswith(".") or "%" in target or "$" in target or target in seen:
                continue
            seen.add(target)
            targets.append(target)
    return targets


class MakefileTaskProvider:
    def __init__(self, path: Path, *, source: str = "make") -> None:
        self.path = Path(path)
        self.source = source
        self.on_did_change: EventEmitter[Path] = EventEmitter("makefile.changed")

    def watched_paths(self) -> list[Path]:
        return [self.path]

    def notify_changed(self, path: Path) -> None:
        self.on_did_change.fire(path)

    async def fetch_tasks(self) -> list[Task]:
        return await asyncio.to_thread(self._read_tasks)

    def _read_tasks(self) -> list[Task]:
        if not self.path.exists():
            return []
        try:
            lines = self.path.read_text("utf-8").splitlines()
        except OSError as e:
            raise TaskFetchError(f"Cannot read Makefile {self.path}: {e}") from e

        return [
            Task(
                name=target,
                source=self.source,
                detail=None,
                command="make",
                args=("-f", self.path.name, target),
                cwd=self.path.parent,
                definition={"type": "make", "target": target},
            )
            for target in parse_make_targets(lines)
        ]


class CompositeTaskSource:
    """Concatenates provider results in provider order. Any provider failure fails the fetch."""

    def __init__(self, providers: Sequence[Any]) -> None:
        self.providers = list(providers)
        self.on_did_change: EventEmitter[Path] = EventEmitter("tasks.changed")
        self._subscriptions: list[Disposable] = []
        for provider in self.providers:
            emitter = getattr(provider, "on_did_change", None)
            if isinstance(emitter, EventEmitter):
                self._subscriptions.append(emitter.event(self.on_did_change.fire))

    def watched_paths(self) -> list[Path]:
        paths: list[Path] = []
        for provider in self.providers:
            paths.extend(getattr(provider, "watched_paths", list)())
        return paths

    def notify_changed(self, path: Path) -> None:
        for provider in self.providers:
            if path in getattr(provider, "watched_paths", list)():
                provider.notify_changed(path)

    async def fetch_tasks(self) -> list[Task]:
        results = await asyncio.gather(*(p.fetch_tasks() for p in self.providers))
        out: list[Task] = []
        for tasks in results:
            out.extend(tasks)
        return out

    def dispose(self) -> None:
        for sub in self._subscriptions:
            sub.dispose()
        self._subscriptions.clear()
