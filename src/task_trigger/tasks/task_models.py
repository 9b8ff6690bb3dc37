# tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(frozen=True, slots=True)
class Task:
    """
    A named, executable unit of work contributed by a task source.

    Only name/source/detail matter to the tree; the rest is what the executor needs.
    """

    name: str
    source: str
    detail: str | None = None

    command: str | None = None
    args: tuple[str, ...] = ()
    cwd: Path | None = None

    # Raw provider entry, kept for display/debugging. Excluded from equality and hashing.
    definition: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def key(self) -> str:
        """Stable identifier used by the console: '<source>/<name>'."""
        return f"{self.source}/{self.name}"
