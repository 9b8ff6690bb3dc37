# src/task_trigger/config.py

"""Settings loaded from environment variables (+ optional .env).

Two layers:
- Settings: process-level options (paths, logging, watcher interval). Read once at startup.
- Configuration: the live tree options (separator pattern, auto-collapse limit).
  Read fresh on every `get`, so each tree rebuild sees current values.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import dotenv_values, load_dotenv

from .core.events import EventEmitter

logger = logging.getLogger(__name__)

ENV_PREFIX = "TASKTRIGGER"
CONFIG_SECTION = "tasktrigger"

SEPARATOR_REGEX = "separatorRegex"
AUTO_COLLAPSE_LIMIT = "autoCollapseLimit"

# A bare "*" does not compile as a regular expression; the default separator is a literal asterisk.
DEFAULT_SEPARATOR_REGEX = r"\*"
DEFAULT_AUTO_COLLAPSE_LIMIT = 5

TREE_DEFAULTS: dict[str, Any] = {
    SEPARATOR_REGEX: DEFAULT_SEPARATOR_REGEX,
    AUTO_COLLAPSE_LIMIT: DEFAULT_AUTO_COLLAPSE_LIMIT,
}


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def env_name_for(key: str) -> str:
    """'autoCollapseLimit' -> 'TASKTRIGGER_AUTO_COLLAPSE_LIMIT'."""
    snake = re.sub(r"(?<!^)(?=[A-Z])", "_", key).upper()
    return _k(snake)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float | None) -> float | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _coerce_like(default: Any, raw: Any) -> Any:
    """Convert a raw (string) config value to the type of its default."""
    if raw is None:
        return default
    if isinstance(default, bool):
        return str(raw).strip().lower() in {"1", "true", "yes", "y", "on"}
    if isinstance(default, int):
        try:
            return int(str(raw).strip())
        except ValueError:
            logger.warning("Config value %r is not an integer; using default %s", raw, default)
            return default
    return raw


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Connector flags ----
    console_enabled: bool

    # ---- Workspace ----
    workspace_dir: Path
    tasks_file: Path
    makefile: Path
    env_file: Path

    # ---- Local data paths (ignored by git) ----
    data_dir: Path

    # ---- Tuning ----
    watch_interval_seconds: float
    task_timeout_seconds: float | None

    @staticmethod
    def from_env() -> "Settings":
        env_file = _env_path(_k("ENV_FILE"), Path(".env"))
        load_dotenv(env_file, override=False)

        app_name = _env(_k("APP_NAME"), "task-trigger")
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        workspace_dir = _env_path(_k("WORKSPACE_DIR"), Path("."))
        tasks_file = _env_path(_k("TASKS_FILE"), workspace_dir / ".vscode" / "tasks.json")
        makefile = _env_path(_k("MAKEFILE"), workspace_dir / "Makefile")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/task-trigger"))

        watch_interval_seconds = _env_float(_k("WATCH_INTERVAL_SECONDS"), 2.0) or 2.0
        task_timeout_seconds = _env_float(_k("TASK_TIMEOUT_SECONDS"), None)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            workspace_dir=workspace_dir,
            tasks_file=tasks_file,
            makefile=makefile,
            env_file=env_file,
            data_dir=data_dir,
            watch_interval_seconds=watch_interval_seconds,
            task_timeout_seconds=task_timeout_seconds,
        )


def get_settings() -> Settings:
    return Settings.from_env()


class Configuration:
    """
    Live, read-only view of the `tasktrigger` options.

    Lookup order for a key:
    1) in-process overrides set with update()
    2) the .env file (re-read on every call)
    3) process environment
    4) the caller's default (or TREE_DEFAULTS)

    on_did_change fires with the set of changed keys after update() or after a
    reload() that observed different effective values.
    """

    def __init__(self, *, env_file: Path | None = None, section: str = CONFIG_SECTION) -> None:
        self.section = section
        self.env_file = env_file
        self.on_did_change: EventEmitter[frozenset[str]] = EventEmitter(f"{section}.config")
        self._overrides: dict[str, Any] = {}
        self._last_snapshot = self.snapshot()

    def _file_values(self) -> dict[str, str | None]:
        if self.env_file is None or not self.env_file.is_file():
            return {}
        return dotenv_values(self.env_file)

    def _raw(self, key: str, file_values: dict[str, str | None]) -> Any:
        if key in self._overrides:
            return self._overrides[key]
        name = env_name_for(key)
        if file_values.get(name) is not None:
            return file_values[name]
        return os.getenv(name)

    def get(self, key: str, default: Any = None) -> Any:
        if default is None:
            default = TREE_DEFAULTS.get(key)
        raw = self._raw(key, self._file_values())
        return _coerce_like(default, raw)

    def snapshot(self) -> dict[str, Any]:
        file_values = self._file_values()
        return {key: _coerce_like(default, self._raw(key, file_values)) for key, default in TREE_DEFAULTS.items()}

    def update(self, key: str, value: Any) -> None:
        """Set an in-process override (None removes it) and notify subscribers."""
        if value is None:
            self._overrides.pop(key, None)
        else:
            self._overrides[key] = value
        logger.info("Configuration %s.%s updated to %r", self.section, key, value)
        self._last_snapshot = self.snapshot()
        self.on_did_change.fire(frozenset({key}))

    def reload(self) -> frozenset[str]:
        """Compare current values with the last seen ones; fire on_did_change if any differ."""
        current = self.snapshot()
        changed = frozenset(k for k, v in current.items() if self._last_snapshot.get(k) != v)
        self._last_snapshot = current
        if changed:
            logger.info("Configuration changed: %s", ", ".join(sorted(changed)))
            self.on_did_change.fire(changed)
        return changed
