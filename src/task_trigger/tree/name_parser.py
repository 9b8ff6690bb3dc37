# src/task_trigger/tree/name_parser.py

from __future__ import annotations

import functools
import re
from typing import NamedTuple

from ..errors import SeparatorPatternError


class ParsedName(NamedTuple):
    folder: str | None
    display_name: str


@functools.lru_cache(maxsize=32)
def compile_separator(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise SeparatorPatternError(pattern, str(e)) from e


def parse_task_name(name: str, separator: str | re.Pattern[str]) -> ParsedName:
    """
    Split a raw task name into (folder, display_name) using the separator pattern.

    "Build: Debug"        -> ("Build", "Debug")
    "A: B: C"             -> ("A", "B")   only the first two segments are used
    "Solo"                -> (None, "Solo")  returned as-is, not trimmed
    """
    pattern = compile_separator(separator) if isinstance(separator, str) else separator
    parts = pattern.split(name)

    if len(parts) > 1:
        return ParsedName(folder=(parts[0] or "").strip(), display_name=(parts[1] or "").strip())

    return ParsedName(folder=None, display_name=name)
