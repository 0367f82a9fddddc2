# packforge/core/dictpath.py
from __future__ import annotations
from typing import Any
from collections.abc import Mapping

__all__ = ["getByPath"]



# ----------------------------------------------
#                  path parsing
# ----------------------------------------------

def _splitPath(path: str) -> list[str]:
    """
    Splits a dotted settings path where '.' separates segments and
    backslash '\\' escapes the next character.

    Examples:
      - logging.level        -> ["logging", "level"]
      - glyphs.font\\.json   -> ["glyphs", "font.json"]

    Raises ValueError for empty paths, empty segments and dangling escapes.
    """
    if not isinstance(path, str) or not path:
        raise ValueError("Path must be a non-empty string")

    parts: list[str] = []
    curr: list[str] = []
    esc = False
    for ch in path:
        if esc:
            curr.append(ch)
            esc = False
            continue
        if ch == "\\":
            esc = True
            continue
        if ch == ".":
            parts.append("".join(curr))
            curr = []
            continue
        curr.append(ch)
    if esc:
        raise ValueError("Path ends with a dangling escape (trailing backslash)")
    parts.append("".join(curr))

    if any(part == "" for part in parts):
        raise ValueError(f"Path '{path}' contains empty segment(s)")
    return parts



# ----------------------------------------------
#                   Public API
# ----------------------------------------------

def getByPath(obj: Any, path: str, default: Any | None = None) -> Any:
    """
    Returns the value at `path` from nested mappings, or `default` when the
    chain cannot be resolved. An invalid path is treated as "not found".
    """
    try:
        parts = _splitPath(path)
    except ValueError:
        return default

    current: Any = obj
    for part in parts:
        if isinstance(current, Mapping) and part in current:
            current = current[part]
            continue
        return default
    return current
