# packforge/core/jsonutils.py
from __future__ import annotations

import base64
import json
from collections.abc import Mapping, Iterable
from dataclasses import is_dataclass, asdict
from enum import Enum
from pathlib import Path
from typing import Any

__all__ = ["safeJsonDumps", "canonicalJsonBytes", "tryJSONify"]



# ------------------------------------------------
#                JSON serialization
# ------------------------------------------------

def safeJsonDumps(obj: object) -> str:
    """
    Serializes an object to a compact JSON string.
    Uses deterministic separators (",", ":") and disallows NaN/infinity.
    If direct JSON encoding fails, falls back to tryJSONify (circular/depth-safe) and retries.
    """
    try:
        return json.dumps(obj, ensure_ascii=False, allow_nan=False, separators=(",", ":"))
    except Exception:
        safePayload = tryJSONify(obj, _maxDepth=None)
        return json.dumps(safePayload, ensure_ascii=False, allow_nan=False, separators=(",", ":"))



def canonicalJsonBytes(obj: object) -> bytes:
    """
    Encodes generated pack files (font providers, item models, pack.mcmeta).

    Keys are sorted and indentation is fixed so the same input always yields
    the same bytes. Non-ASCII characters are escaped, which keeps private-use
    glyph characters readable in diffs.
    """
    text = json.dumps(obj, ensure_ascii=True, allow_nan=False, sort_keys=True, indent=2)
    return (text + "\n").encode("utf-8")



# ------------------------------------------------
#              Generic JSON safety
# ------------------------------------------------

def tryJSONify(obj: Any, *, _seen: set[int] | None = None, _depth: int = 0, _maxDepth: int | None = 10) -> Any:
    """
    Attempts to make any object JSON-serializable.

    Rules:
      • Basic scalars (None, bool, int, float, str) are preserved.
      • bytes/bytearray/memoryview → base64 {"__b64__":"..."}.
      • Path → string path.
      • Enum → its value.
      • Dataclass → dict.
      • sets/tuples/iterables → list.
      • Mappings → dict with str keys.
      • fallback → str(obj)

    Recursion guards:
      • _seen prevents cycles.
      • _maxDepth stops deep recursion; when explicitly set to None, recursion guard is turned off.
    """
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj

    if isinstance(obj, (bytes, bytearray, memoryview)):
        return {"__b64__": base64.b64encode(bytes(obj)).decode("ascii")}

    if isinstance(obj, Path):
        return str(obj)

    if _seen is None:
        _seen = set()

    oid = id(obj)
    if oid in _seen:
        return f"<circular_ref {type(obj).__name__}>"
    if isinstance(_maxDepth, int) and _depth > _maxDepth:
        return f"<max_depth_exceeded {type(obj).__name__}>"

    # Ids of the containers on the current branch
    _seen.add(oid)
    try:
        return _jsonifyContainer(obj, _seen, _depth, _maxDepth)
    finally:
        _seen.discard(oid)



def _jsonifyContainer(obj: Any, _seen: set[int], _depth: int, _maxDepth: int | None) -> Any:
    if isinstance(obj, Enum):
        return tryJSONify(obj.value, _seen=_seen, _depth=_depth + 1, _maxDepth=_maxDepth)

    if is_dataclass(obj) and not isinstance(obj, type):
        return tryJSONify(asdict(obj), _seen=_seen, _depth=_depth + 1, _maxDepth=_maxDepth)

    if isinstance(obj, (set, frozenset, tuple)):
        return [tryJSONify(value, _seen=_seen, _depth=_depth + 1, _maxDepth=_maxDepth) for value in obj]

    if isinstance(obj, Mapping):
        return {
            str(key): tryJSONify(value, _seen=_seen, _depth=_depth + 1, _maxDepth=_maxDepth) for key, value in obj.items()
        }

    if isinstance(obj, Iterable):
        return [tryJSONify(value, _seen=_seen, _depth=_depth + 1, _maxDepth=_maxDepth) for value in obj]

    return str(obj)
