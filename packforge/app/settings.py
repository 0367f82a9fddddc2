# packforge/app/settings.py
from __future__ import annotations
import copy, json5, os
from pathlib import Path
from typing import Any, cast
from functools import lru_cache

from packforge.core.dictpath import getByPath

import logging
logger = logging.getLogger(__name__)

__all__ = [
    "SETTINGS_ENV_VAR", "SETTINGS", "loadUserSettings", "loadSettings",
    "reloadSettings", "deepMerge", "settings", "settingsBool", "settingsInt",
]


SETTINGS_ENV_VAR = "PACKFORGE_SETTINGS"
SETTINGS: dict[str, Any] = {
    "__source": "PACKFORGE_DEFAULTS",
    "logging": {"level": "INFO", "file": None, "json": False},
    "tasks": {"maxWorkers": 4},
    # Repository tokens ("file:/path"), addressable as "#0", "#1", ... in that order
    "repositories": [],
    "artifact": {"compressionLevel": 6},
    "glyphs": {"font": "minecraft:font/default.json", "firstCodepoint": 0xE000, "height": 8, "ascent": 7},
    "models": {"firstCustomModelData": 1},
}



def loadUserSettings(path: str | Path | None = None) -> dict[str, Any]:
    """
    Reads the json5 user settings file from `path`, or from the file named by
    the PACKFORGE_SETTINGS environment variable. Missing files yield {}.
    """
    if path is None:
        envPath = os.environ.get(SETTINGS_ENV_VAR)
        if not envPath:
            return {}
        path = envPath

    filePath = Path(path).expanduser()
    if not filePath.exists():
        logger.debug("Settings file '%s' does not exist, using defaults", filePath)
        return {}

    try:
        data = json5.loads(filePath.read_text(encoding="utf-8"))
    except Exception as err:
        logger.error("Failed to parse '%s': %s", filePath, err)
        return {}

    if not isinstance(data, dict):
        logger.error("Settings file '%s' must contain an object, got %s", filePath, type(data).__name__)
        return {}
    return data



@lru_cache(maxsize=1)
def loadSettings() -> dict[str, Any]:
    return cast(dict[str, Any], deepMerge(copy.deepcopy(SETTINGS), loadUserSettings()))



def reloadSettings() -> dict[str, Any]:
    """Drops the cached settings, e.g. after PACKFORGE_SETTINGS changed."""
    loadSettings.cache_clear()
    return loadSettings()



def deepMerge(first: Any, second: Any) -> Any:
    """
    Returns a new value where keys from `second` override/extend `first`.
    Only merges recursively when BOTH sides are JSON objects (dicts).
    For all other JSON types (lists, strings, numbers, booleans, null),
    the right-hand value `second` replaces `first`.
    """
    if isinstance(first, dict) and isinstance(second, dict):
        out: dict[str, Any] = {}
        for key, value in first.items():
            out[key] = value
        for key, value in second.items():
            if key in out:
                out[key] = deepMerge(out[key], value)
            else:
                out[key] = value
        return out

    return second

# ---------- Ergonomic accessors over merged settings ----------

def settings(path: str, default: Any = None) -> Any:
    """Returns value at `path` from merged settings, or `default` if missing."""
    val = getByPath(loadSettings(), path)
    return default if val is None else val



def settingsBool(path: str, default: bool = False) -> bool:
    """Returns bool value at `path` or `default` if missing."""
    val = getByPath(loadSettings(), path)
    if isinstance(val, bool):
        return val
    if val is None:
        return default
    return bool(val)



def settingsInt(path: str, default: int = 0) -> int:
    """Returns int value at `path`, or `default` if missing or not a number."""
    val = getByPath(loadSettings(), path)
    if isinstance(val, bool) or val is None:
        return default
    try:
        return int(val)
    except (TypeError, ValueError):
        logger.warning("Setting '%s' is not an integer (%r), using %d", path, val, default)
        return default
