# packforge/app/__init__.py
from .settings import (
    loadSettings,
    reloadSettings,
    settings,
    settingsBool,
    settingsInt,
)

__all__ = [
    "loadSettings",
    "reloadSettings",
    "settings",
    "settingsBool",
    "settingsInt",
]
