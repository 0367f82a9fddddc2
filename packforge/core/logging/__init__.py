# packforge/core/logging/__init__.py
from __future__ import annotations

from .context import getLogContext, logContext
from .setup import configureLogging
from .util import getModifierLogger

__all__ = [
    "configureLogging",
    "getModifierLogger",
    "getLogContext",
    "logContext",
]
