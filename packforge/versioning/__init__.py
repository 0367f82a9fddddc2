# packforge/versioning/__init__.py
from .version import (
    Version,
    Comparator,
    VersionMatchResult,
    parseVersion,
    parseComparator,
    compareWith,
    selectBest,
)

__all__ = [
    "Version",
    "Comparator",
    "VersionMatchResult",
    "parseVersion",
    "parseComparator",
    "compareWith",
    "selectBest",
]
