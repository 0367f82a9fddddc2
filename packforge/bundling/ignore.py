# packforge/bundling/ignore.py
from __future__ import annotations

from enum import Enum
from typing import Iterable

from packforge.core.errors import UnknownIgnoreFeature

__all__ = ["BundleIgnore", "parseBundleIgnore", "parseBundleIgnores"]



class BundleIgnore(str, Enum):
    """
    Optional bundle features that can be switched off.

    One member per builtin modifier (value = modifier ID), plus ICON for the
    root pack icon.
    """
    GLYPHS = "glyphs"
    MODELS = "models"
    MULTISPRITES = "multisprites"
    ICON = "icon"

    def __str__(self) -> str:
        return self.value



def parseBundleIgnore(name: str) -> BundleIgnore:
    """Case-insensitive lookup by name; raises UnknownIgnoreFeature."""
    text = str(name).strip().lower()
    for feature in BundleIgnore:
        if feature.value == text:
            return feature
    raise UnknownIgnoreFeature(name, available=[feature.value for feature in BundleIgnore])



def parseBundleIgnores(names: Iterable[str | BundleIgnore]) -> frozenset[BundleIgnore]:
    return frozenset(
        name if isinstance(name, BundleIgnore) else parseBundleIgnore(name)
        for name in names
    )
