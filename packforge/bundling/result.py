# packforge/bundling/result.py
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from packforge.core.errors import BundleWarning
from packforge.modifiers.base import Modifier
from packforge.packs.types import PackIdentifier, ResourcePath
from packforge.versioning import Version

__all__ = ["BundleResult"]



@dataclass(frozen=True, slots=True, kw_only=True)
class BundleResult:
    """
    Output of one bundle() call.

    mergedAssets is everything the artifact writer serializes; modifiers
    exposes each active modifier instance (and its accumulated state) by ID.
    """
    rootIdentifier: PackIdentifier
    rootVersion: Version
    targetVersion: Version
    description: str = ""
    buildOrder: tuple[PackIdentifier, ...] = ()
    modifiers: Mapping[str, Modifier] = field(default_factory=dict)
    mergedAssets: Mapping[ResourcePath, bytes] = field(default_factory=dict)
    icon: bytes | None = None
    warnings: tuple[BundleWarning, ...] = ()

    def __post_init__(self) -> None:
        for name in ("modifiers", "mergedAssets"):
            value = getattr(self, name)
            if not isinstance(value, MappingProxyType):
                object.__setattr__(self, name, MappingProxyType(dict(value)))
        object.__setattr__(self, "buildOrder", tuple(self.buildOrder))
        object.__setattr__(self, "warnings", tuple(self.warnings))

    def __str__(self) -> str:
        return f"{self.rootIdentifier}@{self.rootVersion} for {self.targetVersion}"
