# packforge/packs/filters.py
from __future__ import annotations

from dataclasses import dataclass

from packforge.versioning import (
    Comparator,
    Version,
    compareWith,
    parseComparator,
    parseVersion,
)
from .types import DEFAULT_NAMESPACE, PackIdentifier, parsePackIdentifier

__all__ = [
    "PackDependencyFilter",
    "parseDependencyFilter",
]



_ANY_VERSION = Version(0, 0, 0)



@dataclass(frozen=True, slots=True)
class PackDependencyFilter:
    """A dependency on `identifier` constrained by exactly one comparator."""
    identifier: PackIdentifier
    comparator: Comparator
    version: Version

    def matches(self, version: Version) -> bool:
        return compareWith(version, self.comparator, self.version)

    def accepts(self, identifier: PackIdentifier, version: Version) -> bool:
        return identifier == self.identifier and self.matches(version)

    def __str__(self) -> str:
        if self.comparator is Comparator.EQ:
            return f"{self.identifier} {self.version}"
        return f"{self.identifier} {self.comparator.value}{self.version}"



def parseDependencyFilter(raw: str, *, defaultNamespace: str = DEFAULT_NAMESPACE) -> PackDependencyFilter:
    """
    Parse a dependency filter.

    Grammar:
        <identifier>                       -> >= 0.0.0 (any release)
        <identifier> <comparator><version> -> comparator in >=, >, <=, <
        <identifier> <comparator> <version>
        <identifier> <version>             -> equality (no explicit "=" token)

    Examples:
        "sample/glyphs >=1.2.0"
        "core < 2"
        "sample/models 1.0.0"
    """
    if not isinstance(raw, str):
        raise TypeError(f"Dependency filter must be a string, got {type(raw).__name__}")
    text = raw.strip()
    if not text:
        raise ValueError("Dependency filter cannot be empty")

    parts = text.split(None, 1)
    identifier = parsePackIdentifier(parts[0], defaultNamespace=defaultNamespace)
    constraint = parts[1].strip() if len(parts) > 1 else ""

    if not constraint:
        return PackDependencyFilter(identifier, Comparator.GE, _ANY_VERSION)

    comparator, versionPart = parseComparator(constraint)
    if not versionPart:
        raise ValueError(f"Missing version after {comparator} in dependency filter {raw!r}")
    if len(versionPart.split()) > 1:
        raise ValueError(f"Dependency filter {raw!r} has more than one constraint")

    return PackDependencyFilter(
        identifier=identifier,
        comparator=comparator if comparator is not None else Comparator.EQ,
        version=parseVersion(versionPart),
    )
