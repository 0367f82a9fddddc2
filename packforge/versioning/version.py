# packforge/versioning/version.py
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from typing import Generic, Iterable, TypeVar

__all__ = [
    "Version",
    "Comparator",
    "VersionMatchResult",
    "parseVersion",
    "parseComparator",
    "compareWith",
    "selectBest",
]



SEMVER_PATTERN_RE = re.compile(
    r"^v?(?P<major>0|[1-9]\d*)"
    r"\.(?P<minor>0|[1-9]\d*)"
    r"\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<prerelease>(?:0|[1-9]\d*|[0-9A-Za-z-]*[A-Za-z-][0-9A-Za-z-]*)"
    r"(?:\.(?:0|[1-9]\d*|[0-9A-Za-z-]*[A-Za-z-][0-9A-Za-z-]*))*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)



T = TypeVar("T")


@total_ordering
@dataclass(frozen=True)
class Version:
    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()
    build: tuple[str, ...] = ()

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        prerelease = f"-{'.'.join(self.prerelease)}" if self.prerelease else ""
        build = f"+{'.'.join(self.build)}" if self.build else ""
        return f"{base}{prerelease}{build}"

    def __repr__(self) -> str:
        return f"Version({str(self)!r})"

    def _prereleaseCmpKey(self) -> tuple:
        # Numeric identifiers have lower precedence than non-numeric.
        # Numeric is encoded as (0, int), non-numeric as (1, str).
        parts: list[tuple[int, int | str]] = []
        for ident in self.prerelease:
            if ident.isdigit():
                parts.append((0, int(ident)))
            else:
                parts.append((1, ident))
        return tuple(parts)

    def _cmpKey(self) -> tuple:
        # Build is ignored for ordering
        # No prerelease version is preferred over any prerelease version
        releaseFlag = 1 if not self.prerelease else 0
        return (
            self.major,
            self.minor,
            self.patch,
            releaseFlag,
            self._prereleaseCmpKey()
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return (
            self.major == other.major
            and self.minor == other.minor
            and self.patch == other.patch
            and self.prerelease == other.prerelease
        )

    def __hash__(self) -> int:
        return hash((self.major, self.minor, self.patch, self.prerelease))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._cmpKey() < other._cmpKey()



def parseVersion(raw: str | Version) -> Version:
    """
    Parse a version string into Version.

    Accepted forms (examples):
        "1"             -> 1.0.0
        "1.19"          -> 1.19.0
        "1.19.3"        -> 1.19.3
        "1.2.3-alpha.1"
        "1.2.3+build.1"
        "v1.2.3"

    Rejected:
        ".1", "1.", "1..3", "1.2.3.4", "01.2.3" (leading zeroes), etc.

    Version instances are returned unchanged so callers can pass either form.
    """
    if isinstance(raw, Version):
        return raw

    if raw is None:
        raise ValueError("Version string cannot be None")

    if not isinstance(raw, str):
        raise TypeError(f"Version string must be a string type, got {type(raw).__name__}")

    raw = raw.strip()
    if not raw:
        raise ValueError("Version string cannot be empty or whitespace only")

    # Accept a single 'v' and remove it (v1.2.3 -> 1.2.3)
    if raw.startswith("v") and len(raw) > 1 and "0" <= raw[1] <= "9":
        raw = raw[1:]

    # Split into core (numeric) and suffix (-prerelease +build)
    sepIndex = len(raw)
    for ch in ("-", "+"):
        idx = raw.find(ch)
        if idx != -1 and idx < sepIndex:
            sepIndex = idx

    core = raw[:sepIndex]
    suffix = raw[sepIndex:]

    coreParts = core.split(".")
    if not 1 <= len(coreParts) <= 3:
        raise ValueError(f"Invalid version core {core!r} in {raw!r}")

    # Reject empty components: ".1", "1.", "1..3"
    if any(part == "" for part in coreParts):
        raise ValueError(f"Empty numeric component in version {raw!r}")

    numericParts: list[int] = []
    for part in coreParts:
        if not re.fullmatch(r"0|[1-9]\d*", part):
            raise ValueError(f"Invalid numeric component {part!r} in version {raw!r}")
        numericParts.append(int(part))

    while len(numericParts) < 3:
        numericParts.append(0)

    major, minor, patch = numericParts

    normalized = f"{major}.{minor}.{patch}{suffix}"

    mtch = SEMVER_PATTERN_RE.match(normalized)
    if not mtch:
        raise ValueError(f"Invalid version {raw!r} (normalized {normalized!r})")

    prereleaseGroup = mtch.group("prerelease")
    buildGroup = mtch.group("build")

    prerelease: tuple[str, ...] = ()
    build: tuple[str, ...] = ()
    if prereleaseGroup is not None:
        prerelease = tuple(prereleaseGroup.split("."))
    if buildGroup is not None:
        build = tuple(buildGroup.split("."))

    return Version(
        major=major,
        minor=minor,
        patch=patch,
        prerelease=prerelease,
        build=build
    )



class Comparator(Enum):
    GE = ">="
    GT = ">"
    LE = "<="
    LT = "<"
    EQ = "=="

    def __str__(self) -> str:
        return self.value



# Tokens accepted in dependency filter text. Equality has no token of its own.
_COMPARATOR_TOKENS: tuple[tuple[str, Comparator], ...] = (
    (">=", Comparator.GE),
    ("<=", Comparator.LE),
    (">", Comparator.GT),
    ("<", Comparator.LT),
)



def parseComparator(text: str) -> tuple[Comparator | None, str]:
    """
    Split a leading comparator token off `text`.

    Returns (comparator, rest). The comparator is None when `text` starts
    with no comparator token. "=" and "==" are rejected: equality is written
    as a bare version.
    """
    stripped = text.strip()
    if stripped.startswith("="):
        raise ValueError(f"Explicit equality token is not supported in {text!r}; use a bare version")
    for token, comparator in _COMPARATOR_TOKENS:
        if stripped.startswith(token):
            return comparator, stripped[len(token):].strip()
    return None, stripped



def compareWith(version: Version, comparator: Comparator, other: Version) -> bool:
    """Checks `version <comparator> other`."""
    if comparator is Comparator.EQ:
        return version == other
    if comparator is Comparator.GE:
        return version >= other
    if comparator is Comparator.GT:
        return version > other
    if comparator is Comparator.LE:
        return version <= other
    if comparator is Comparator.LT:
        return version < other
    raise ValueError(f"Unknown comparator {comparator!r}")



@dataclass(frozen=True)
class VersionMatchResult(Generic[T]):
    """
    Result of version-based selection among candidates.

    - candidates: all candidates seen.
    - best: the single best candidate by version, or None if there were none.
            If multiple candidates share the same best version, the
            first one in the input order is returned.
    """
    candidates: tuple[tuple[Version, T], ...]
    best: tuple[Version, T] | None



def selectBest(candidates: Iterable[tuple[Version, T]]) -> VersionMatchResult[T]:
    """
    Select the highest version among (version, payload) pairs.

    Ties keep the earliest pair, so callers encode priority through input order.
    """
    candidatesList: list[tuple[Version, T]] = list(candidates)

    best: tuple[Version, T] | None = None
    if candidatesList:
        bestVersion, bestPayload = candidatesList[0]
        for version, payload in candidatesList[1:]:
            if version > bestVersion:
                bestVersion, bestPayload = version, payload
        best = (bestVersion, bestPayload)

    return VersionMatchResult(candidates=tuple(candidatesList), best=best)
