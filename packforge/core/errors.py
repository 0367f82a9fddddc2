# packforge/core/errors.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from packforge.packs.types import PackIdentifier, ResourcePath
    from packforge.packs.filters import PackDependencyFilter
    from packforge.versioning import Version

__all__ = [
    "BundlingError",
    "InvalidPackError",
    "UnparsableRepositoryToken",
    "MissingDependency",
    "VersionConflict",
    "DuplicateOutputPath",
    "InvalidModifierInput",
    "ArtifactWriteFailure",
    "UnknownIgnoreFeature",
    "BundleWarning",
]



class BundlingError(RuntimeError):
    """Base class for every error raised while resolving, bundling or writing packs."""



class InvalidPackError(BundlingError):
    """Raised when a pack directory, archive or manifest cannot be loaded."""

    def __init__(self, location: str | Path, reason: str) -> None:
        super().__init__(f"Invalid pack at '{location}': {reason}")
        self.location = str(location)
        self.reason = reason



class UnparsableRepositoryToken(BundlingError):
    def __init__(self, token: str, reason: str | None = None, *, formats: Iterable[str] = ()) -> None:
        message = f"Unknown repository string {token!r}"
        if reason:
            message += f": {reason}"
        formatList = list(formats)
        if formatList:
            message += ". Valid formats: " + ", ".join(formatList)
        super().__init__(message)
        self.token = token
        self.reason = reason



class MissingDependency(BundlingError):
    def __init__(self, filter: PackDependencyFilter, *, requiredBy: PackIdentifier | None = None) -> None:
        message = f"No repository provides a pack matching '{filter}'"
        if requiredBy is not None:
            message += f" (required by '{requiredBy}')"
        super().__init__(message)
        self.filter = filter
        self.requiredBy = requiredBy



class VersionConflict(BundlingError):
    def __init__(
        self,
        identifier: PackIdentifier,
        required: PackDependencyFilter,
        selected: Version,
        *,
        requiredBy: PackIdentifier | None = None,
    ) -> None:
        message = (
            f"Version conflict for '{identifier}': '{required}' is required"
            f"{f' by {requiredBy}' if requiredBy is not None else ''}, "
            f"but {selected} is already selected"
        )
        super().__init__(message)
        self.identifier = identifier
        self.required = required
        self.selected = selected
        self.requiredBy = requiredBy



class DuplicateOutputPath(BundlingError):
    def __init__(self, path: ResourcePath, modifierA: str, modifierB: str) -> None:
        super().__init__(
            f"Output '{path}' is produced by both modifier '{modifierA}' and modifier '{modifierB}'"
        )
        self.path = path
        self.modifierA = modifierA
        self.modifierB = modifierB



class InvalidModifierInput(BundlingError):
    """Raised when a modifier cannot interpret one of the assets it claimed."""

    def __init__(self, modifierId: str, path: ResourcePath, reason: str) -> None:
        super().__init__(f"Modifier '{modifierId}' rejected '{path}': {reason}")
        self.modifierId = modifierId
        self.path = path
        self.reason = reason



class ArtifactWriteFailure(BundlingError):
    def __init__(self, path: str | Path, cause: BaseException) -> None:
        super().__init__(f"Failed to write artifact '{path}': {cause}")
        self.path = Path(path)
        self.cause = cause



class UnknownIgnoreFeature(BundlingError):
    def __init__(self, name: str, available: Iterable[str] = ()) -> None:
        availableList = list(available)
        message = f"Unknown feature {name!r}"
        if availableList:
            message += ". Available features to ignore: " + ", ".join(availableList)
        super().__init__(message)
        self.name = name
        self.available = tuple(availableList)



@dataclass(frozen=True, slots=True)
class BundleWarning:
    """An error that was downgraded because ignore-errors mode was active."""
    error: BundlingError

    @property
    def kind(self) -> str:
        return type(self.error).__name__

    @property
    def message(self) -> str:
        return str(self.error)

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"
