# packforge/packs/manifest.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

import json5
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from packforge.core.errors import InvalidPackError
from packforge.versioning import Version, parseVersion
from .filters import PackDependencyFilter, parseDependencyFilter
from .types import PackIdentifier, parsePackIdentifier

__all__ = [
    "MANIFEST_NAMES",
    "PackManifest",
    "parseManifestText",
    "loadManifestFile",
]



MANIFEST_NAMES: tuple[str, ...] = ("manifest.json5", "manifest.json")



class PackManifest(BaseModel):
    """Represents a validated pack manifest."""
    model_config = ConfigDict(extra="forbid")

    id: str
    version: str
    description: str = ""
    dependencies: list[str] = Field(default_factory=list)

    @field_validator("id")
    @classmethod
    def _validateId(cls, value: str) -> str:
        parsePackIdentifier(value)
        return value.strip()

    @field_validator("version")
    @classmethod
    def _validateVersion(cls, value: str) -> str:
        parseVersion(value)
        return value.strip()

    @field_validator("dependencies")
    @classmethod
    def _validateDependencies(cls, value: list[str]) -> list[str]:
        for entry in value:
            parseDependencyFilter(entry)
        return [entry.strip() for entry in value]

    @property
    def identifier(self) -> PackIdentifier:
        return parsePackIdentifier(self.id)

    @property
    def parsedVersion(self) -> Version:
        return parseVersion(self.version)

    def dependencyFilters(self) -> tuple[PackDependencyFilter, ...]:
        return tuple(parseDependencyFilter(entry) for entry in self.dependencies)



def parseManifestText(text: str, *, location: str | Path, json5Syntax: bool = True) -> PackManifest:
    try:
        raw: Any = json5.loads(text) if json5Syntax else json.loads(text)
    except ValueError as err:
        raise InvalidPackError(location, f"manifest is not valid JSON: {err}") from err
    if not isinstance(raw, Mapping):
        raise InvalidPackError(location, "manifest is not a JSON object")
    try:
        return PackManifest.model_validate(dict(raw))
    except ValidationError as err:
        raise InvalidPackError(location, f"invalid manifest: {err}") from err



def loadManifestFile(path: Path) -> PackManifest:
    if path.suffix not in (".json5", ".json"):
        raise InvalidPackError(path, f"unknown manifest file extension '{path.suffix}'")
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as err:
        raise InvalidPackError(path, f"cannot read manifest: {err}") from err
    except UnicodeDecodeError as err:
        raise InvalidPackError(path, f"manifest is not valid UTF-8: {err}") from err
    return parseManifestText(text, location=path, json5Syntax=path.suffix == ".json5")
