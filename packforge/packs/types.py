# packforge/packs/types.py
from __future__ import annotations

import re
from concurrent.futures import Future
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping

from packforge.versioning import Version

if TYPE_CHECKING:
    from packforge.core.tasks import TaskExecutor
    from packforge.packs.filters import PackDependencyFilter
    from packforge.repositories.base import Repository

__all__ = [
    "DEFAULT_NAMESPACE",
    "PackIdentifier",
    "ResourcePath",
    "Pack",
    "PackIndex",
    "parsePackIdentifier",
    "parseResourcePath",
]



DEFAULT_NAMESPACE = "local"
_NAME_RE = re.compile(r"^[a-z0-9_.-]+$")
_PATH_SEGMENT_RE = re.compile(r"^[a-z0-9_.-]+$")



def _checkName(value: str, what: str, raw: str) -> str:
    if not _NAME_RE.fullmatch(value):
        raise ValueError(f"Invalid {what} {value!r} in {raw!r} (expected [a-z0-9_.-]+)")
    return value



@dataclass(frozen=True, order=True, slots=True)
class PackIdentifier:
    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"



def parsePackIdentifier(raw: str, *, defaultNamespace: str = DEFAULT_NAMESPACE) -> PackIdentifier:
    """
    Parse "namespace/name" or "name" (implicit default namespace).
    """
    if not isinstance(raw, str):
        raise TypeError(f"Pack identifier must be a string, got {type(raw).__name__}")
    text = raw.strip()
    if not text:
        raise ValueError("Pack identifier cannot be empty")

    namespace, sep, name = text.partition("/")
    if not sep:
        namespace, name = defaultNamespace, text
    if "/" in name:
        raise ValueError(f"Pack identifier {raw!r} contains too many '/' segments")
    return PackIdentifier(
        namespace=_checkName(namespace, "namespace", raw),
        name=_checkName(name, "pack name", raw),
    )



@dataclass(frozen=True, order=True, slots=True)
class ResourcePath:
    """
    Fully-qualified key into the merged asset tree.

    Text form is "namespace:path", artifact form is "assets/<namespace>/<path>".
    """
    namespace: str
    path: str

    def __post_init__(self) -> None:
        if not _NAME_RE.fullmatch(self.namespace or ""):
            raise ValueError(f"Invalid resource namespace {self.namespace!r}")
        segments = (self.path or "").split("/")
        for segment in segments:
            if segment in ("", ".", "..") or not _PATH_SEGMENT_RE.fullmatch(segment):
                raise ValueError(f"Invalid resource path {self.path!r} in namespace {self.namespace!r}")

    def __str__(self) -> str:
        return f"{self.namespace}:{self.path}"

    @property
    def folder(self) -> str:
        head, _, _tail = self.path.rpartition("/")
        return head

    @property
    def filename(self) -> str:
        return self.path.rpartition("/")[2]

    @property
    def stem(self) -> str:
        name = self.filename
        stem, dot, _suffix = name.rpartition(".")
        return stem if dot and stem else name

    @property
    def suffix(self) -> str:
        name = self.filename
        stem, dot, suffix = name.rpartition(".")
        return f".{suffix}" if dot and stem else ""

    def startswith(self, folder: str) -> bool:
        """True when the path lives under `folder` (no trailing slash)."""
        return self.path.startswith(folder.rstrip("/") + "/")

    def toArchivePath(self) -> str:
        return f"assets/{self.namespace}/{self.path}"



def parseResourcePath(raw: str, *, defaultNamespace: str = "minecraft") -> ResourcePath:
    """
    Parse "namespace:path" or "path" (implicit default namespace, "minecraft"
    like the game itself).
    """
    text = (raw or "").strip()
    if not text:
        raise ValueError("Resource path cannot be empty")
    namespace, sep, path = text.partition(":")
    if not sep:
        namespace, path = defaultNamespace, text
    return ResourcePath(namespace, path)



@dataclass(frozen=True, slots=True, kw_only=True)
class Pack:
    """
    Named, versioned bundle of raw assets plus dependency filters.

    Immutable once loaded: assets are exposed through a read-only mapping.
    """
    identifier: PackIdentifier
    version: Version
    description: str = ""
    dependencies: tuple[PackDependencyFilter, ...] = ()
    assets: Mapping[ResourcePath, bytes] = field(default_factory=dict)
    icon: bytes | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.assets, MappingProxyType):
            object.__setattr__(self, "assets", MappingProxyType(dict(self.assets)))
        object.__setattr__(self, "dependencies", tuple(self.dependencies))

    def __str__(self) -> str:
        return f"{self.identifier}@{self.version}"



@dataclass(frozen=True, slots=True, kw_only=True)
class PackIndex:
    """
    Lightweight handle returned by Repository.queryPacks().

    The full Pack is only fetched on demand through the owning repository.
    `location` is an opaque repository-specific hint (file path, key, ...).
    """
    identifier: PackIdentifier
    version: Version
    repository: Repository = field(compare=False)
    location: Any = field(default=None, compare=False)

    def fetch(self) -> Pack | None:
        return self.repository.getPack(self)

    def fetchAsync(self, *, executor: TaskExecutor | None = None) -> Future[Pack | None]:
        return self.repository.getPackAsync(self, executor=executor)

    def __str__(self) -> str:
        return f"{self.identifier}@{self.version}"
