# packforge/packs/__init__.py
from .types import (
    DEFAULT_NAMESPACE,
    PackIdentifier,
    ResourcePath,
    Pack,
    PackIndex,
    parsePackIdentifier,
    parseResourcePath,
)
from .filters import PackDependencyFilter, parseDependencyFilter
from .manifest import PackManifest
from .loaders import loadPack, loadPackFromDirectory, loadPackFromArchive

__all__ = [
    "DEFAULT_NAMESPACE",
    "PackIdentifier",
    "ResourcePath",
    "Pack",
    "PackIndex",
    "parsePackIdentifier",
    "parseResourcePath",
    "PackDependencyFilter",
    "parseDependencyFilter",
    "PackManifest",
    "loadPack",
    "loadPackFromDirectory",
    "loadPackFromArchive",
]
