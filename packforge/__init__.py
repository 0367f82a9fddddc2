# packforge/__init__.py
from packforge.versioning import Version, parseVersion
from packforge.packs import (
    Pack,
    PackIdentifier,
    PackIndex,
    ResourcePath,
    PackDependencyFilter,
    parseDependencyFilter,
    loadPack,
)
from packforge.repositories import (
    Repository,
    FileRepository,
    MemoryRepository,
    parseRepository,
    tryParseRepository,
)
from packforge.resolution import Resolution, resolve
from packforge.modifiers import Modifier, ModifierRegistry, defaultModifierRegistry
from packforge.bundling import BundleIgnore, BundleResult, Bundler, bundle, parseBundleIgnore
from packforge.artifact import packFormatFor, readArtifact, readArtifactMetadata, writeArtifact
from packforge.core.errors import BundlingError, BundleWarning

__version__ = "0.1.0"

__all__ = [
    "Version",
    "parseVersion",
    "Pack",
    "PackIdentifier",
    "PackIndex",
    "ResourcePath",
    "PackDependencyFilter",
    "parseDependencyFilter",
    "loadPack",
    "Repository",
    "FileRepository",
    "MemoryRepository",
    "parseRepository",
    "tryParseRepository",
    "Resolution",
    "resolve",
    "Modifier",
    "ModifierRegistry",
    "defaultModifierRegistry",
    "BundleIgnore",
    "BundleResult",
    "Bundler",
    "bundle",
    "parseBundleIgnore",
    "packFormatFor",
    "readArtifact",
    "readArtifactMetadata",
    "writeArtifact",
    "BundlingError",
    "BundleWarning",
]
