# packforge/packs/loaders.py
from __future__ import annotations

import logging
import zipfile
from pathlib import Path, PurePosixPath
from typing import Iterable

from packforge.core.errors import InvalidPackError
from .manifest import MANIFEST_NAMES, PackManifest, loadManifestFile, parseManifestText
from .types import Pack, ResourcePath

logger = logging.getLogger(__name__)

__all__ = [
    "ASSETS_DIR",
    "ICON_NAME",
    "ARCHIVE_SUFFIXES",
    "isPackDirectory",
    "isPackArchive",
    "findManifestPath",
    "readPackManifest",
    "loadPack",
    "loadPackFromDirectory",
    "loadPackFromArchive",
    "resourcePathFromArchiveName",
]



ASSETS_DIR = "assets"
ICON_NAME = "pack.png"
ARCHIVE_SUFFIXES: tuple[str, ...] = (".zip",)



# ----- Layout helpers -----

def resourcePathFromArchiveName(name: str) -> ResourcePath | None:
    """
    Map "assets/<namespace>/<path>" to a ResourcePath.

    Returns None for entries outside the assets tree (manifest, icon, ...).
    Raises ValueError for assets entries whose path is not a valid resource path.
    """
    parts = PurePosixPath(name).parts
    if len(parts) < 3 or parts[0] != ASSETS_DIR:
        return None
    return ResourcePath(parts[1], "/".join(parts[2:]))



def findManifestPath(dirPath: Path) -> Path | None:
    for name in MANIFEST_NAMES:
        candidate = dirPath / name
        if candidate.is_file():
            return candidate
    return None



def isPackDirectory(path: Path) -> bool:
    return path.is_dir() and findManifestPath(path) is not None



def isPackArchive(path: Path) -> bool:
    return path.is_file() and path.suffix.lower() in ARCHIVE_SUFFIXES



def _archiveManifestName(archive: zipfile.ZipFile) -> str | None:
    names = set(archive.namelist())
    for name in MANIFEST_NAMES:
        if name in names:
            return name
    return None



def readPackManifest(location: Path) -> PackManifest:
    """Reads only the manifest of a pack directory or archive."""
    if location.is_dir():
        manifestPath = findManifestPath(location)
        if manifestPath is None:
            raise InvalidPackError(location, f"no manifest ({', '.join(MANIFEST_NAMES)}) found")
        return loadManifestFile(manifestPath)

    try:
        with zipfile.ZipFile(location) as archive:
            manifestName = _archiveManifestName(archive)
            if manifestName is None:
                raise InvalidPackError(location, f"no manifest ({', '.join(MANIFEST_NAMES)}) at archive root")
            text = archive.read(manifestName).decode("utf-8")
    except (OSError, zipfile.BadZipFile) as err:
        raise InvalidPackError(location, f"cannot read archive: {err}") from err
    except UnicodeDecodeError as err:
        raise InvalidPackError(location, f"manifest {manifestName} is not valid UTF-8: {err}") from err
    return parseManifestText(text, location=location, json5Syntax=manifestName.endswith(".json5"))



# ----- Loading -----

def _buildPack(manifest: PackManifest, assets: dict[ResourcePath, bytes], icon: bytes | None) -> Pack:
    return Pack(
        identifier=manifest.identifier,
        version=manifest.parsedVersion,
        description=manifest.description,
        dependencies=manifest.dependencyFilters(),
        assets=assets,
        icon=icon,
    )



def _collectAssets(location: Path, entries: Iterable[tuple[str, bytes]]) -> dict[ResourcePath, bytes]:
    assets: dict[ResourcePath, bytes] = {}
    for name, content in entries:
        if any(part.startswith(".") for part in PurePosixPath(name).parts):
            logger.debug("Skipping hidden entry '%s' in '%s'", name, location)
            continue
        try:
            resourcePath = resourcePathFromArchiveName(name)
        except ValueError as err:
            raise InvalidPackError(location, f"invalid asset path '{name}': {err}") from err
        if resourcePath is None:
            continue
        assets[resourcePath] = content
    return assets



def loadPackFromDirectory(root: Path) -> Pack:
    root = Path(root)
    manifest = readPackManifest(root)

    def _entries() -> Iterable[tuple[str, bytes]]:
        assetsRoot = root / ASSETS_DIR
        if not assetsRoot.is_dir():
            return
        for file in sorted(assetsRoot.rglob("*")):
            if file.is_file():
                yield file.relative_to(root).as_posix(), file.read_bytes()

    try:
        assets = _collectAssets(root, _entries())
        iconPath = root / ICON_NAME
        icon = iconPath.read_bytes() if iconPath.is_file() else None
    except OSError as err:
        raise InvalidPackError(root, f"cannot read pack files: {err}") from err

    logger.debug("Loaded pack %s@%s from '%s' (%d assets)", manifest.identifier, manifest.version, root, len(assets))
    return _buildPack(manifest, assets, icon)



def loadPackFromArchive(path: Path) -> Pack:
    path = Path(path)
    manifest = readPackManifest(path)
    try:
        with zipfile.ZipFile(path) as archive:
            names = sorted(info.filename for info in archive.infolist() if not info.is_dir())
            assets = _collectAssets(path, ((name, archive.read(name)) for name in names))
            icon = archive.read(ICON_NAME) if ICON_NAME in names else None
    except (OSError, zipfile.BadZipFile) as err:
        raise InvalidPackError(path, f"cannot read archive: {err}") from err

    logger.debug("Loaded pack %s@%s from archive '%s' (%d assets)", manifest.identifier, manifest.version, path, len(assets))
    return _buildPack(manifest, assets, icon)



def loadPack(location: str | Path) -> Pack:
    """Loads a pack from a directory or a zip archive."""
    location = Path(location)
    if location.is_dir():
        return loadPackFromDirectory(location)
    if isPackArchive(location):
        return loadPackFromArchive(location)
    raise InvalidPackError(location, "not a pack directory or archive")
