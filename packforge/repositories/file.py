# packforge/repositories/file.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from packforge.core.errors import InvalidPackError
from packforge.packs.loaders import isPackArchive, isPackDirectory, loadPack, readPackManifest
from packforge.packs.types import Pack, PackIdentifier, PackIndex
from .base import Repository

logger = logging.getLogger(__name__)

__all__ = ["FileRepository"]



class FileRepository(Repository):
    """
    Filesystem repository.

    Every immediate child of `root` that is a pack directory (with a manifest)
    or a pack archive is one pack. Queries read manifests only; assets are
    loaded by getPack().
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).expanduser()

    def _candidates(self) -> list[Path]:
        if not self.root.is_dir():
            logger.warning("Repository root '%s' does not exist or is not a directory", self.root)
            return []
        return [
            child for child in sorted(self.root.iterdir(), key=lambda p: p.name)
            if isPackDirectory(child) or isPackArchive(child)
        ]

    def queryPacks(self, identifier: PackIdentifier | None = None) -> Iterator[PackIndex]:
        for location in self._candidates():
            try:
                manifest = readPackManifest(location)
            except InvalidPackError as err:
                logger.warning("Skipping '%s': %s", location, err.reason)
                continue
            packId = manifest.identifier
            if identifier is not None and packId != identifier:
                continue
            yield PackIndex(identifier=packId, version=manifest.parsedVersion, repository=self, location=location)

    def getPack(self, index: PackIndex) -> Pack | None:
        location = index.location
        if not isinstance(location, Path) or not location.exists():
            logger.warning("Pack %s is no longer available in '%s'", index, self.root)
            return None
        pack = loadPack(location)
        if pack.identifier != index.identifier or pack.version != index.version:
            logger.warning("Pack at '%s' changed since it was indexed (%s, now %s)", location, index, pack)
            return None
        return pack

    def describe(self) -> str:
        return f"file:{self.root}"
