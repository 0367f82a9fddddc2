# packforge/artifact/reader.py
from __future__ import annotations

import json
import zipfile
from pathlib import Path
from typing import Any, Iterator

from packforge.packs.types import ResourcePath
from .layout import ASSETS_DIR, METADATA_NAME, resourcePathFromArchiveName

__all__ = ["readArtifact", "readArtifactMetadata"]



def _treeEntries(root: Path) -> Iterator[tuple[str, bytes]]:
    assetsRoot = root / ASSETS_DIR
    if not assetsRoot.is_dir():
        return
    for file in sorted(assetsRoot.rglob("*")):
        if file.is_file():
            yield file.relative_to(root).as_posix(), file.read_bytes()



def readArtifact(path: str | Path) -> dict[ResourcePath, bytes]:
    """Reads the assets of a directory or zip artifact back into a mapping."""
    path = Path(path)
    assets: dict[ResourcePath, bytes] = {}
    if path.is_dir():
        for name, content in _treeEntries(path):
            resourcePath = resourcePathFromArchiveName(name)
            if resourcePath is not None:
                assets[resourcePath] = content
        return assets

    with zipfile.ZipFile(path) as archive:
        for info in sorted(archive.infolist(), key=lambda item: item.filename):
            if info.is_dir():
                continue
            resourcePath = resourcePathFromArchiveName(info.filename)
            if resourcePath is not None:
                assets[resourcePath] = archive.read(info)
    return assets



def readArtifactMetadata(path: str | Path) -> dict[str, Any]:
    """Parsed pack.mcmeta of a directory or zip artifact."""
    path = Path(path)
    if path.is_dir():
        raw = (path / METADATA_NAME).read_bytes()
    else:
        with zipfile.ZipFile(path) as archive:
            raw = archive.read(METADATA_NAME)
    return json.loads(raw.decode("utf-8"))
