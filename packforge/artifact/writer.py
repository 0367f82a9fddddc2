# packforge/artifact/writer.py
from __future__ import annotations

import logging
import os
import shutil
import tempfile
import zipfile
from pathlib import Path

from packforge.app.settings import settingsInt
from packforge.bundling.result import BundleResult
from packforge.core.errors import ArtifactWriteFailure
from .layout import ICON_NAME, METADATA_NAME, packMetadataBytes

logger = logging.getLogger(__name__)

__all__ = ["ZIP_SUFFIX", "ZIP_TIMESTAMP", "artifactEntries", "writeArtifact"]



ZIP_SUFFIX = ".zip"
# Earliest timestamp a zip entry can carry
ZIP_TIMESTAMP = (1980, 1, 1, 0, 0, 0)



def artifactEntries(result: BundleResult) -> list[tuple[str, bytes]]:
    """Every file of the artifact as (posix name, content), sorted by name."""
    entries: list[tuple[str, bytes]] = [
        (METADATA_NAME, packMetadataBytes(result.description, result.targetVersion)),
    ]
    if result.icon is not None:
        entries.append((ICON_NAME, result.icon))
    entries.extend((path.toArchivePath(), content) for path, content in result.mergedAssets.items())
    entries.sort(key=lambda entry: entry[0])
    return entries



def _writeZip(entries: list[tuple[str, bytes]], target: Path, compressionLevel: int) -> None:
    with zipfile.ZipFile(target, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=compressionLevel) as archive:
        for name, content in entries:
            info = zipfile.ZipInfo(name, date_time=ZIP_TIMESTAMP)
            info.compress_type = zipfile.ZIP_DEFLATED
            info.external_attr = 0o644 << 16
            archive.writestr(info, content, compresslevel=compressionLevel)



def _writeTree(entries: list[tuple[str, bytes]], target: Path) -> None:
    for name, content in entries:
        file = target.joinpath(*name.split("/"))
        file.parent.mkdir(parents=True, exist_ok=True)
        file.write_bytes(content)



def _removePath(path: Path) -> None:
    if path.is_dir():
        shutil.rmtree(path, ignore_errors=True)
    elif path.exists():
        path.unlink()



def writeArtifact(result: BundleResult, destination: str | Path, *, compressionLevel: int | None = None) -> Path:
    """
    Serialize `result` to `destination`.

    A ".zip" destination becomes a zip archive, anything else a directory
    tree. The artifact is written next to the destination first and moved
    into place, so an existing artifact is either fully replaced or left
    untouched.

    Raises:
        ArtifactWriteFailure: the artifact could not be written; no partial
            output is left behind.
    """
    destination = Path(destination)
    asZip = destination.suffix.lower() == ZIP_SUFFIX
    level = compressionLevel if compressionLevel is not None else settingsInt("artifact.compressionLevel", 6)

    temporary: Path | None = None
    backup: Path | None = None
    try:
        entries = artifactEntries(result)
        destination.parent.mkdir(parents=True, exist_ok=True)
        prefix = f".{destination.name}."
        if asZip:
            handle, name = tempfile.mkstemp(prefix=prefix, suffix=".tmp", dir=destination.parent)
            os.close(handle)
            temporary = Path(name)
            _writeZip(entries, temporary, level)
            os.replace(temporary, destination)
        else:
            temporary = Path(tempfile.mkdtemp(prefix=prefix, suffix=".tmp", dir=destination.parent))
            _writeTree(entries, temporary)
            if destination.exists():
                # Directories cannot be replaced in one step: swap the old tree out first
                backup = Path(tempfile.mkdtemp(prefix=prefix, suffix=".old", dir=destination.parent))
                os.replace(destination, backup)
            try:
                os.replace(temporary, destination)
            except OSError:
                if backup is not None:
                    os.replace(backup, destination)
                    backup = None
                raise
        temporary = None
    except (OSError, ValueError, zipfile.LargeZipFile) as err:
        if temporary is not None:
            _removePath(temporary)
        raise ArtifactWriteFailure(destination, err) from err
    finally:
        if backup is not None:
            _removePath(backup)

    logger.info(
        "Wrote %s artifact '%s' (%d entries)",
        "zip" if asZip else "directory", destination, len(entries),
    )
    return destination
