# packforge/artifact/layout.py
from __future__ import annotations

from typing import Any

from packforge.core.jsonutils import canonicalJsonBytes
from packforge.packs.loaders import ASSETS_DIR, ICON_NAME, resourcePathFromArchiveName
from packforge.versioning import Version, parseVersion

__all__ = [
    "ASSETS_DIR",
    "METADATA_NAME",
    "ICON_NAME",
    "PACK_FORMATS",
    "packFormatFor",
    "packMetadata",
    "packMetadataBytes",
    "resourcePathFromArchiveName",
]



METADATA_NAME = "pack.mcmeta"

# (first game version, resource pack format), ascending
PACK_FORMATS: tuple[tuple[Version, int], ...] = (
    (Version(1, 13, 0), 4),
    (Version(1, 15, 0), 5),
    (Version(1, 16, 2), 6),
    (Version(1, 17, 0), 7),
    (Version(1, 18, 0), 8),
    (Version(1, 19, 0), 9),
    (Version(1, 19, 3), 12),
    (Version(1, 19, 4), 13),
    (Version(1, 20, 0), 15),
    (Version(1, 20, 2), 18),
    (Version(1, 20, 3), 22),
    (Version(1, 20, 5), 32),
    (Version(1, 21, 0), 34),
    (Version(1, 21, 2), 42),
    (Version(1, 21, 4), 46),
)



def packFormatFor(version: Version | str) -> int:
    """Resource pack format understood by game `version`."""
    target = parseVersion(version)
    found: int | None = None
    for since, packFormat in PACK_FORMATS:
        if target < since:
            break
        found = packFormat
    if found is None:
        raise ValueError(f"No resource pack format known for game version {target} (oldest is {PACK_FORMATS[0][0]})")
    return found



def packMetadata(description: str, targetVersion: Version | str) -> dict[str, Any]:
    return {"pack": {"pack_format": packFormatFor(targetVersion), "description": description}}



def packMetadataBytes(description: str, targetVersion: Version | str) -> bytes:
    return canonicalJsonBytes(packMetadata(description, targetVersion))

