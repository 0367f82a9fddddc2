# packforge/artifact/__init__.py
from .layout import PACK_FORMATS, packFormatFor, packMetadata
from .writer import writeArtifact
from .reader import readArtifact, readArtifactMetadata

__all__ = [
    "PACK_FORMATS",
    "packFormatFor",
    "packMetadata",
    "writeArtifact",
    "readArtifact",
    "readArtifactMetadata",
]
