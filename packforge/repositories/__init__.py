# packforge/repositories/__init__.py
from .base import Repository, prefetchPacks, openStream
from .file import FileRepository
from .memory import MemoryRepository
from .tokens import (
    RepositoryTokenParsers,
    IndexTokenParser,
    fileTokenParser,
    defaultTokenParsers,
    parseRepository,
    tryParseRepository,
    configuredRepositories,
)

__all__ = [
    "Repository",
    "prefetchPacks",
    "openStream",
    "FileRepository",
    "MemoryRepository",
    "RepositoryTokenParsers",
    "IndexTokenParser",
    "fileTokenParser",
    "defaultTokenParsers",
    "parseRepository",
    "tryParseRepository",
    "configuredRepositories",
]
