# packforge/repositories/tokens.py
from __future__ import annotations

import logging
from typing import Callable, Iterable, Sequence

from packforge.app.settings import settings
from packforge.core.errors import UnparsableRepositoryToken
from .base import Repository
from .file import FileRepository

logger = logging.getLogger(__name__)

__all__ = [
    "TOKEN_FORMATS",
    "RepositoryTokenParser",
    "RepositoryTokenParsers",
    "IndexTokenParser",
    "fileTokenParser",
    "defaultTokenParsers",
    "parseRepository",
    "tryParseRepository",
    "configuredRepositories",
]



TOKEN_FORMATS: tuple[str, ...] = ("'#' + Index", "'file:/path/to/repository'")

# Returns a Repository, or None when the token is not in this parser's format.
RepositoryTokenParser = Callable[[str], "Repository | None"]



class IndexTokenParser:
    """Parses "#<index>" against a caller-maintained ordered repository list."""

    def __init__(self, known: Sequence[Repository]) -> None:
        self._known = known

    def __call__(self, token: str) -> Repository | None:
        if not token.startswith("#"):
            return None
        rawIndex = token[1:].strip()
        if not rawIndex.isdigit():
            raise UnparsableRepositoryToken(token, f"'{rawIndex}' is not a repository index", formats=TOKEN_FORMATS)
        index = int(rawIndex)
        if index >= len(self._known):
            raise UnparsableRepositoryToken(
                token,
                f"repository #{index} doesn't exist (only {len(self._known)} configured)",
                formats=TOKEN_FORMATS,
            )
        return self._known[index]



def fileTokenParser(token: str) -> Repository | None:
    if not token.startswith("file:"):
        return None
    path = token[len("file:"):].strip()
    if not path:
        raise UnparsableRepositoryToken(token, "missing path after 'file:'", formats=TOKEN_FORMATS)
    return FileRepository(path)



class RepositoryTokenParsers:
    """
    Ordered chain of token parsers. Parsers are tried in registration order
    and the first non-None result wins.
    """

    def __init__(self, parsers: Iterable[RepositoryTokenParser] = ()) -> None:
        self._parsers: list[RepositoryTokenParser] = list(parsers)

    def register(self, parser: RepositoryTokenParser) -> None:
        self._parsers.append(parser)

    def parse(self, token: str) -> Repository | None:
        text = (token or "").strip()
        for parser in self._parsers:
            repository = parser(text)
            if repository is not None:
                return repository
        return None



def defaultTokenParsers(known: Sequence[Repository] = ()) -> RepositoryTokenParsers:
    return RepositoryTokenParsers([IndexTokenParser(known), fileTokenParser])



def parseRepository(token: str, parsers: RepositoryTokenParsers | None = None) -> Repository:
    """
    Resolve a repository token.

    Raises:
        UnparsableRepositoryToken: the token matches no parser, or a parser
        recognised the format but rejected the value.
    """
    chain = parsers if parsers is not None else defaultTokenParsers()
    repository = chain.parse(token)
    if repository is None:
        raise UnparsableRepositoryToken(token, formats=TOKEN_FORMATS)
    return repository



def tryParseRepository(token: str, parsers: RepositoryTokenParsers | None = None) -> Repository | None:
    """Best-effort wrapper around parseRepository; unparsable tokens yield None."""
    try:
        return parseRepository(token, parsers)
    except UnparsableRepositoryToken as err:
        logger.debug("tryParseRepository: %s", err)
    return None



def configuredRepositories() -> list[Repository]:
    """
    Repositories listed in the "repositories" setting, in order.

    Entries may only use the "file:" format; index tokens would refer to
    this very list.
    """
    tokens = settings("repositories", [])
    if not isinstance(tokens, list):
        logger.error("Setting 'repositories' must be a list of tokens, got %s", type(tokens).__name__)
        return []
    parsers = RepositoryTokenParsers([fileTokenParser])
    return [parseRepository(str(token), parsers) for token in tokens]
