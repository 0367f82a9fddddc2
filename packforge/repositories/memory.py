# packforge/repositories/memory.py
from __future__ import annotations

from typing import Iterable, Iterator

from packforge.packs.types import Pack, PackIdentifier, PackIndex
from .base import Repository

__all__ = ["MemoryRepository"]



class MemoryRepository(Repository):
    """Repository over packs that are already loaded. Query order is insertion order."""

    def __init__(self, packs: Iterable[Pack] = (), *, name: str = "memory") -> None:
        self._packs: list[Pack] = []
        self._name = name
        for pack in packs:
            self.add(pack)

    def add(self, pack: Pack) -> None:
        for existing in self._packs:
            if existing.identifier == pack.identifier and existing.version == pack.version:
                raise ValueError(f"Duplicate pack {pack} in repository '{self._name}'")
        self._packs.append(pack)

    def queryPacks(self, identifier: PackIdentifier | None = None) -> Iterator[PackIndex]:
        for position, pack in enumerate(self._packs):
            if identifier is not None and pack.identifier != identifier:
                continue
            yield PackIndex(identifier=pack.identifier, version=pack.version, repository=self, location=position)

    def getPack(self, index: PackIndex) -> Pack | None:
        position = index.location
        if isinstance(position, int) and 0 <= position < len(self._packs):
            pack = self._packs[position]
            if pack.identifier == index.identifier and pack.version == index.version:
                return pack
        return None

    def describe(self) -> str:
        return f"MemoryRepository({self._name}, {len(self._packs)} packs)"
