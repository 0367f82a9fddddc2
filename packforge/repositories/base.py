# packforge/repositories/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from concurrent.futures import Future
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator

from packforge.core.tasks import TaskExecutor, getSharedExecutor
from packforge.packs.types import Pack, PackIdentifier, PackIndex

__all__ = ["Repository", "prefetchPacks", "openStream"]



class Repository(ABC):
    """
    Pluggable source of packs.

    queryPacks() returns cheap PackIndex handles; getPack() turns one into a
    full Pack and may block (disk or network).
    """

    @abstractmethod
    def queryPacks(self, identifier: PackIdentifier | None = None) -> Iterator[PackIndex]:
        """
        Query packs inside this repository.

        Pass None to get all packs. Remote repositories may legitimately
        return nothing for None instead of enumerating everything.
        """

    @abstractmethod
    def getPack(self, index: PackIndex) -> Pack | None:
        """Fetch the pack behind `index`, or None if this repository can't provide it."""

    def getPackAsync(self, index: PackIndex, *, executor: TaskExecutor | None = None) -> Future[Pack | None]:
        """Runs getPack() on a worker thread and returns the future."""
        return (executor or getSharedExecutor()).submit(self.getPack, index)

    def describe(self) -> str:
        return type(self).__name__

    def __repr__(self) -> str:
        return f"<{self.describe()}>"



def prefetchPacks(indices: Iterable[PackIndex], *, executor: TaskExecutor | None = None) -> list[Future[Pack | None]]:
    """
    Fan out getPackAsync() for every index, in input order.

    Callers that want overlapping fetches do this before resolution and wait
    on the futures themselves; nothing else in packforge consumes futures.
    """
    return [index.repository.getPackAsync(index, executor=executor) for index in indices]



def openStream(path: str | Path) -> BinaryIO:
    """Opens a pack or artifact file as a binary stream for collaborators that consume streams."""
    return Path(path).open("rb")
