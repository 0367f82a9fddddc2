# packforge/resolution/resolver.py
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Sequence

from packforge.core.errors import BundleWarning, BundlingError, MissingDependency, VersionConflict
from packforge.packs.filters import PackDependencyFilter
from packforge.packs.types import Pack, PackIdentifier, PackIndex
from packforge.repositories.base import Repository
from packforge.versioning import selectBest

logger = logging.getLogger(__name__)

__all__ = [
    "Resolution",
    "DependencyResolver",
    "resolve",
]



@dataclass(frozen=True, slots=True)
class Resolution:
    """
    Outcome of dependency resolution.

    - order: build order, every pack after all of its dependencies, root last.
    - selected: the single chosen Pack per identifier.
    - warnings: errors downgraded in ignore-errors mode.
    """
    root: Pack
    order: tuple[Pack, ...]
    selected: Mapping[PackIdentifier, Pack] = field(default_factory=dict)
    warnings: tuple[BundleWarning, ...] = ()

    def identifiers(self) -> tuple[PackIdentifier, ...]:
        return tuple(pack.identifier for pack in self.order)



@dataclass(slots=True)
class _PendingFilter:
    filter: PackDependencyFilter
    requiredBy: PackIdentifier



class DependencyResolver:
    """
    Resolves a root pack against repositories searched in list order.

    One version wins per identifier: the first selection is kept, later
    filters it does not satisfy are version conflicts.
    """

    def __init__(self, repositories: Sequence[Repository], *, ignoreErrors: bool = False) -> None:
        self.repositories: tuple[Repository, ...] = tuple(repositories)
        self.ignoreErrors = ignoreErrors

    # ----- Error policy -----

    def _report(self, error: BundlingError, warnings: list[BundleWarning]) -> None:
        if not self.ignoreErrors:
            raise error
        logger.warning("Ignoring resolution error: %s", error)
        warnings.append(BundleWarning(error))

    # ----- Candidate lookup -----

    def findCandidates(self, dependency: PackDependencyFilter) -> list[PackIndex]:
        """
        All indices satisfying `dependency`, in repository priority order
        then query order.
        """
        candidates: list[PackIndex] = []
        for repository in self.repositories:
            for index in repository.queryPacks(dependency.identifier):
                if dependency.accepts(index.identifier, index.version):
                    candidates.append(index)
        return candidates

    def fetchBest(self, dependency: PackDependencyFilter) -> tuple[PackIndex, Pack] | None:
        """
        Fetch the highest satisfying version; ties go to the earlier repository.

        A candidate whose fetch yields nothing (e.g. the pack changed since it
        was indexed) is dropped and the next best one is tried.
        """
        candidates = self.findCandidates(dependency)
        while candidates:
            index = _bestIndex(candidates)
            pack = index.fetch()
            if pack is not None:
                return index, pack
            logger.warning("Pack %s from %s could not be fetched, trying other candidates", index, index.repository.describe())
            candidates = [candidate for candidate in candidates if candidate is not index]
        return None

    # ----- Resolution -----

    def resolve(self, root: Pack) -> Resolution:
        warnings: list[BundleWarning] = []
        selected: dict[PackIdentifier, Pack] = {root.identifier: root}
        edges: dict[PackIdentifier, list[PackIdentifier]] = {root.identifier: []}

        queue: deque[_PendingFilter] = deque(
            _PendingFilter(dependency, root.identifier) for dependency in root.dependencies
        )

        while queue:
            pending = queue.popleft()
            dependency = pending.filter
            identifier = dependency.identifier

            existing = selected.get(identifier)
            if existing is not None:
                if not dependency.matches(existing.version):
                    self._report(
                        VersionConflict(identifier, dependency, existing.version, requiredBy=pending.requiredBy),
                        warnings,
                    )
                    # First selection wins, the edge still orders the build
                _addEdge(edges, pending.requiredBy, identifier)
                continue

            fetched = self.fetchBest(dependency)
            if fetched is None:
                self._report(MissingDependency(dependency, requiredBy=pending.requiredBy), warnings)
                continue
            index, pack = fetched

            logger.debug(
                "Selected %s from %s for '%s' (required by %s)",
                pack, index.repository.describe(), dependency, pending.requiredBy,
            )
            selected[identifier] = pack
            edges.setdefault(identifier, [])
            _addEdge(edges, pending.requiredBy, identifier)
            queue.extend(_PendingFilter(child, identifier) for child in pack.dependencies)

        order = _postOrder(root.identifier, edges, selected)
        logger.debug("Build order: %s", ", ".join(str(pack) for pack in order))
        return Resolution(
            root=root,
            order=order,
            selected=MappingProxyType(dict(selected)),
            warnings=tuple(warnings),
        )



def _bestIndex(candidates: Sequence[PackIndex]) -> PackIndex | None:
    matchResult = selectBest((index.version, index) for index in candidates)
    if matchResult.best is None:
        return None
    _bestVersion, bestIndex = matchResult.best
    return bestIndex



def _addEdge(edges: dict[PackIdentifier, list[PackIdentifier]], parent: PackIdentifier, child: PackIdentifier) -> None:
    children = edges.setdefault(parent, [])
    if child not in children:
        children.append(child)



def _postOrder(
    rootId: PackIdentifier,
    edges: Mapping[PackIdentifier, Sequence[PackIdentifier]],
    selected: Mapping[PackIdentifier, Pack],
) -> tuple[Pack, ...]:
    """
    Depth-first post-order over the selection graph.

    Children are visited in declaration order so the order only depends on
    the inputs. A back edge (dependency cycle) is skipped.
    """
    order: list[Pack] = []
    done: set[PackIdentifier] = set()
    onStack: set[PackIdentifier] = set()

    # Iterative DFS: (identifier, next child position)
    stack: list[tuple[PackIdentifier, int]] = [(rootId, 0)]
    onStack.add(rootId)
    while stack:
        current, position = stack[-1]
        children = edges.get(current, ())
        if position < len(children):
            stack[-1] = (current, position + 1)
            child = children[position]
            if child in done:
                continue
            if child in onStack:
                logger.debug("Dependency cycle between %s and %s, edge skipped", current, child)
                continue
            onStack.add(child)
            stack.append((child, 0))
            continue
        stack.pop()
        onStack.discard(current)
        done.add(current)
        order.append(selected[current])
    return tuple(order)



def resolve(
    root: Pack,
    repositories: Sequence[Repository],
    *,
    ignoreErrors: bool = False,
) -> Resolution:
    """
    Resolve `root`'s dependencies against `repositories` (priority = order).

    Raises:
        MissingDependency: no repository satisfies a filter.
        VersionConflict: an already selected pack does not satisfy a later filter.
    With ignoreErrors both are recorded as warnings on the Resolution instead.
    """
    return DependencyResolver(repositories, ignoreErrors=ignoreErrors).resolve(root)
