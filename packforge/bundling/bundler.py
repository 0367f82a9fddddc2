# packforge/bundling/bundler.py
from __future__ import annotations

import logging
from typing import Iterable, Sequence

from packforge.core.logging import logContext
from packforge.modifiers.registry import ModifierRegistry, defaultModifierRegistry
from packforge.packs.types import Pack
from packforge.repositories.base import Repository
from packforge.resolution import DependencyResolver
from packforge.versioning import Version, parseVersion
from .ignore import BundleIgnore, parseBundleIgnores
from .pipeline import ModifierPipeline
from .result import BundleResult

logger = logging.getLogger(__name__)

__all__ = ["Bundler", "bundle"]



class Bundler:
    """
    Resolves a root pack and runs the modifier pipeline over its build order.

    A Bundler keeps no state between bundle() calls: modifiers are created
    fresh from the registry every time.
    """

    def __init__(self, registry: ModifierRegistry | None = None, *, repositories: Sequence[Repository] = ()) -> None:
        self.registry = registry if registry is not None else defaultModifierRegistry()
        self.repositories: tuple[Repository, ...] = tuple(repositories)

    def bundle(
        self,
        rootPack: Pack,
        targetVersion: Version | str,
        *,
        repositories: Sequence[Repository] | None = None,
        ignore: Iterable[BundleIgnore | str] = frozenset(),
        ignoreErrors: bool = False,
    ) -> BundleResult:
        target = parseVersion(targetVersion)
        ignored = parseBundleIgnores(ignore)
        searchIn = self.repositories if repositories is None else tuple(repositories)

        with logContext(packId=str(rootPack.identifier)):
            logger.info(
                "Bundling %s for %s (%d repositories%s)",
                rootPack, target, len(searchIn),
                f", ignoring {', '.join(sorted(feature.value for feature in ignored))}" if ignored else "",
            )

            resolution = DependencyResolver(searchIn, ignoreErrors=ignoreErrors).resolve(rootPack)

            modifiers = self.registry.createActive(ignored)
            pipeline = ModifierPipeline(modifiers, target, ignoreErrors=ignoreErrors)
            output = pipeline.run(resolution.order)

            icon = None if BundleIgnore.ICON in ignored else rootPack.icon
            result = BundleResult(
                rootIdentifier=rootPack.identifier,
                rootVersion=rootPack.version,
                targetVersion=target,
                description=rootPack.description,
                buildOrder=resolution.identifiers(),
                modifiers={modifier.id: modifier for modifier in modifiers},
                mergedAssets=output.mergedAssets,
                icon=icon,
                warnings=resolution.warnings + tuple(output.warnings),
            )
            logger.info(
                "Bundled %s: %d packs, %d assets, %d warnings",
                rootPack, len(result.buildOrder), len(result.mergedAssets), len(result.warnings),
            )
            return result



def bundle(
    rootPack: Pack,
    targetVersion: Version | str,
    repositories: Sequence[Repository] = (),
    ignore: Iterable[BundleIgnore | str] = frozenset(),
    ignoreErrors: bool = False,
    *,
    registry: ModifierRegistry | None = None,
) -> BundleResult:
    """
    Resolve `rootPack` against `repositories` and build its BundleResult.

    Without ignoreErrors the first resolution or modifier error is raised and
    nothing is returned. With it, errors become BundleResult.warnings.
    """
    return Bundler(registry, repositories=repositories).bundle(
        rootPack,
        targetVersion,
        ignore=ignore,
        ignoreErrors=ignoreErrors,
    )
