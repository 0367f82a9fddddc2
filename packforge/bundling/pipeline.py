# packforge/bundling/pipeline.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from packforge.core.errors import BundleWarning, BundlingError, DuplicateOutputPath
from packforge.core.logging import logContext
from packforge.modifiers.base import Modifier, ModifierContext
from packforge.packs.types import Pack, ResourcePath
from packforge.versioning import Version

logger = logging.getLogger(__name__)

__all__ = ["PipelineOutput", "ModifierPipeline"]



@dataclass(slots=True)
class PipelineOutput:
    mergedAssets: dict[ResourcePath, bytes] = field(default_factory=dict)
    # Output path -> ID of the modifier that produced it
    owners: dict[ResourcePath, str] = field(default_factory=dict)
    warnings: list[BundleWarning] = field(default_factory=list)



class _PipelineContext(ModifierContext):
    """Per-modifier view onto the shared merge state of one pipeline run."""

    def __init__(self, pipeline: ModifierPipeline, modifier: Modifier, output: PipelineOutput) -> None:
        self.pipeline = pipeline
        self.modifier = modifier
        self.output = output
        self.targetVersion = pipeline.targetVersion
        self.ignoreErrors = pipeline.ignoreErrors

    def emit(self, path: ResourcePath, content: bytes) -> None:
        if not isinstance(content, (bytes, bytearray)):
            raise TypeError(f"Modifier '{self.modifier.id}' emitted {type(content).__name__} for {path}, expected bytes")
        owner = self.output.owners.get(path)
        if owner is not None and owner != self.modifier.id:
            self.report(DuplicateOutputPath(path, owner, self.modifier.id))
            logger.debug("Output %s: '%s' overwrites '%s'", path, self.modifier.id, owner)
        elif path in self.output.mergedAssets and owner is None:
            logger.debug("Output %s replaces raw asset", path)
        self.output.owners[path] = self.modifier.id
        self.output.mergedAssets[path] = bytes(content)

    def readAsset(self, path: ResourcePath) -> bytes | None:
        return self.output.mergedAssets.get(path)

    def report(self, error: BundlingError) -> None:
        self.pipeline.report(error, self.output)



class ModifierPipeline:
    """
    Runs active modifiers over packs in build order and merges the results.

    Assets claimed by an active modifier go to that modifier only (first
    claiming modifier in registry order); everything else is merged raw with
    later packs overwriting earlier ones.
    """

    def __init__(
        self,
        modifiers: Sequence[Modifier],
        targetVersion: Version,
        *,
        ignoreErrors: bool = False,
    ) -> None:
        self.modifiers: tuple[Modifier, ...] = tuple(modifiers)
        self.targetVersion = targetVersion
        self.ignoreErrors = ignoreErrors

    def report(self, error: BundlingError, output: PipelineOutput) -> None:
        if not self.ignoreErrors:
            raise error
        logger.warning("Ignoring bundling error: %s", error)
        output.warnings.append(BundleWarning(error))

    def claimantOf(self, path: ResourcePath) -> Modifier | None:
        for modifier in self.modifiers:
            if modifier.claims(path):
                return modifier
        return None

    def run(self, order: Iterable[Pack]) -> PipelineOutput:
        output = PipelineOutput()
        contexts = {modifier.id: _PipelineContext(self, modifier, output) for modifier in self.modifiers}

        for pack in order:
            with logContext(packId=str(pack.identifier)):
                claimed: dict[str, dict[ResourcePath, bytes]] = {modifier.id: {} for modifier in self.modifiers}
                rawCount = 0
                for path in sorted(pack.assets):
                    claimant = self.claimantOf(path)
                    if claimant is None:
                        output.mergedAssets[path] = pack.assets[path]
                        rawCount += 1
                    else:
                        claimed[claimant.id][path] = pack.assets[path]

                logger.debug("Merged %d raw assets from %s", rawCount, pack)
                for modifier in self.modifiers:
                    assets = claimed[modifier.id]
                    if not assets:
                        continue
                    with logContext(modifierId=modifier.id):
                        modifier.visitPack(pack, assets, contexts[modifier.id])

        for modifier in self.modifiers:
            with logContext(modifierId=modifier.id):
                modifier.finalize(contexts[modifier.id])

        return output
