# packforge/modifiers/models.py
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Any, ClassVar, Mapping

from pydantic import BaseModel, ConfigDict, field_validator

from packforge.app.settings import settingsInt
from packforge.core.jsonutils import canonicalJsonBytes
from packforge.packs.types import Pack, ResourcePath, parseResourcePath
from packforge.versioning import Version
from .base import Modifier, ModifierContext

__all__ = ["CustomItemDeclaration", "CustomModel", "ModelsModifier", "ITEM_DEFINITIONS_SINCE"]



CUSTOM_ITEMS_FOLDER = "custom_items"

# First game version that reads item definitions from items/<item>.json
ITEM_DEFINITIONS_SINCE = Version(1, 21, 4)



class CustomItemDeclaration(BaseModel):
    """Contents of <namespace>:custom_items/<name>.json."""
    model_config = ConfigDict(extra="forbid")

    item: str
    model: str
    customModelData: int | None = None

    @field_validator("item", "model")
    @classmethod
    def _resourceReference(cls, value: str) -> str:
        parseResourcePath(value)
        return value.strip()

    @field_validator("customModelData")
    @classmethod
    def _positive(cls, value: int | None) -> int | None:
        if value is not None and value <= 0:
            raise ValueError("customModelData must be positive")
        return value



@dataclass(slots=True)
class CustomModel:
    source: ResourcePath
    # Base item, e.g. minecraft:item/stick is written as minecraft:stick
    item: ResourcePath
    model: ResourcePath
    customModelData: int | None = None
    explicitData: bool = False



class ModelsModifier(Modifier):
    """
    Attaches custom item models to vanilla items through custom model data.

    The output format depends on the target version: item model overrides
    (models/item/<item>.json) before 1.21.4, item definitions with a
    range_dispatch (items/<item>.json) from 1.21.4 on.
    """
    id: ClassVar[str] = "models"

    def __init__(self) -> None:
        super().__init__()
        self.models: dict[ResourcePath, CustomModel] = {}
        self.firstCustomModelData = settingsInt("models.firstCustomModelData", 1)

    def claims(self, path: ResourcePath) -> bool:
        return path.startswith(CUSTOM_ITEMS_FOLDER) and path.suffix == ".json"

    def visitPack(self, pack: Pack, assets: Mapping[ResourcePath, bytes], context: ModifierContext) -> None:
        for path in sorted(assets):
            declaration = self.readDeclaration(CustomItemDeclaration, path, assets[path], context)
            if declaration is None:
                continue
            key = ResourcePath(path.namespace, path.path[len(CUSTOM_ITEMS_FOLDER) + 1:-len(path.suffix)])
            if key in self.models:
                self.logger.debug("Custom model %s redefined by %s", key, pack)
            self.models[key] = CustomModel(
                source=path,
                item=parseResourcePath(declaration.item),
                model=parseResourcePath(declaration.model, defaultNamespace=path.namespace),
                customModelData=declaration.customModelData,
                explicitData=declaration.customModelData is not None,
            )

    # ----- Finalize -----

    def _assignModelData(self, context: ModifierContext) -> dict[ResourcePath, list[CustomModel]]:
        byItem: dict[ResourcePath, list[CustomModel]] = defaultdict(list)
        for key in sorted(self.models):
            byItem[self.models[key].item].append(self.models[key])

        for item, models in byItem.items():
            taken: dict[int, CustomModel] = {}
            for model in models:
                if not model.explicitData or model.customModelData is None:
                    continue
                owner = taken.get(model.customModelData)
                if owner is not None:
                    self.rejectInput(
                        context, model.source,
                        f"custom model data {model.customModelData} for {item} is already used by {owner.source}",
                    )
                    model.customModelData = None
                    model.explicitData = False
                    continue
                taken[model.customModelData] = model

            nextData = self.firstCustomModelData
            for model in models:
                if model.customModelData is not None:
                    continue
                while nextData in taken:
                    nextData += 1
                model.customModelData = nextData
                taken[nextData] = model
                nextData += 1

            models.sort(key=lambda entry: entry.customModelData or 0)
        return byItem

    def finalize(self, context: ModifierContext) -> None:
        if not self.models:
            return

        byItem = self._assignModelData(context)
        useItemDefinitions = context.targetVersion >= ITEM_DEFINITIONS_SINCE
        for item in sorted(byItem):
            models = byItem[item]
            if useItemDefinitions:
                path = ResourcePath(item.namespace, f"items/{item.path}.json")
                content = _itemDefinition(item, models)
            else:
                path = ResourcePath(item.namespace, f"models/item/{item.path}.json")
                content = _itemModelOverrides(item, models)
            context.emit(path, canonicalJsonBytes(content))

        self.logger.debug(
            "Wrote custom models for %d items (%s format)",
            len(byItem), "item definition" if useItemDefinitions else "model override",
        )

    def customModelDataFor(self, key: ResourcePath) -> int | None:
        model = self.models.get(key)
        return model.customModelData if model is not None else None



def _itemModelOverrides(item: ResourcePath, models: list[CustomModel]) -> dict[str, Any]:
    return {
        "parent": "minecraft:item/generated",
        "textures": {"layer0": f"{item.namespace}:item/{item.path}"},
        "overrides": [
            {"predicate": {"custom_model_data": model.customModelData}, "model": str(model.model)}
            for model in models
        ],
    }



def _itemDefinition(item: ResourcePath, models: list[CustomModel]) -> dict[str, Any]:
    return {
        "model": {
            "type": "minecraft:range_dispatch",
            "property": "minecraft:custom_model_data",
            "entries": [
                {"threshold": model.customModelData, "model": {"type": "minecraft:model", "model": str(model.model)}}
                for model in models
            ],
            "fallback": {"type": "minecraft:model", "model": f"{item.namespace}:item/{item.path}"},
        }
    }
