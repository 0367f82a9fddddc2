# packforge/modifiers/multisprites.py
from __future__ import annotations

from dataclasses import dataclass, field
from io import BytesIO
from typing import ClassVar, Mapping

from PIL import Image, UnidentifiedImageError
from pydantic import BaseModel, ConfigDict, Field, field_validator

from packforge.packs.types import Pack, ResourcePath, parseResourcePath
from .base import Modifier, ModifierContext

__all__ = ["SpriteRegion", "MultiSpriteDeclaration", "SpriteSheet", "MultiSpritesModifier"]



MULTISPRITES_FOLDER = "multisprites"
_SUFFIX_CHARS = set("abcdefghijklmnopqrstuvwxyz0123456789_.-")



class SpriteRegion(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    x: int = Field(ge=0)
    y: int = Field(ge=0)
    width: int = Field(gt=0)
    height: int = Field(gt=0)

    @property
    def box(self) -> tuple[int, int, int, int]:
        return (self.x, self.y, self.x + self.width, self.y + self.height)



class MultiSpriteDeclaration(BaseModel):
    """Contents of <namespace>:multisprites/<name>.json."""
    model_config = ConfigDict(extra="forbid")

    source: str
    output: str | None = None
    sprites: dict[str, SpriteRegion]

    @field_validator("source")
    @classmethod
    def _sourcePath(cls, value: str) -> str:
        parseResourcePath(value)
        return value.strip()

    @field_validator("output")
    @classmethod
    def _outputFolder(cls, value: str | None) -> str | None:
        if value is None:
            return None
        folder = value.strip().strip("/")
        if not folder:
            raise ValueError("output folder cannot be empty")
        return folder

    @field_validator("sprites")
    @classmethod
    def _suffixes(cls, value: dict[str, SpriteRegion]) -> dict[str, SpriteRegion]:
        if not value:
            raise ValueError("at least one sprite is required")
        for suffix in value:
            if not suffix or not set(suffix) <= _SUFFIX_CHARS:
                raise ValueError(f"invalid sprite suffix {suffix!r} (expected [a-z0-9_.-]+)")
        return value



@dataclass(slots=True)
class SpriteSheet:
    declaration: ResourcePath
    source: ResourcePath
    outputFolder: str
    sprites: dict[str, SpriteRegion] = field(default_factory=dict)
    # Filled in by finalize()
    outputs: tuple[ResourcePath, ...] = ()

    def outputPath(self, suffix: str) -> ResourcePath:
        return ResourcePath(self.source.namespace, f"{self.outputFolder}/{self.source.stem}_{suffix}.png")



class MultiSpritesModifier(Modifier):
    """
    Slices sprite sheets into individual textures.

    The source image is read from the merged asset tree at finalize time, so a
    sheet declared in one pack may point at an image shipped by another.
    """
    id: ClassVar[str] = "multisprites"

    def __init__(self) -> None:
        super().__init__()
        self.sprites: dict[ResourcePath, SpriteSheet] = {}

    def claims(self, path: ResourcePath) -> bool:
        return path.startswith(MULTISPRITES_FOLDER) and path.suffix == ".json"

    def visitPack(self, pack: Pack, assets: Mapping[ResourcePath, bytes], context: ModifierContext) -> None:
        for path in sorted(assets):
            declaration = self.readDeclaration(MultiSpriteDeclaration, path, assets[path], context)
            if declaration is None:
                continue
            source = parseResourcePath(declaration.source, defaultNamespace=path.namespace)
            outputFolder = declaration.output if declaration.output is not None else source.folder
            if not outputFolder:
                self.rejectInput(context, path, f"source {source} has no folder; set 'output'")
                continue

            sheet = SpriteSheet(
                declaration=path,
                source=source,
                outputFolder=outputFolder,
                sprites=dict(declaration.sprites),
            )
            try:
                for suffix in sheet.sprites:
                    sheet.outputPath(suffix)
            except ValueError as err:
                self.rejectInput(context, path, f"invalid output path: {err}")
                continue

            key = ResourcePath(path.namespace, path.path[len(MULTISPRITES_FOLDER) + 1:-len(path.suffix)])
            if key in self.sprites:
                self.logger.debug("Sprite sheet %s redefined by %s", key, pack)
            self.sprites[key] = sheet

    def finalize(self, context: ModifierContext) -> None:
        for key in sorted(self.sprites):
            sheet = self.sprites[key]
            content = context.readAsset(sheet.source)
            if content is None:
                self.rejectInput(context, sheet.declaration, f"source image {sheet.source} not found")
                continue
            try:
                with Image.open(BytesIO(content)) as opened:
                    image = opened.convert("RGBA")
            except (UnidentifiedImageError, OSError) as err:
                self.rejectInput(context, sheet.declaration, f"cannot decode {sheet.source}: {err}")
                continue

            outputs: list[ResourcePath] = []
            for suffix in sorted(sheet.sprites):
                region = sheet.sprites[suffix]
                left, top, right, bottom = region.box
                if right > image.width or bottom > image.height:
                    self.rejectInput(
                        context, sheet.declaration,
                        f"sprite '{suffix}' {region.box} is outside {sheet.source} ({image.width}x{image.height})",
                    )
                    continue
                outputPath = sheet.outputPath(suffix)
                context.emit(outputPath, _encodePng(image.crop(region.box)))
                outputs.append(outputPath)
            sheet.outputs = tuple(outputs)
            self.logger.debug("Sliced %s into %d sprites", sheet.source, len(outputs))



def _encodePng(image: Image.Image) -> bytes:
    buffer = BytesIO()
    image.save(buffer, "PNG")
    return buffer.getvalue()
