# packforge/modifiers/glyphs.py
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, ClassVar, Mapping

from pydantic import BaseModel, ConfigDict, field_validator

from packforge.app.settings import settings, settingsInt
from packforge.core.jsonutils import canonicalJsonBytes
from packforge.packs.types import Pack, ResourcePath, parseResourcePath
from .base import Modifier, ModifierContext

__all__ = ["GlyphDeclaration", "GlyphDefinition", "GlyphsModifier"]



GLYPHS_FOLDER = "glyphs"



class GlyphDeclaration(BaseModel):
    """Contents of <namespace>:glyphs/<name>.json."""
    model_config = ConfigDict(extra="forbid")

    texture: str | None = None
    height: int | None = None
    ascent: int | None = None
    char: str | None = None

    @field_validator("char")
    @classmethod
    def _singleCharacter(cls, value: str | None) -> str | None:
        if value is not None and len(value) != 1:
            raise ValueError("char must be exactly one character")
        return value

    @field_validator("height")
    @classmethod
    def _positiveHeight(cls, value: int | None) -> int | None:
        if value is not None and value <= 0:
            raise ValueError("height must be positive")
        return value



@dataclass(slots=True)
class GlyphDefinition:
    # Where the glyph was declared (json or png)
    source: ResourcePath
    # Font provider "file" reference (relative to the namespace's textures/)
    texture: ResourcePath
    height: int
    ascent: int
    # Explicit or assigned character; None until finalize() for auto glyphs
    char: str | None = None
    explicitChar: bool = False
    # Image bundled next to the declaration, emitted under textures/glyphs/
    image: bytes | None = None



class GlyphsModifier(Modifier):
    """
    Builds bitmap font providers from glyph declarations.

    Accepted inputs per glyph name:
      glyphs/<name>.json   declaration (texture, height, ascent, char)
      glyphs/<name>.png    image; used as the texture when the declaration has none
    """
    id: ClassVar[str] = "glyphs"

    def __init__(self) -> None:
        super().__init__()
        self.glyphs: dict[ResourcePath, GlyphDefinition] = {}
        self.fontPath = parseResourcePath(str(settings("glyphs.font", "minecraft:font/default.json")))
        self.firstCodepoint = settingsInt("glyphs.firstCodepoint", 0xE000)
        self.defaultHeight = settingsInt("glyphs.height", 8)
        self.defaultAscent = settingsInt("glyphs.ascent", 7)

    def claims(self, path: ResourcePath) -> bool:
        return path.startswith(GLYPHS_FOLDER) and path.suffix in (".json", ".png")

    # ----- Per-pack -----

    def visitPack(self, pack: Pack, assets: Mapping[ResourcePath, bytes], context: ModifierContext) -> None:
        declarations: dict[ResourcePath, ResourcePath] = {}
        images: dict[ResourcePath, ResourcePath] = {}
        for path in sorted(assets):
            key = ResourcePath(path.namespace, path.path[len(GLYPHS_FOLDER) + 1:-len(path.suffix)])
            if path.suffix == ".json":
                declarations[key] = path
            else:
                images[key] = path

        for key in sorted(set(declarations) | set(images)):
            declarationPath = declarations.get(key)
            imagePath = images.get(key)
            definition = self._buildDefinition(key, declarationPath, imagePath, assets, context)
            if definition is None:
                continue
            if key in self.glyphs:
                self.logger.debug("Glyph %s redefined by %s", key, pack)
            self.glyphs[key] = definition

    def _buildDefinition(
        self,
        key: ResourcePath,
        declarationPath: ResourcePath | None,
        imagePath: ResourcePath | None,
        assets: Mapping[ResourcePath, bytes],
        context: ModifierContext,
    ) -> GlyphDefinition | None:
        declaration = GlyphDeclaration()
        if declarationPath is not None:
            parsed = self.readDeclaration(GlyphDeclaration, declarationPath, assets[declarationPath], context)
            if parsed is None:
                return None
            declaration = parsed
        source = declarationPath if declarationPath is not None else imagePath
        if source is None:
            return None

        image: bytes | None = None
        if declaration.texture is not None:
            try:
                texture = parseResourcePath(declaration.texture, defaultNamespace=key.namespace)
            except ValueError as err:
                self.rejectInput(context, source, f"invalid texture: {err}")
                return None
            if imagePath is not None:
                self.logger.debug("Glyph image %s unused, %s declares texture %s", imagePath, source, texture)
        elif imagePath is not None:
            texture = ResourcePath(key.namespace, f"glyphs/{key.path}.png")
            image = assets[imagePath]
        else:
            self.rejectInput(context, source, "no texture declared and no glyph image next to it")
            return None

        height = declaration.height if declaration.height is not None else self.defaultHeight
        ascent = declaration.ascent if declaration.ascent is not None else min(self.defaultAscent, height)
        if ascent > height:
            self.rejectInput(context, source, f"ascent {ascent} is larger than height {height}")
            return None

        return GlyphDefinition(
            source=source,
            texture=texture,
            height=height,
            ascent=ascent,
            char=declaration.char,
            explicitChar=declaration.char is not None,
            image=image,
        )

    # ----- Finalize -----

    def _assignCharacters(self, context: ModifierContext) -> None:
        taken: dict[str, ResourcePath] = {}
        for key in sorted(self.glyphs):
            definition = self.glyphs[key]
            if not definition.explicitChar or definition.char is None:
                continue
            owner = taken.get(definition.char)
            if owner is not None:
                self.rejectInput(
                    context, definition.source,
                    f"character U+{ord(definition.char):04X} is already used by glyph {owner}",
                )
                # Ignore-errors mode: fall back to an assigned character
                definition.char = None
                definition.explicitChar = False
                continue
            taken[definition.char] = key

        codepoint = self.firstCodepoint
        for key in sorted(self.glyphs):
            definition = self.glyphs[key]
            if definition.char is not None:
                continue
            while chr(codepoint) in taken:
                codepoint += 1
            definition.char = chr(codepoint)
            taken[definition.char] = key
            codepoint += 1

    def _existingProviders(self, context: ModifierContext) -> list[Any]:
        existing = context.readAsset(self.fontPath)
        if existing is None:
            return []
        try:
            data = json.loads(existing.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as err:
            self.rejectInput(context, self.fontPath, f"existing font file is not valid JSON: {err}")
            return []
        providers = data.get("providers") if isinstance(data, dict) else None
        if not isinstance(providers, list):
            self.rejectInput(context, self.fontPath, "existing font file has no providers list")
            return []
        return providers

    def finalize(self, context: ModifierContext) -> None:
        if not self.glyphs:
            return

        self._assignCharacters(context)

        providers = self._existingProviders(context)
        for key in sorted(self.glyphs):
            definition = self.glyphs[key]
            if definition.image is not None:
                context.emit(
                    ResourcePath(definition.texture.namespace, f"textures/{definition.texture.path}"),
                    definition.image,
                )
            providers.append({
                "type": "bitmap",
                "file": str(definition.texture),
                "height": definition.height,
                "ascent": definition.ascent,
                "chars": [definition.char],
            })

        context.emit(self.fontPath, canonicalJsonBytes({"providers": providers}))
        self.logger.debug("Wrote %d glyph providers to %s", len(self.glyphs), self.fontPath)

    def characterFor(self, key: ResourcePath) -> str | None:
        definition = self.glyphs.get(key)
        return definition.char if definition is not None else None
