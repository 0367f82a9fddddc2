# packforge/modifiers/__init__.py
from .base import Modifier, ModifierContext
from .glyphs import GlyphDefinition, GlyphsModifier
from .models import CustomModel, ModelsModifier
from .multisprites import MultiSpritesModifier, SpriteSheet
from .registry import ModifierRegistration, ModifierRegistry, defaultModifierRegistry

__all__ = [
    "Modifier",
    "ModifierContext",
    "GlyphDefinition",
    "GlyphsModifier",
    "CustomModel",
    "ModelsModifier",
    "MultiSpritesModifier",
    "SpriteSheet",
    "ModifierRegistration",
    "ModifierRegistry",
    "defaultModifierRegistry",
]
