# packforge/modifiers/registry.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterable

from .base import Modifier
from .glyphs import GlyphsModifier
from .models import ModelsModifier
from .multisprites import MultiSpritesModifier

if TYPE_CHECKING:
    from packforge.bundling.ignore import BundleIgnore

logger = logging.getLogger(__name__)

__all__ = [
    "ModifierFactory",
    "ModifierRegistration",
    "ModifierRegistry",
    "defaultModifierRegistry",
]



ModifierFactory = Callable[[], Modifier]



@dataclass(frozen=True, slots=True)
class ModifierRegistration:
    id: str
    factory: ModifierFactory



class ModifierRegistry:
    """
    Explicit, ordered set of modifier factories.

    The order is the finalize order. Duplicate IDs are rejected when the
    registry is built, not when a bundle runs.
    """

    def __init__(self, registrations: Iterable[ModifierRegistration | type[Modifier]] = ()) -> None:
        self._registrations: list[ModifierRegistration] = []
        for entry in registrations:
            if isinstance(entry, ModifierRegistration):
                self.register(entry.id, entry.factory)
            else:
                self.register(entry.id, entry)

    # ----- Registration -----

    def register(self, modifierId: str, factory: ModifierFactory) -> None:
        modifierId = str(modifierId).strip()
        if not modifierId:
            raise ValueError("Modifier ID cannot be empty")
        if modifierId in self.ids():
            raise ValueError(f"Modifier '{modifierId}' is already registered")
        self._registrations.append(ModifierRegistration(modifierId, factory))

    def ids(self) -> tuple[str, ...]:
        return tuple(registration.id for registration in self._registrations)

    def __contains__(self, modifierId: object) -> bool:
        return modifierId in self.ids()

    def __len__(self) -> int:
        return len(self._registrations)

    # ----- Instantiation -----

    def createActive(self, ignore: Iterable[BundleIgnore | str] = ()) -> list[Modifier]:
        """
        Fresh instances of every registered modifier whose ID is not ignored.
        Instances never outlive one bundle() call.
        """
        ignoredIds = {str(getattr(feature, "value", feature)) for feature in ignore}
        modifiers: list[Modifier] = []
        for registration in self._registrations:
            if registration.id in ignoredIds:
                logger.debug("Modifier '%s' skipped (ignored)", registration.id)
                continue
            modifier = registration.factory()
            if modifier.id != registration.id:
                raise ValueError(
                    f"Factory registered as '{registration.id}' produced modifier '{modifier.id}'"
                )
            modifiers.append(modifier)
        return modifiers



def defaultModifierRegistry() -> ModifierRegistry:
    """A new registry with the builtin modifiers: glyphs, models, multisprites."""
    return ModifierRegistry([GlyphsModifier, ModelsModifier, MultiSpritesModifier])
