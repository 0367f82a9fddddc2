# packforge/modifiers/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Mapping, TypeVar

import json5
from pydantic import BaseModel, ValidationError

from packforge.core.errors import BundlingError, InvalidModifierInput
from packforge.core.logging import getModifierLogger
from packforge.packs.types import Pack, ResourcePath
from packforge.versioning import Version

__all__ = ["ModifierContext", "Modifier"]

ModelT = TypeVar("ModelT", bound=BaseModel)



class ModifierContext(ABC):
    """
    What a modifier sees of the bundle under construction.

    One context exists per modifier per bundle() call, so emitted outputs are
    attributed to that modifier.
    """

    targetVersion: Version
    ignoreErrors: bool

    @abstractmethod
    def emit(self, path: ResourcePath, content: bytes) -> None:
        """Writes an output entry into the merged asset tree."""

    @abstractmethod
    def readAsset(self, path: ResourcePath) -> bytes | None:
        """Reads the current merged content at `path` (raw assets and earlier outputs)."""

    @abstractmethod
    def report(self, error: BundlingError) -> None:
        """Raises `error`, or records it as a warning in ignore-errors mode."""



class Modifier(ABC):
    """
    A stateful transform stage.

    visitPack() is called once per pack in build order with the assets this
    modifier claims; finalize() runs after every pack has been visited. The
    instance itself is the modifier's result object in BundleResult.modifiers.
    """

    id: ClassVar[str]

    def __init__(self) -> None:
        self.logger = getModifierLogger(self.id)

    @abstractmethod
    def claims(self, path: ResourcePath) -> bool:
        ...

    def visitPack(self, pack: Pack, assets: Mapping[ResourcePath, bytes], context: ModifierContext) -> None:
        return

    def finalize(self, context: ModifierContext) -> None:
        return

    # ----- Helpers for subclasses -----

    def rejectInput(self, context: ModifierContext, path: ResourcePath, reason: str) -> None:
        context.report(InvalidModifierInput(self.id, path, reason))

    def readDeclaration(
        self,
        model: type[ModelT],
        path: ResourcePath,
        content: bytes,
        context: ModifierContext,
    ) -> ModelT | None:
        """
        Parse a json5 declaration file into `model`.

        Returns None when the declaration was rejected in ignore-errors mode.
        """
        try:
            raw: Any = json5.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as err:
            self.rejectInput(context, path, f"not valid JSON: {err}")
            return None
        if not isinstance(raw, Mapping):
            self.rejectInput(context, path, "declaration must be a JSON object")
            return None
        try:
            return model.model_validate(dict(raw))
        except ValidationError as err:
            self.rejectInput(context, path, _summarizeValidationError(err))
            return None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r}>"



def _summarizeValidationError(err: ValidationError) -> str:
    parts = []
    for item in err.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "<root>"
        parts.append(f"{location}: {item.get('msg', 'invalid')}")
    return "; ".join(parts)
