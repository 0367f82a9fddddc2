# packforge/core/logging/util.py
from __future__ import annotations

import logging

__all__ = ["getModifierLogger"]



def getModifierLogger(modifierId: str) -> logging.Logger:
    return logging.getLogger(f"packforge.modifiers.{str(modifierId).strip()}")
