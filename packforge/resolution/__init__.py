# packforge/resolution/__init__.py
from .resolver import Resolution, DependencyResolver, resolve

__all__ = ["Resolution", "DependencyResolver", "resolve"]
