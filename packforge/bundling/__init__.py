# packforge/bundling/__init__.py
from .ignore import BundleIgnore, parseBundleIgnore, parseBundleIgnores
from .result import BundleResult
from .pipeline import ModifierPipeline, PipelineOutput
from .bundler import Bundler, bundle

__all__ = [
    "BundleIgnore",
    "parseBundleIgnore",
    "parseBundleIgnores",
    "BundleResult",
    "ModifierPipeline",
    "PipelineOutput",
    "Bundler",
    "bundle",
]
