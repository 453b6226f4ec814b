# noqa: D104
"""Build-time metamodel generator for marked Python classes."""

from metagen.customizers import MetaCustomizer, OptionsCustomizer
from metagen.errors import (
    ConfigError,
    CustomizerResolutionError,
    ExtractionError,
    GenerationError,
    MetagenError,
    PersistenceError,
    ScanError,
)
from metagen.runtime import MetaField, MetaModel
from metagen.spec import CustomizerSpec, MetaOptions, extend, meta, opt

__all__ = [
    "meta",
    "extend",
    "opt",
    "CustomizerSpec",
    "MetaOptions",
    "MetaCustomizer",
    "OptionsCustomizer",
    "MetaField",
    "MetaModel",
    "MetagenError",
    "ConfigError",
    "CustomizerResolutionError",
    "ExtractionError",
    "GenerationError",
    "PersistenceError",
    "ScanError",
]
