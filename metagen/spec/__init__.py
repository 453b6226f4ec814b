# noqa: D104
"""Marker, option models and extraction of marked classes."""

from metagen.spec.extractor import AttributeExtractor
from metagen.spec.loader import load_marked_types
from metagen.spec.marker import extend, get_meta, is_marked, meta, opt
from metagen.spec.models import AttributeSpec, CustomizerSpec, MetaOptions, Opt, SourceUnit
from metagen.spec.types import DirectRef, SymbolRef, TypeRef

__all__ = [
    "meta",
    "extend",
    "opt",
    "get_meta",
    "is_marked",
    "load_marked_types",
    "AttributeExtractor",
    "AttributeSpec",
    "CustomizerSpec",
    "MetaOptions",
    "Opt",
    "SourceUnit",
    "DirectRef",
    "SymbolRef",
    "TypeRef",
]
