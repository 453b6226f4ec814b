# noqa: D104
"""Customizer plugins and their resolution."""

from metagen.customizers.base import MetaCustomizer, OptionsCustomizer
from metagen.customizers.builtin import (
    CopyCustomizer,
    ExcludeFieldsCustomizer,
    FieldNamesCustomizer,
    StandaloneCustomizer,
)
from metagen.customizers.resolver import CustomizerResolver

__all__ = [
    "MetaCustomizer",
    "OptionsCustomizer",
    "CustomizerResolver",
    "CopyCustomizer",
    "ExcludeFieldsCustomizer",
    "FieldNamesCustomizer",
    "StandaloneCustomizer",
]
