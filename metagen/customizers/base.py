"""Customizer plugin contract."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from metagen.generators.context import GeneratedArtifact
    from metagen.spec.models import SourceUnit


class MetaCustomizer(ABC):
    """Base class for plugins that reshape a generated metamodel.

    A customizer is instantiated once per marked class. It is constructed
    with the options mapping if its constructor takes one unannotated or
    mapping-typed positional argument, otherwise with no arguments.
    """

    @abstractmethod
    def customize(self, unit: SourceUnit, artifact: GeneratedArtifact) -> None:
        """Modify ``artifact`` in place."""


class OptionsCustomizer(MetaCustomizer):
    """Convenience base for customizers configured through options."""

    def __init__(self, options: Mapping[str, str]) -> None:
        self.options = dict(options)

    def option(self, key: str, default: str) -> str:
        return self.options.get(key, default)

    def flag(self, key: str, default: bool = False) -> bool:
        """Read a boolean option ("true"/"false", "yes"/"no", "1"/"0")."""
        raw = self.options.get(key)
        if raw is None:
            return default
        value = raw.strip().lower()
        if value in ("true", "yes", "1"):
            return True
        if value in ("false", "no", "0"):
            return False
        msg = f"Option '{key}' must be a boolean, got '{raw}'"
        raise ValueError(msg)
