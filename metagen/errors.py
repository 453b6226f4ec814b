"""Error types raised by the generation pipeline.

Every error that aborts an invocation derives from MetagenError so that the
CLI can report it without a traceback.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError


class MetagenError(Exception):
    """Base class for all metagen failures."""


class CustomizerResolutionError(MetagenError):
    """Raised when a customizer plugin cannot be located or instantiated."""

    def __init__(self, reference: Any, message: str, unit: str | None = None) -> None:
        self.reference = reference
        self.message = message
        self.unit = unit
        text = f"Customizer '{_describe(reference)}': {message}"
        super().__init__(f"{unit}: {text}" if unit else text)


class PersistenceError(MetagenError):
    """Raised when the output sink cannot create or write a target."""

    def __init__(self, target: str, message: str) -> None:
        self.target = target
        self.message = message
        super().__init__(f"{target}: {message}")


class GenerationError(MetagenError):
    """Raised when an artifact for a source unit cannot be synthesized."""

    def __init__(self, unit: str, message: str) -> None:
        self.unit = unit
        self.message = message
        super().__init__(f"{unit}: {message}")


class ExtractionError(MetagenError):
    """Raised by the extractor when a marked class cannot be modeled."""

    def __init__(self, type_ref: str, message: str) -> None:
        self.type_ref = type_ref
        self.message = message
        super().__init__(f"{type_ref}: {message}")


class ScanError(MetagenError):
    """Raised when a configured module cannot be imported or read for scanning."""

    def __init__(self, module: str, message: str) -> None:
        self.module = module
        self.message = message
        super().__init__(f"Module '{module}': {message}")


class ConfigError(MetagenError):
    """Raised when the generator configuration is invalid."""

    def __init__(self, message: str, file_path: str | None = None) -> None:
        self.file_path = file_path
        self.message = message
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.file_path:
            return f"{self.file_path}: {self.message}"
        return self.message


def _describe(reference: Any) -> str:
    if isinstance(reference, type):
        return f"{reference.__module__}.{reference.__qualname__}"
    describe = getattr(reference, "describe", None)
    if callable(describe):
        return describe()
    return str(reference)


def format_pydantic_error(error: ValidationError, context: str = "") -> str:
    """Format Pydantic validation error for human readability."""
    messages = []
    for err in error.errors():
        loc = ".".join(str(x) for x in err["loc"])
        msg = err["msg"]
        if context and loc:
            messages.append(f"{context}.{loc}: {msg}")
        elif context:
            messages.append(f"{context}: {msg}")
        else:
            messages.append(f"{loc}: {msg}")
    return "\n".join(messages)
