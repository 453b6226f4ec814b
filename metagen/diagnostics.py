"""Diagnostic sink for human-readable generation messages.

Messages are recorded for the caller and forwarded to logging. Nothing in
the pipeline branches on what was reported here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Literal

logger = logging.getLogger(__name__)

Kind = Literal["note", "warning", "error"]

_LEVELS: dict[str, int] = {
    "note": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass
class Diagnostic:
    """Represents a single reported message."""

    kind: Kind
    message: str
    element: str | None = None

    def __str__(self) -> str:
        if self.element:
            return f"{self.kind}: {self.element}: {self.message}"
        return f"{self.kind}: {self.message}"


@dataclass
class Diagnostics:
    """Collects diagnostics reported during one invocation."""

    messages: list[Diagnostic] = field(default_factory=list)

    def report(self, kind: Kind, message: str, element: str | None = None) -> None:
        diagnostic = Diagnostic(kind=kind, message=message, element=element)
        self.messages.append(diagnostic)
        logger.log(_LEVELS[kind], "%s", diagnostic)

    def note(self, message: str, element: str | None = None) -> None:
        self.report("note", message, element)

    def warning(self, message: str, element: str | None = None) -> None:
        self.report("warning", message, element)

    def error(self, message: str, element: str | None = None) -> None:
        self.report("error", message, element)

    def has_errors(self) -> bool:
        return any(d.kind == "error" for d in self.messages)
