"""Shared rendering support for generators."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

GENERATED_HEADER = "# AUTO-GENERATED BY metagen FROM {source} – DO NOT EDIT MANUALLY"


class BaseGenerator:
    """Base class for generators rendering Jinja2 templates to module source."""

    template_name: str = ""

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir or TEMPLATES_DIR
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
            autoescape=False,  # noqa: S701
        )

    def header(self, source: str) -> str:
        return GENERATED_HEADER.format(source=source)

    def render(self, **context: Any) -> str:
        """Render ``template_name`` with ``context``."""
        template = self.env.get_template(self.template_name)
        return template.render(**context)
