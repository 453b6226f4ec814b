"""Metamodel module generator."""

from __future__ import annotations

from metagen.generators.base import BaseGenerator
from metagen.generators.context import GeneratedArtifact


class MetamodelGenerator(BaseGenerator):
    """Render a GeneratedArtifact as a Python module."""

    template_name = "metamodel.py.j2"

    def generate(self, artifact: GeneratedArtifact) -> str:
        """Return the module source for ``artifact``."""
        return self.render(
            header=self.header(artifact.source_type_ref),
            imports=artifact.collect_imports(),
            artifact=artifact,
            bases=", ".join(s.render() for s in artifact.supertypes),
        )
