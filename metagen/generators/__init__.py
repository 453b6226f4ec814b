# noqa: D104
"""Artifact synthesis and rendering."""

from metagen.generators.aggregator import AggregatorGenerator, RegistryContext, aggregator_name
from metagen.generators.base import BaseGenerator
from metagen.generators.context import ArtifactBuilder, GeneratedArtifact, TypeName, is_metamodel
from metagen.generators.metamodel import MetamodelGenerator

__all__ = [
    "BaseGenerator",
    "ArtifactBuilder",
    "GeneratedArtifact",
    "TypeName",
    "is_metamodel",
    "MetamodelGenerator",
    "AggregatorGenerator",
    "RegistryContext",
    "aggregator_name",
]
