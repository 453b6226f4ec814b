"""Aggregate registry generator.

Generates one registry module per namespace. The registry maps every
aggregated source class to an instance of its generated metamodel:

    from p.p_aggregator import instance

    instance.of(Person)  # -> PersonModel()
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from metagen.generators.base import BaseGenerator
from metagen.spec.models import SourceUnit, to_snake_case

ROOT_NAMESPACE_NAME = "Root"


def aggregator_name(namespace: str | None) -> str:
    """Return the registry class name for a namespace.

    Handles:
        - "p" -> "PAggregator"
        - "shop.order_items" -> "OrderItemsAggregator"
        - "" -> "RootAggregator"
    """
    last = (namespace or "").rpartition(".")[2]
    if not last:
        return f"{ROOT_NAMESPACE_NAME}Aggregator"
    pascal = "".join(part[:1].upper() + part[1:] for part in last.split("_") if part)
    return f"{pascal}Aggregator"


@dataclass(frozen=True)
class RegistryEntry:
    """A single source class -> metamodel mapping."""

    source_module: str
    source_name: str
    model_module: str
    model_name: str

    @classmethod
    def from_unit(cls, unit: SourceUnit) -> RegistryEntry:
        return cls(
            source_module=unit.source_module,
            source_name=unit.source_name,
            model_module=unit.model_module,
            model_name=unit.name,
        )


@dataclass
class RegistryContext:
    """Complete context for generating one aggregate registry module."""

    name: str
    namespace: str
    entries: list[RegistryEntry] = field(default_factory=list)

    @property
    def module(self) -> str:
        module = to_snake_case(self.name)
        return f"{self.namespace}.{module}" if self.namespace else module

    def collect_imports(self) -> dict[str, list[str]]:
        """Group every needed import by module, sorted for stable output."""
        grouped: dict[str, set[str]] = {
            "types": {"MappingProxyType"},
            "typing": {"Any"},
            "metagen.runtime": {"MetaModel"},
        }
        for entry in self.entries:
            grouped.setdefault(entry.source_module, set()).add(entry.source_name.split(".")[0])
            grouped.setdefault(entry.model_module, set()).add(entry.model_name)
        return {module: sorted(grouped[module]) for module in sorted(grouped)}


class AggregatorGenerator(BaseGenerator):
    """Build and render the aggregate registry of a namespace."""

    template_name = "aggregator.py.j2"

    def build(self, namespace: str, units: Sequence[SourceUnit]) -> RegistryContext:
        """Build the registry context from the units to aggregate."""
        return RegistryContext(
            name=aggregator_name(namespace),
            namespace=namespace,
            entries=[RegistryEntry.from_unit(unit) for unit in units],
        )

    def generate(self, registry: RegistryContext) -> str:
        """Return the module source for ``registry``."""
        label = f"namespace {registry.namespace}" if registry.namespace else "the root namespace"
        return self.render(
            header=self.header(label),
            imports=registry.collect_imports(),
            registry=registry,
            label=label,
        )
