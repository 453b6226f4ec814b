"""Artifact context built for code generation.

A GeneratedArtifact is the structural description of one generated class.
ArtifactBuilder creates it from a SourceUnit and lets customizers reshape it
before it is rendered to source.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
import keyword
from typing import TYPE_CHECKING, Any

from metagen.errors import GenerationError
from metagen.spec.models import to_snake_case

if TYPE_CHECKING:
    from metagen.customizers.base import MetaCustomizer
    from metagen.spec.models import SourceUnit

METAMODEL_REF = "metagen.runtime.MetaModel"
META_FIELD_REF = "metagen.runtime.MetaField"

# Names MetaModel defines itself; descriptors with these names get a "_" suffix
RESERVED_NAMES = frozenset({"source_type", "fields", "type", "field", "to_dict"})


@dataclass(frozen=True)
class TypeName:
    """A dotted reference to a class, optionally parameterized.

    Attributes:
        raw: Fully-qualified name of the class (e.g., "metagen.runtime.MetaModel")
        args: Source text of the type arguments (e.g., ("Person",))
    """

    raw: str
    args: tuple[str, ...] = ()

    @classmethod
    def of(cls, target: type | str, *args: str) -> TypeName:
        """Build a TypeName from a class object or a dotted name."""
        if isinstance(target, type):
            return cls(f"{target.__module__}.{target.__qualname__}", tuple(args))
        return cls(target, tuple(args))

    @property
    def module(self) -> str:
        return self.raw.rpartition(".")[0]

    @property
    def local_name(self) -> str:
        return self.raw.rpartition(".")[2]

    @property
    def is_parameterized(self) -> bool:
        return bool(self.args)

    def render(self) -> str:
        """Source text used in the class bases."""
        if self.args:
            return f"{self.local_name}[{', '.join(self.args)}]"
        return self.local_name


@dataclass
class FieldContext:
    """Context for a single field descriptor in a generated metamodel.

    Attributes:
        name: Name of the descriptor on the generated class
        attribute: Name of the attribute on the source class
        type_ref: Python type annotation of the attribute
        readonly: Whether to omit the setter
    """

    name: str
    attribute: str
    type_ref: str
    readonly: bool = False


@dataclass
class ConstantContext:
    """A class-level constant; ``value`` is source text."""

    name: str
    value: str


@dataclass
class MethodContext:
    """A method of the generated class.

    ``params`` excludes ``self``; ``body`` holds unindented source lines.
    """

    name: str
    params: list[str] = field(default_factory=list)
    return_type: str = "None"
    body: list[str] = field(default_factory=lambda: ["pass"])
    docstring: str | None = None


@dataclass
class GeneratedArtifact:
    """Complete context for generating one metamodel module."""

    name: str
    namespace: str
    source_type_ref: str
    source_module: str
    source_name: str
    docstring: str = ""
    supertypes: list[TypeName] = field(default_factory=list)
    fields: list[FieldContext] = field(default_factory=list)
    constants: list[ConstantContext] = field(default_factory=list)
    methods: list[MethodContext] = field(default_factory=list)
    imports: set[tuple[str, str]] = field(default_factory=set)

    @property
    def module(self) -> str:
        """Dotted module path the artifact is written to."""
        module = to_snake_case(self.name)
        return f"{self.namespace}.{module}" if self.namespace else module

    def add_import(self, module: str, name: str) -> None:
        self.imports.add((module, name))

    def add_supertype(self, target: type | str, *args: str) -> TypeName:
        """Append a base class, importing it."""
        type_name = TypeName.of(target, *args)
        self.supertypes.append(type_name)
        return type_name

    def remove_supertype(self, target: type | str) -> None:
        """Drop every base class whose raw reference matches ``target``."""
        raw = TypeName.of(target).raw
        self.supertypes = [s for s in self.supertypes if s.raw != raw]

    def find_field(self, attribute: str) -> FieldContext | None:
        """Find the descriptor generated for a source attribute."""
        for field_ctx in self.fields:
            if field_ctx.attribute == attribute:
                return field_ctx
        return None

    def collect_imports(self) -> dict[str, list[str]]:
        """Group every needed import by module, sorted for stable output."""
        imports = set(self.imports)
        imports.update((s.module, s.local_name) for s in self.supertypes if s.module)

        grouped: dict[str, set[str]] = {}
        for module, name in imports:
            if module in ("", "builtins", self.module):
                continue
            grouped.setdefault(module, set()).add(name)
        return {module: sorted(grouped[module]) for module in sorted(grouped)}


def is_metamodel(artifact: GeneratedArtifact) -> bool:
    """Check whether the artifact declares the metamodel capability.

    Only direct bases count; both ``MetaModel`` and ``MetaModel[...]`` match.
    """
    return any(supertype.raw == METAMODEL_REF for supertype in artifact.supertypes)


def descriptor_name(attribute: str) -> str:
    """Name of the descriptor generated for a source attribute."""
    if attribute in RESERVED_NAMES or keyword.iskeyword(attribute):
        return f"{attribute}_"
    return attribute


class ArtifactBuilder:
    """Builds GeneratedArtifact from SourceUnit.

    The result depends only on the unit and the customizer sequence:
    - Declares MetaModel[<source class>] as the single base
    - Adds one MetaField descriptor per attribute, in declaration order
    - Applies customizers in order
    """

    def build(
        self,
        unit: SourceUnit,
        customizers: Sequence[MetaCustomizer] = (),
    ) -> GeneratedArtifact:
        """Build the artifact for ``unit``.

        Raises:
            GenerationError: If a customizer fails
        """
        source_root = unit.source_name.split(".")[0]
        artifact = GeneratedArtifact(
            name=unit.name,
            namespace=unit.namespace,
            source_type_ref=unit.source_type_ref,
            source_module=unit.source_module,
            source_name=unit.source_name,
            docstring=f"Metamodel of {unit.source_type_ref}.",
            imports={
                (unit.source_module, source_root),
                _split(META_FIELD_REF),
                ("types", "MappingProxyType"),
            },
        )
        artifact.add_supertype(METAMODEL_REF, unit.source_name)

        for attribute in unit.attributes:
            artifact.fields.append(
                FieldContext(
                    name=descriptor_name(attribute.name),
                    attribute=attribute.name,
                    type_ref=attribute.type_ref,
                    readonly=attribute.readonly,
                )
            )
            artifact.imports.update(attribute.imports)

        for customizer in customizers:
            try:
                customizer.customize(unit, artifact)
            except Exception as e:
                msg = f"Customizer {type(customizer).__qualname__} failed: {e}"
                raise GenerationError(unit.source_type_ref, msg) from e

        return artifact


def _split(ref: str) -> tuple[str, str]:
    module, _, name = ref.rpartition(".")
    return module, name


def render_value(value: Any) -> str:
    """Source text of a constant value."""
    return repr(value)
