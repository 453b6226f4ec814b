"""Customizers shipped with metagen."""

from __future__ import annotations

from collections.abc import Mapping
import keyword

from metagen.customizers.base import MetaCustomizer, OptionsCustomizer
from metagen.generators.context import (
    METAMODEL_REF,
    RESERVED_NAMES,
    ConstantContext,
    GeneratedArtifact,
    MethodContext,
    render_value,
)
from metagen.spec.models import SourceUnit


class FieldNamesCustomizer(OptionsCustomizer):
    """Add a string constant per attribute name.

    Options:
        case: "upper" (default) or "lower" for the constant names
        prefix: Prepended to every constant name (default "")

    A constant may not shadow a descriptor or another member of the
    generated class, so lower-case names usually need a prefix.
    """

    def __init__(self, options: Mapping[str, str]) -> None:
        super().__init__(options)
        self.case = self.option("case", "upper")
        if self.case not in ("upper", "lower"):
            msg = f"Option 'case' must be 'upper' or 'lower', got '{self.case}'"
            raise ValueError(msg)
        self.prefix = self.option("prefix", "")

    def customize(self, unit: SourceUnit, artifact: GeneratedArtifact) -> None:
        taken = (
            RESERVED_NAMES
            | {f.name for f in artifact.fields}
            | {c.name for c in artifact.constants}
            | {m.name for m in artifact.methods}
        )
        for attribute in unit.attributes:
            name = f"{self.prefix}{attribute.name}"
            name = name.upper() if self.case == "upper" else name.lower()
            if name in taken or keyword.iskeyword(name) or not name.isidentifier():
                msg = f"Constant '{name}' collides with a generated member or is not a valid name"
                raise ValueError(msg)
            taken = taken | {name}
            artifact.constants.append(
                ConstantContext(name=name, value=render_value(attribute.name))
            )


class ExcludeFieldsCustomizer(OptionsCustomizer):
    """Drop descriptors for the attributes listed in the ``exclude`` option.

    ``exclude`` is a comma-separated list of attribute names.
    """

    def customize(self, unit: SourceUnit, artifact: GeneratedArtifact) -> None:
        excluded = {name.strip() for name in self.option("exclude", "").split(",") if name.strip()}
        unknown = excluded - {attribute.name for attribute in unit.attributes}
        if unknown:
            msg = f"Cannot exclude unknown attribute(s): {', '.join(sorted(unknown))}"
            raise ValueError(msg)
        artifact.fields = [f for f in artifact.fields if f.attribute not in excluded]


class StandaloneCustomizer(MetaCustomizer):
    """Generate a plain descriptor holder that does not implement MetaModel.

    Such artifacts are never added to the aggregate registry.
    """

    def customize(self, unit: SourceUnit, artifact: GeneratedArtifact) -> None:
        artifact.remove_supertype(METAMODEL_REF)
        artifact.docstring = f"Field descriptors of {unit.source_type_ref}."


class CopyCustomizer(MetaCustomizer):
    """Add a ``copy(obj, **changes)`` method building a modified instance."""

    def customize(self, unit: SourceUnit, artifact: GeneratedArtifact) -> None:
        source = unit.source_name
        arguments = ", ".join(f"{a.name}=obj.{a.name}" for a in unit.attributes)
        artifact.methods.append(
            MethodContext(
                name="copy",
                params=[f"obj: {source}", "**changes: Any"],
                return_type=source,
                body=[
                    f"values = dict({arguments})",
                    "values.update(changes)",
                    f"return {source}(**values)",
                ],
                docstring="Return a copy of ``obj`` with ``changes`` applied.",
            )
        )
        artifact.add_import("typing", "Any")
