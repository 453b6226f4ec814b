"""Runtime support imported by generated metamodel modules.

A generated metamodel subclasses MetaModel and exposes one MetaField per
attribute of the source class, so that attribute values can be read and
written without reflection on the source class itself.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from typing import Any, Generic, TypeVar

T = TypeVar("T")
V = TypeVar("V")


class MetaField(Generic[T, V]):
    """Descriptor of a single attribute of ``T`` with value type ``V``."""

    __slots__ = ("name", "type", "_getter", "_setter")

    def __init__(
        self,
        name: str,
        type: Any,  # noqa: A002
        getter: Callable[[T], V],
        setter: Callable[[T, V], None] | None = None,
    ) -> None:
        self.name = name
        self.type = type
        self._getter = getter
        self._setter = setter

    def get(self, obj: T) -> V:
        """Read the attribute from ``obj``."""
        return self._getter(obj)

    def set(self, obj: T, value: V) -> None:
        """Write the attribute on ``obj``.

        Raises:
            AttributeError: If the field was generated without a setter
        """
        if self._setter is None:
            msg = f"Field '{self.name}' is read-only"
            raise AttributeError(msg)
        self._setter(obj, value)

    def __repr__(self) -> str:
        return f"MetaField({self.name!r})"


class MetaModel(Generic[T]):
    """Base class of every generated metamodel."""

    source_type: type[T]
    fields: Mapping[str, MetaField[T, Any]]

    def type(self) -> type[T]:
        """Return the source class this metamodel describes."""
        return self.source_type

    def field(self, name: str) -> MetaField[T, Any] | None:
        """Look up a field descriptor by attribute name."""
        return self.fields.get(name)

    def __iter__(self) -> Iterator[MetaField[T, Any]]:
        return iter(self.fields.values())

    def to_dict(self, obj: T) -> dict[str, Any]:
        """Read every described attribute of ``obj`` into a dict."""
        return {name: meta_field.get(obj) for name, meta_field in self.fields.items()}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.source_type.__qualname__})"
