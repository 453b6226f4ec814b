"""Resolution of declarative customizer references into plugin instances.

Resolution runs in three steps:
1. Load the plugin class from its TypeRef (direct handle or qualified name)
2. Build the options mapping (first value of a duplicate key wins)
3. Construct the plugin with the options mapping (for a constructor whose
   single parameter is unannotated or mapping-typed), or else with no arguments
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import inspect
import logging
import types
from typing import Any, Union, get_args, get_origin, get_type_hints

from metagen.customizers.base import MetaCustomizer
from metagen.errors import CustomizerResolutionError
from metagen.spec.models import CustomizerSpec
from metagen.spec.types import Loader, resolve_type_ref

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConstructionStrategy:
    """One way of calling a plugin constructor.

    Attributes:
        name: Label used in logs and error messages
        arguments: Builds the positional arguments from the options mapping
        accepts: Checks that the named constructor parameter can take its argument
    """

    name: str
    arguments: Callable[[dict[str, str]], tuple[Any, ...]]
    accepts: Callable[[type, str], bool] | None = None

    def applies_to(self, plugin_type: type, options: dict[str, str]) -> bool:
        """Check whether the constructor signature accepts these arguments."""
        try:
            signature = inspect.signature(plugin_type)
        except (TypeError, ValueError):
            # No introspectable signature, let the call decide
            return True
        try:
            bound = signature.bind(*self.arguments(options))
        except TypeError:
            return False
        if self.accepts is None:
            return True
        return all(self.accepts(plugin_type, parameter) for parameter in bound.arguments)

    def construct(self, plugin_type: type, options: dict[str, str]) -> Any:
        return plugin_type(*self.arguments(options))


def accepts_mapping(plugin_type: type, parameter: str) -> bool:
    """Check whether a constructor parameter is unannotated or mapping-typed."""
    try:
        hints = get_type_hints(plugin_type.__init__)
    except (NameError, TypeError):
        # Unresolvable annotations, let the call decide
        return True
    hint = hints.get(parameter)
    if hint is None or hint is Any:
        return True
    return _is_mapping_type(hint)


def _is_mapping_type(hint: Any) -> bool:
    origin = get_origin(hint)
    if origin is Union or origin is types.UnionType:
        return any(_is_mapping_type(arg) for arg in get_args(hint) if arg is not type(None))
    target = origin if origin is not None else hint
    # The options are passed as a dict
    return isinstance(target, type) and issubclass(dict, target)


# Fixed order; no other constructor shapes are tried
STRATEGIES: tuple[ConstructionStrategy, ...] = (
    ConstructionStrategy("options mapping", lambda options: (options,), accepts_mapping),
    ConstructionStrategy("no arguments", lambda options: ()),
)


class CustomizerResolver:
    """Turns CustomizerSpec into MetaCustomizer instances."""

    def __init__(self, loader: Loader | None = None) -> None:
        self.loader = loader

    def resolve(self, spec: CustomizerSpec) -> MetaCustomizer:
        """Resolve and instantiate the customizer described by ``spec``.

        Raises:
            CustomizerResolutionError: If the plugin class cannot be loaded,
                has no usable constructor, its constructor raises, or the
                result is not a customizer
        """
        plugin_type = resolve_type_ref(spec.plugin_type_ref, self.loader)
        options = spec.opts_map()
        customizer = self._instantiate(plugin_type, options)

        if not callable(getattr(customizer, "customize", None)):
            raise CustomizerResolutionError(plugin_type, "does not implement customize()")

        logger.debug(
            "Resolved customizer %s.%s with options %s",
            plugin_type.__module__,
            plugin_type.__qualname__,
            options,
        )
        return customizer

    def _instantiate(self, plugin_type: type, options: dict[str, str]) -> Any:
        last_error: Exception | None = None

        for strategy in STRATEGIES:
            if not strategy.applies_to(plugin_type, options):
                continue
            try:
                return strategy.construct(plugin_type, options)
            except Exception as e:
                logger.debug(
                    "Constructing %s with %s failed: %s", plugin_type.__qualname__, strategy.name, e
                )
                last_error = e

        if last_error is None:
            msg = "has no constructor taking an options mapping or no arguments"
            raise CustomizerResolutionError(plugin_type, msg)
        msg = f"constructor failed ({type(last_error).__name__}: {last_error})"
        raise CustomizerResolutionError(plugin_type, msg) from last_error
