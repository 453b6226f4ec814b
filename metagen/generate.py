"""Generation orchestration and CLI entrypoint.

One invocation is a single batch pass:
1. Extract a SourceUnit from every marked class
2. Group units by namespace
3. Resolve customizers, build and render each unit's metamodel
4. Build and render the aggregate registry of every namespace with
   aggregated metamodels
5. Persist everything, only once all of the above succeeded
"""

from __future__ import annotations

import argparse
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
import logging
from pathlib import Path
import sys
from typing import Any

from pydantic import ValidationError

from metagen.config import GeneratorConfig, get_settings, load_config
from metagen.customizers.base import MetaCustomizer
from metagen.customizers.resolver import CustomizerResolver
from metagen.diagnostics import Diagnostics
from metagen.errors import (
    CustomizerResolutionError,
    GenerationError,
    MetagenError,
    format_pydantic_error,
)
from metagen.generators.aggregator import AggregatorGenerator
from metagen.generators.context import ArtifactBuilder, is_metamodel
from metagen.generators.metamodel import MetamodelGenerator
from metagen.lib.env import get_project_root
from metagen.lib.logging import configure_logging
from metagen.output import CheckOutputSink, FileOutputSink, OutputSink, target_path
from metagen.spec.extractor import AttributeExtractor
from metagen.spec.loader import load_marked_types
from metagen.spec.models import SourceUnit, to_snake_case

logger = logging.getLogger(__name__)


@dataclass
class PendingOutput:
    """A rendered module waiting to be persisted."""

    namespace: str
    name: str
    source: str


@dataclass
class GenerationReport:
    """Summary of one invocation."""

    written: list[tuple[str, str]] = field(default_factory=list)
    units: int = 0
    registries: int = 0
    skipped: int = 0


class Orchestrator:
    """Drive extraction, synthesis, aggregation and persistence."""

    def __init__(
        self,
        sink: OutputSink,
        *,
        diagnostics: Diagnostics | None = None,
        extractor: AttributeExtractor | None = None,
        resolver: CustomizerResolver | None = None,
        builder: ArtifactBuilder | None = None,
        metamodel_generator: MetamodelGenerator | None = None,
        aggregator_generator: AggregatorGenerator | None = None,
    ) -> None:
        self.sink = sink
        self.diagnostics = diagnostics or Diagnostics()
        self.extractor = extractor or AttributeExtractor(self.diagnostics)
        self.resolver = resolver or CustomizerResolver()
        self.builder = builder or ArtifactBuilder()
        self.metamodel_generator = metamodel_generator or MetamodelGenerator()
        self.aggregator_generator = aggregator_generator or AggregatorGenerator()

    def run(self, marked_types: Iterable[Any]) -> GenerationReport:
        """Generate and persist all artifacts for ``marked_types``.

        Raises:
            CustomizerResolutionError: If any customizer cannot be resolved
            GenerationError: If an artifact cannot be built or two artifacts
                share a target
            PersistenceError: If the sink fails
        """
        report = GenerationReport()
        units_by_namespace = self._group(marked_types, report)

        pending: list[PendingOutput] = []
        candidates: dict[str, list[SourceUnit]] = {}

        for namespace, units in units_by_namespace.items():
            logger.info("Namespace %s: %d unit(s)", namespace or "<root>", len(units))
            namespace_candidates = candidates.setdefault(namespace, [])
            for unit in units:
                customizers = self._resolve_customizers(unit)
                artifact = self.builder.build(unit, customizers)
                if is_metamodel(artifact):
                    namespace_candidates.append(unit)
                else:
                    logger.debug("%s does not declare MetaModel", unit.name)
                source = self.metamodel_generator.generate(artifact)
                pending.append(PendingOutput(namespace, unit.name, source))
                report.units += 1

        for namespace, namespace_candidates in candidates.items():
            aggregated = [unit for unit in namespace_candidates if unit.options.aggregate]
            if not aggregated:
                continue
            registry = self.aggregator_generator.build(namespace, aggregated)
            source = self.aggregator_generator.generate(registry)
            pending.append(PendingOutput(namespace, registry.name, source))
            report.registries += 1
            logger.info(
                "Namespace %s: registry %s with %d entries",
                namespace or "<root>",
                registry.name,
                len(aggregated),
            )

        sources = {
            unit.source_module: unit.source_type_ref
            for units in units_by_namespace.values()
            for unit in units
        }
        self._ensure_unique_targets(pending, sources)
        for output in pending:
            self.sink.write(output.namespace, output.name, output.source)
            report.written.append((output.namespace, output.name))

        return report

    def _group(
        self, marked_types: Iterable[Any], report: GenerationReport
    ) -> dict[str, list[SourceUnit]]:
        """Group extracted units by namespace, keeping first-seen order."""
        units_by_namespace: dict[str, list[SourceUnit]] = {}
        for declared in marked_types:
            if not isinstance(declared, type):
                logger.debug("Skipping %r: not a class", declared)
                report.skipped += 1
                continue
            unit = self.extractor.get_unit(declared)
            if unit is None:
                report.skipped += 1
                continue
            units_by_namespace.setdefault(unit.namespace or "", []).append(unit)
        return units_by_namespace

    def _resolve_customizers(self, unit: SourceUnit) -> list[MetaCustomizer]:
        customizers = []
        for spec in unit.options.customizers:
            try:
                customizers.append(self.resolver.resolve(spec))
            except CustomizerResolutionError as e:
                raise CustomizerResolutionError(
                    e.reference, e.message, unit=unit.source_type_ref
                ) from e
        return customizers

    def _ensure_unique_targets(
        self, pending: list[PendingOutput], sources: dict[str, str]
    ) -> None:
        """Reject targets written twice or landing on a source module.

        Args:
            pending: Staged outputs
            sources: Source module name -> source_type_ref of a unit defined there
        """
        seen: set[tuple[str, str]] = set()
        for output in pending:
            key = (output.namespace, to_snake_case(output.name))
            target = f"{output.namespace}.{output.name}" if output.namespace else output.name
            if key in seen:
                raise GenerationError(target, "Generated more than once in this invocation")
            module = f"{key[0]}.{key[1]}" if key[0] else key[1]
            if module in sources:
                msg = f"Generated module {module} would overwrite the source of {sources[module]}"
                raise GenerationError(target, msg)
            seen.add(key)


@contextmanager
def search_paths(paths: list[Path]) -> Iterator[None]:
    """Make the project's source directories importable while scanning."""
    added = [str(path) for path in paths if str(path) not in sys.path]
    sys.path[:0] = added
    try:
        yield
    finally:
        for path in added:
            if path in sys.path:
                sys.path.remove(path)


def generate_all(
    project_root: Path | None = None,
    config: GeneratorConfig | None = None,
    *,
    check: bool = False,
) -> int:
    """Run the generator for the configured modules.

    Returns:
        Process exit code (0 on success)
    """
    if project_root is None:
        project_root = get_project_root()
    if config is None:
        config = load_config(project_root / get_settings().config_file)

    if not config.modules:
        print("No modules configured. Skipping generation.")
        return 0

    output_root = config.output_root(project_root)
    sink_class = CheckOutputSink if check else FileOutputSink
    sink = sink_class(output_root, format_code=config.format_code)
    diagnostics = Diagnostics()

    print("Scanning modules for @meta classes...")
    with search_paths(config.search_paths(project_root)):
        marked_types = load_marked_types(config.modules)
        print(f"  Modules: {len(config.modules)}")
        print(f"  Marked classes: {len(marked_types)}")

        report = Orchestrator(sink, diagnostics=diagnostics).run(marked_types)

    for diagnostic in diagnostics.messages:
        print(f"  ⚠ {diagnostic}")

    if check:
        if sink.stale:
            print("Generated code is out of date:")
            for path in sink.stale:
                print(f"  - {_display(path, project_root)}")
            print("Run `metagen generate` to regenerate.")
            return 1
        print("Generated code is up to date.")
        return 0

    for namespace, name in report.written:
        path = target_path(output_root, namespace, name)
        print(f"  ✓ {_display(path, project_root)}")
    if not report.written:
        print("  (no files generated)")

    print(
        f"\n✓ Generation complete! "
        f"{report.units} metamodel(s), {report.registries} registry(ies)"
    )
    return 0


def _display(path: Path, project_root: Path) -> Path:
    try:
        return path.relative_to(project_root.resolve())
    except ValueError:
        return path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="metagen", description="Generate metamodels for @meta classes"
    )
    parser.add_argument("--root", type=Path, help="Project root (default: METAGEN_ROOT or cwd)")
    parser.add_argument("--config", type=Path, help="Path to metagen.yaml")
    parser.add_argument("--output", help="Output directory, relative to the project root")
    parser.add_argument(
        "--module",
        action="append",
        dest="modules",
        help="Module or package to scan (repeatable, overrides the config file)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command")
    generate_parser = subparsers.add_parser("generate", help="Write generated modules")
    generate_parser.set_defaults(check=False)
    check_parser = subparsers.add_parser("check", help="Only report stale generated modules")
    check_parser.set_defaults(check=True)

    parser.set_defaults(check=False)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings()
        configure_logging("DEBUG" if args.verbose else settings.log_level)

        project_root = (args.root or get_project_root()).resolve()
        config_file = args.config or project_root / settings.config_file
        config = load_config(config_file, required=args.config is not None)

        overrides: dict[str, Any] = {}
        if args.modules:
            overrides["modules"] = args.modules
        if args.output:
            overrides["output_dir"] = args.output
        if overrides:
            config = GeneratorConfig.model_validate({**config.model_dump(), **overrides})

        return generate_all(project_root, config, check=args.check)
    except ValidationError as e:
        print(f"Error: invalid settings\n{format_pydantic_error(e)}", file=sys.stderr)
        return 1
    except MetagenError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
