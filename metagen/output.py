"""Output sinks materializing generated module source.

A target is addressed by (namespace, name): the namespace becomes the
directory path and the artifact name the snake_case module file name.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
import shutil
import subprocess
import tempfile
from typing import Protocol

from metagen.errors import PersistenceError
from metagen.spec.loader import GENERATED_MARKER
from metagen.spec.models import to_snake_case

logger = logging.getLogger(__name__)


class OutputSink(Protocol):
    """Destination for generated sources."""

    def write(self, namespace: str | None, name: str, source: str) -> None:
        """Persist ``source`` as module ``name`` in ``namespace``.

        Raises:
            PersistenceError: If the target cannot be created or written
        """


def target_path(output_root: Path, namespace: str | None, name: str) -> Path:
    """Return the file a (namespace, name) target is written to.

    An empty or missing namespace maps to ``output_root`` itself.
    """
    directory = output_root
    if namespace:
        directory = directory.joinpath(*namespace.split("."))
    return directory / f"{to_snake_case(name)}.py"


def format_source(source: str, filename: str) -> str:
    """Format module source with ruff.

    Raises:
        PersistenceError: If ruff is not installed or rejects the source
    """
    ruff = shutil.which("ruff")
    if ruff is None:
        raise PersistenceError(filename, "ruff is not installed, cannot format output")

    result = subprocess.run(  # noqa: S603
        [ruff, "format", "--stdin-filename", filename, "-"],
        input=source,
        capture_output=True,
        text=True,
        check=False,
    )
    if result.returncode != 0:
        raise PersistenceError(filename, f"ruff format failed: {result.stderr.strip()}")
    return result.stdout


class FileOutputSink:
    """Write generated modules below an output root directory."""

    def __init__(self, output_root: Path, *, format_code: bool = False) -> None:
        self.output_root = output_root
        self.format_code = format_code
        self.written: list[Path] = []

    def prepare(self, namespace: str | None, name: str, source: str) -> tuple[Path, str]:
        """Return the target path and the final text to store there."""
        path = target_path(self.output_root, namespace, name)
        if self.format_code:
            source = format_source(source, str(path))
        return path, source

    def write(self, namespace: str | None, name: str, source: str) -> None:
        """Write the module atomically (temporary file, then rename).

        An existing file is only replaced if metagen generated it.
        """
        path, source = self.prepare(namespace, name, source)
        try:
            if path.exists() and not _is_generated_file(path):
                msg = "exists and was not generated by metagen, refusing to overwrite"
                raise PersistenceError(str(path), msg)
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(source)
                Path(tmp_name).replace(path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError(str(path), f"cannot write generated module ({e})") from e

        logger.debug("Wrote %s", path)
        self.written.append(path)


class CheckOutputSink(FileOutputSink):
    """Compare generated modules with what is on disk instead of writing.

    Used by ``metagen --check`` to detect stale generated code.
    """

    def __init__(self, output_root: Path, *, format_code: bool = False) -> None:
        super().__init__(output_root, format_code=format_code)
        self.stale: list[Path] = []

    def write(self, namespace: str | None, name: str, source: str) -> None:
        path, source = self.prepare(namespace, name, source)
        try:
            current = path.read_text(encoding="utf-8") if path.exists() else None
        except OSError as e:
            raise PersistenceError(str(path), f"cannot read generated module ({e})") from e

        if current != source:
            logger.debug("Stale: %s", path)
            self.stale.append(path)
        self.written.append(path)


def _is_generated_file(path: Path) -> bool:
    with path.open(encoding="utf-8", errors="replace") as f:
        return f.readline().startswith(GENERATED_MARKER)
