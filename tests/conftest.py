"""Shared fixtures for metagen tests."""

from __future__ import annotations

from collections.abc import Generator
from dataclasses import dataclass, field
import importlib
from pathlib import Path
import sys
import textwrap
from types import ModuleType

import pytest


@dataclass
class Project:
    """A throwaway project with an importable source directory."""

    root: Path
    src: Path

    def write_module(self, dotted: str, source: str) -> Path:
        """Write ``source`` as module ``dotted``, creating packages on the way."""
        parts = dotted.split(".")
        directory = self.src
        for package in parts[:-1]:
            directory = directory / package
            directory.mkdir(exist_ok=True)
            init = directory / "__init__.py"
            if not init.exists():
                init.write_text("", encoding="utf-8")

        path = directory / f"{parts[-1]}.py"
        path.write_text(textwrap.dedent(source), encoding="utf-8")
        importlib.invalidate_caches()
        return path

    def import_module(self, dotted: str) -> ModuleType:
        importlib.invalidate_caches()
        return importlib.import_module(dotted)


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Project, None, None]:
    """Provide an isolated project whose modules are importable during the test."""

    src = tmp_path / "src"
    src.mkdir()
    monkeypatch.syspath_prepend(str(src))

    yield Project(root=tmp_path, src=src)

    # Forget modules loaded from this project so the next test can reuse names
    for name, module in list(sys.modules.items()):
        module_file = getattr(module, "__file__", None) or ""
        if module_file.startswith(str(tmp_path)):
            del sys.modules[name]
    importlib.invalidate_caches()


@dataclass
class MemorySink:
    """Output sink keeping generated sources in memory."""

    files: dict[tuple[str, str], str] = field(default_factory=dict)
    order: list[tuple[str, str]] = field(default_factory=list)

    def write(self, namespace: str | None, name: str, source: str) -> None:
        key = (namespace or "", name)
        self.files[key] = source
        self.order.append(key)


@pytest.fixture
def memory_sink() -> MemorySink:
    return MemorySink()
