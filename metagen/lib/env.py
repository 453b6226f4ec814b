"""Environment helpers for the generator tooling."""

from __future__ import annotations

import os
from pathlib import Path

ROOT_ENV_VAR = "METAGEN_ROOT"


def get_project_root() -> Path:
    """Return the project root, honoring METAGEN_ROOT overrides."""

    override = os.environ.get(ROOT_ENV_VAR)
    if override:
        return Path(override).resolve()
    return Path.cwd().resolve()
