"""Generator configuration.

Settings come from the environment (METAGEN_* variables, .env file); the
generation targets come from metagen.yaml in the project root:

    modules:
      - shop.models
    output_dir: .
    source_paths: [src]
    format_code: false
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import yaml

from metagen.errors import ConfigError, format_pydantic_error

DEFAULT_CONFIG_FILE = "metagen.yaml"


class MetagenSettings(BaseSettings):
    """Settings read from METAGEN_* environment variables."""

    config_file: str = Field(default=DEFAULT_CONFIG_FILE)
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_prefix="METAGEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure the level is one logging understands."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            msg = f"Unknown log level '{v}'"
            raise ValueError(msg)
        return level


@lru_cache
def get_settings() -> MetagenSettings:
    """Return a cached instance of the settings."""

    return MetagenSettings()


class GeneratorConfig(BaseModel):
    """Contents of metagen.yaml."""

    modules: list[str] = Field(default_factory=list)
    output_dir: str = "."
    source_paths: list[str] = Field(default_factory=lambda: ["."])
    format_code: bool = False

    model_config = {"extra": "forbid"}

    @field_validator("modules")
    @classmethod
    def validate_modules(cls, v: list[str]) -> list[str]:
        """Ensure every entry is an importable dotted module name."""
        for name in v:
            if not all(part.isidentifier() for part in name.split(".")):
                msg = f"'{name}' is not a valid module name"
                raise ValueError(msg)
        return v

    def output_root(self, project_root: Path) -> Path:
        return (project_root / self.output_dir).resolve()

    def search_paths(self, project_root: Path) -> list[Path]:
        return [(project_root / path).resolve() for path in self.source_paths]


def load_yaml_file(file_path: Path) -> dict[str, Any]:
    """Load and parse a YAML mapping."""
    try:
        with file_path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}", str(file_path)) from e
    except OSError as e:
        raise ConfigError(f"Cannot read file: {e}", str(file_path)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("Top level must be a mapping", str(file_path))
    return data


def load_config(file_path: Path, *, required: bool = False) -> GeneratorConfig:
    """Load and validate the generator configuration.

    Args:
        file_path: Path to metagen.yaml
        required: Fail if the file does not exist (otherwise defaults are used)

    Raises:
        ConfigError: If the file is missing (when required) or invalid
    """
    if not file_path.exists():
        if required:
            raise ConfigError("File not found", str(file_path))
        return GeneratorConfig()

    data = load_yaml_file(file_path)
    try:
        return GeneratorConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(format_pydantic_error(e, "metagen"), str(file_path)) from e
