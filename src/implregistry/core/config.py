"""Configuration models for the fragment loader and the implementors view.

LoaderConfig

`root` (`Path`)
: Directory holding the generated ``implementors`` tree. Trait paths are
  derived from file locations relative to this root.

`pattern` (`str`)
: Glob used to discover fragment scripts below `root`.

`encoding` (`str`)
: Text encoding used to read fragment scripts.

`skip_invalid` (`bool`)
: Report malformed fragments as warnings and keep going instead of failing.

ViewConfig

`include_synthetic` (`bool`)
: Keep auto-trait (synthetic) implementors in the rendered listing.

`local_types` (`list[str]`)
: Fully qualified type names already documented on the page. Implementors
  attached to any of them are hidden to avoid listing an impl twice.

RegistryConfig

`loader` (`LoaderConfig | None`)
: Optional loader settings; the CLI `--root` option fills or overrides `root`.

`view` (`ViewConfig`)
: Presentation settings for the implementors listing.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


try:  # Python >=3.11
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # Python 3.10
    import tomli as tomllib

from implregistry.core.exceptions import ConfigError


class LoaderConfig(BaseModel):
    """Where and how fragment scripts are discovered."""

    model_config = ConfigDict(extra="forbid")

    root: Path
    pattern: str = "**/trait.*.js"
    encoding: str = "utf-8"
    skip_invalid: bool = False

    @field_validator("pattern")
    @classmethod
    def _require_pattern(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("pattern must not be empty")
        return value


class ViewConfig(BaseModel):
    """Presentation settings for the implementors listing."""

    model_config = ConfigDict(extra="forbid")

    include_synthetic: bool = True
    local_types: list[str] = Field(default_factory=list)

    @field_validator("local_types")
    @classmethod
    def _strip_local_types(cls, value: list[str]) -> list[str]:
        return [item.strip() for item in value if item and item.strip()]


class RegistryConfig(BaseModel):
    """Top-level configuration document."""

    model_config = ConfigDict(extra="forbid")

    loader: LoaderConfig | None = None
    view: ViewConfig = Field(default_factory=ViewConfig)


def build_config(payload: dict[str, Any], *, base_dir: Path | None = None) -> RegistryConfig:
    """Validate a configuration mapping, resolving relative loader roots."""
    try:
        config = RegistryConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc

    if config.loader is not None and base_dir is not None and not config.loader.root.is_absolute():
        config.loader.root = (base_dir / config.loader.root).resolve()
    return config


def load_config(path: Path) -> RegistryConfig:
    """Load a TOML configuration file."""
    try:
        payload = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Failed to read configuration {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid configuration {path}: {exc}") from exc
    return build_config(payload, base_dir=path.parent)


__all__ = [
    "LoaderConfig",
    "RegistryConfig",
    "ViewConfig",
    "build_config",
    "load_config",
]
