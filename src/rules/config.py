from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

import tomllib
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

if TYPE_CHECKING:
    from pathlib import Path

CONFIG_FILENAME = "apicheck.toml"

ExportsBackend = Literal["mix", "manifest", "none"]


class ExportsConfig(BaseModel):
    """Where function existence answers come from."""

    model_config = ConfigDict(extra="forbid")

    backend: ExportsBackend = Field(
        default="mix",
        description="Existence-check backend: mix, manifest or none",
    )
    manifest: str | None = Field(
        default=None,
        description="Path to a JSON exports manifest (manifest backend)",
    )
    mix_command: list[str] = Field(
        default_factory=lambda: ["mix"],
        description="Command used to invoke mix (mix backend)",
    )
    timeout: float = Field(
        default=120.0,
        gt=0,
        description="Seconds to wait for the mix subprocess",
    )


class ApiCheckConfig(BaseModel):
    """Configuration for API call validation."""

    model_config = ConfigDict(extra="forbid")

    file_patterns: list[str] = Field(
        default_factory=lambda: ["**/*.{exs,livemd}"],
        description="Glob patterns for files to validate",
    )
    exclude_patterns: list[str] = Field(
        default_factory=lambda: ["_build/", "deps/"],
        description="Relative path prefixes excluded from validation",
    )
    allowed_modules: list[str] = Field(
        default_factory=list,
        description="Module prefixes accepted without an existence check",
    )
    notebook_suffixes: list[str] = Field(
        default_factory=lambda: [".livemd"],
        description="File suffixes treated as notebooks",
    )
    respect_gitignore: bool = Field(
        default=False,
        description="Skip files ignored by the root .gitignore",
    )
    workers: int | None = Field(
        default=None,
        ge=1,
        description="Worker threads for per-file extraction (default: executor choice)",
    )
    exports: ExportsConfig = Field(
        default_factory=ExportsConfig,
        description="Existence-check backend settings",
    )

    @field_validator("notebook_suffixes", mode="before")
    @classmethod
    def validate_notebook_suffixes(cls, v: Any) -> Any:
        """Require suffixes to start with a dot, e.g. ".livemd"."""

        if not isinstance(v, list):
            return v

        for suffix in v:
            if isinstance(suffix, str) and not suffix.startswith("."):
                msg = f"Invalid notebook suffix '{suffix}': must start with '.'"
                raise ValueError(msg)

        return v


class ConfigError(Exception):
    """Raised when configuration is malformed."""


def build_config(data: dict[str, Any], *, source: str = "options") -> ApiCheckConfig:
    """Validate a raw options mapping into an ApiCheckConfig."""
    try:
        return ApiCheckConfig.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid config in {source}: {e}"
        raise ConfigError(msg) from e


def load_config(root: Path) -> ApiCheckConfig:
    """Load configuration from apicheck.toml if it exists."""
    config_path = root / CONFIG_FILENAME

    if not config_path.is_file():
        return ApiCheckConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    return build_config(data, source=str(config_path))


__all__ = [
    "CONFIG_FILENAME",
    "ApiCheckConfig",
    "ConfigError",
    "ExportsBackend",
    "ExportsConfig",
    "build_config",
    "load_config",
]
