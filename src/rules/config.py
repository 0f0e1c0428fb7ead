from __future__ import annotations

from pathlib import Path
from typing import Any

import tomllib
from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_FILENAME = "extern-tags.toml"

DEFAULT_PATTERN_LENGTH_LIMIT = 96


class ExternConfig(BaseModel):
    """Configuration for the extern parser bridge and its command line."""

    model_config = ConfigDict(extra="forbid")

    parser: str | None = Field(
        default=None,
        description="Command that starts the external parser",
    )
    kinds: list[str] = Field(
        default_factory=list,
        description="Kind definitions: kind[:letter[:role[:prefix[:summary]]]]",
    )
    xformat: str | None = Field(
        default=None,
        description="Cross-reference output template override",
    )
    backward: bool = Field(
        default=False,
        description="Use backward (?...?) search patterns",
    )
    pattern_length_limit: int = Field(
        default=DEFAULT_PATTERN_LENGTH_LIMIT,
        ge=0,
        description="Cut patterns after this many bytes (0 = no limit)",
    )
    fields: list[str] = Field(
        default_factory=list,
        description="Parser fields to render (e.g. 'Extern.summary')",
    )
    disabled_roles: list[str] = Field(
        default_factory=list,
        description="Roles to disable, written as 'kind.role'",
    )
    output: str = Field(
        default="tags.jsonl",
        description="Output file for generated tags",
    )
    include: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to include (empty = all files)",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to exclude",
    )
    nested_gitignore: bool = Field(
        default=False,
        description=(
            "Enable nested .gitignore composition (default: false for root-only)"
        ),
    )

    @field_validator("kinds", mode="before")
    @classmethod
    def validate_kinds(cls, v: Any) -> Any:
        """Accept a single comma-separated string as well as a list."""
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v

    @field_validator("disabled_roles")
    @classmethod
    def validate_disabled_roles(cls, v: list[str]) -> list[str]:
        for item in v:
            kind, _, role = item.partition(".")
            if not kind or not role:
                msg = f"disabled role '{item}' must be written as 'kind.role'"
                raise ValueError(msg)
        return v


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def load_config(root: Path) -> ExternConfig:
    """Load configuration from extern-tags.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return ExternConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return ExternConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
