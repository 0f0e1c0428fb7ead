"""Configuration for extern-tags."""

from rules.config import (
    CONFIG_FILENAME,
    ConfigError,
    ExternConfig,
    load_config,
)

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "ExternConfig",
    "load_config",
]
