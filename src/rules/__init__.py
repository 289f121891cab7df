"""Configuration and static rule data for"""

from rules.config import (
    ApiCheckConfig,
    ConfigError,
    ExportsConfig,
    build_config,
    load_config,
)
from rules.defaults import DEFAULT_ALLOWED_MODULES, RESERVED_NAMES

__all__ = [
    "ApiCheckConfig",
    "ConfigError",
    "DEFAULT_ALLOWED_MODULES",
    "ExportsConfig",
    "RESERVED_NAMES",
    "build_config",
    "load_config",
]
