"""Layered TOML configuration for ccg.

Configuration is merged from built-in defaults, the user config file,
the project ``.ccg.toml``, the repository-private ``.git/ccg.toml``,
``CCG_SECTION__KEY`` environment variables and command-line flags.
"""

from ._defaults import DEFAULT_CONFIG
from ._discovery import discover_sources, find_repository_dirs
from ._load import safe_load_config
from ._loader import deep_merge, parse_env_vars, read_toml_file
from ._models import (
    Config,
    ConfigSource,
    ConfigSourceName,
    HooksConfig,
    IdentityConfig,
    Language,
    ListConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    ResolverConfig,
    UIConfig,
    detect_language,
)

__all__ = [
    "DEFAULT_CONFIG",
    "Config",
    "ConfigSource",
    "ConfigSourceName",
    "HooksConfig",
    "IdentityConfig",
    "Language",
    "ListConfig",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "ResolverConfig",
    "UIConfig",
    "deep_merge",
    "detect_language",
    "discover_sources",
    "find_repository_dirs",
    "parse_env_vars",
    "read_toml_file",
    "safe_load_config",
]
