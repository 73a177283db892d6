"""Configuration models."""

from ._common import ConfigSource, ConfigSourceName, Language, LogFormat, LogLevel
from ._config import Config
from ._sections import (
    HooksConfig,
    IdentityConfig,
    ListConfig,
    LoggingConfig,
    ResolverConfig,
    UIConfig,
    detect_language,
)

__all__ = [
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
    "detect_language",
]
