"""Configuration section models.

Each section of the TOML configuration maps to one frozen Pydantic model.
"""

import os
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ._common import Language, LogFormat, LogLevel


class LoggingConfig(BaseModel):
    """Logging configuration section.

    Attributes:
        level: Log level threshold.
        format: Log output format.
        file: Path to log file (empty uses the per-user default).
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.JSON
    file: str = ""


class IdentityConfig(BaseModel):
    """Fallback commit identity used when git has no user configured."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    name: str = Field("Claude Checkpoint", min_length=1, description="Author name")
    email: str = Field(
        "claude@checkpoint.local", min_length=1, description="Author email"
    )


class ResolverConfig(BaseModel):
    """Hash resolution settings."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    max_candidates: int = Field(
        5, ge=1, description="Candidates listed when a hash prefix is ambiguous"
    )


class ListConfig(BaseModel):
    """Settings for the list command."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    default_limit: int = Field(10, ge=1, description="Checkpoints shown by default")


class HooksConfig(BaseModel):
    """Settings for reading tool payloads from standard input."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    stdin_timeout_ms: int = Field(
        100, ge=0, description="How long to wait for a payload on stdin"
    )


def detect_language() -> Language:
    """Detect the message language from the LANG environment variable.

    ``zh_CN.UTF-8`` selects Chinese; anything unknown falls back to English.

    Returns:
        The detected language.
    """
    lang = os.environ.get("LANG", "")
    code = lang.split("_", 1)[0].split(".", 1)[0].lower()
    try:
        return Language(code)
    except ValueError:
        return Language.EN


class UIConfig(BaseModel):
    """User interface settings.

    Attributes:
        language: Message language. ``auto`` is resolved from LANG.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    language: Language = Language.EN

    @field_validator("language", mode="before")
    @classmethod
    def _resolve_auto(cls, value: object) -> object:
        if value == "auto":
            return detect_language()
        return value
