# pyright: reportExplicitAny=false, reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""Configuration container with typed access.

This module provides the main Config class that serves as the primary
interface for accessing ccg configuration values.
"""

from pathlib import Path  # noqa: TC003
from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict, PrivateAttr, ValidationError

from ccg.config._defaults import DEFAULT_CONFIG
from ccg.config._loader import deep_merge, parse_env_vars, read_toml_file
from ccg.config._models._common import ConfigSource, ConfigSourceName
from ccg.config._models._sections import (
    HooksConfig,
    IdentityConfig,
    ListConfig,
    LoggingConfig,
    ResolverConfig,
    UIConfig,
)
from ccg.exceptions import ConfigValidationError

_SECTIONS: dict[str, type[BaseModel]] = {
    "logging": LoggingConfig,
    "identity": IdentityConfig,
    "resolver": ResolverConfig,
    "list": ListConfig,
    "hooks": HooksConfig,
    "ui": UIConfig,
}


def _parse_sections(
    data: dict[str, Any], *, source: str | None = None
) -> dict[str, BaseModel]:
    """Validate every known section of a merged configuration dictionary.

    Args:
        data: Merged configuration dictionary.
        source: Description of where the values came from, for errors.

    Returns:
        Mapping of section name to validated model.

    Raises:
        ConfigValidationError: If a section is not a table or a value is invalid.
    """
    parsed: dict[str, BaseModel] = {}
    for name, model in _SECTIONS.items():
        section = data.get(name, {})
        if not isinstance(section, dict):
            msg = f"Configuration section '{name}' must be a table"
            raise ConfigValidationError(
                msg, key=name, value=section, expected="table", source=source
            )
        try:
            parsed[name] = model.model_validate(section)
        except ValidationError as e:
            error = e.errors()[0]
            key = ".".join([name, *(str(part) for part in error["loc"])])
            msg = f"Invalid configuration value for '{key}': {error['msg']}"
            raise ConfigValidationError(
                msg,
                key=key,
                value=error.get("input"),
                expected=error["type"],
                source=source,
            ) from e
    return parsed


class Config(BaseModel):
    """Configuration container with typed access.

    Use factory methods to create instances rather than the constructor.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    _data: dict[str, Any] = PrivateAttr(default_factory=dict)
    _sources: tuple[ConfigSource, ...] = PrivateAttr(default=())
    _sections: dict[str, BaseModel] = PrivateAttr(default_factory=dict)

    def __init__(
        self,
        *,
        _data: dict[str, Any] | None = None,
        _sources: tuple[ConfigSource, ...] = (),
        _sections: dict[str, BaseModel] | None = None,
    ) -> None:
        """Initialize configuration container.

        Args:
            _data: The complete merged configuration dictionary.
            _sources: Sources that contributed to this configuration.
            _sections: Validated section models keyed by section name.
        """
        super().__init__()
        self._data = _data if _data is not None else {}
        self._sources = _sources
        self._sections = _sections if _sections is not None else {}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create configuration from a dictionary merged over the defaults.

        Args:
            data: Dictionary of configuration values.

        Returns:
            Configuration object from the dictionary.

        Raises:
            ConfigValidationError: If validation fails.
        """
        merged = deep_merge(DEFAULT_CONFIG, data)
        return cls(_data=merged, _sections=_parse_sections(merged))

    @classmethod
    def from_file(cls, path: Path) -> Self:
        """Load configuration from a specific file.

        Args:
            path: Path to the TOML config file.

        Returns:
            Configuration object from the specified file only.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigLoadError: If the file cannot be parsed.
            ConfigValidationError: If validation fails.
        """
        data = read_toml_file(path)
        source = ConfigSource(
            name=ConfigSourceName.PROJECT,
            path=path,
            exists=True,
            values=data,
        )
        merged = deep_merge(DEFAULT_CONFIG, data)
        return cls(
            _data=merged,
            _sources=(source,),
            _sections=_parse_sections(merged, source=str(path)),
        )

    @classmethod
    def load(
        cls,
        *,
        start: Path | None = None,
        include_env: bool = True,
        cli_overrides: dict[str, Any] | None = None,
    ) -> Self:
        """Load merged configuration from all sources.

        Sources are merged in precedence order
        (defaults -> user -> project -> repository -> env -> cli).

        Args:
            start: Directory used to locate the repository. Defaults to the
                current working directory.
            include_env: Include CCG_* environment variables.
            cli_overrides: Values set by command-line flags.

        Returns:
            Merged configuration object.

        Raises:
            ConfigLoadError: If config files cannot be loaded.
            ConfigValidationError: If merged config fails validation.
        """
        from ccg.config._discovery import discover_sources  # noqa: PLC0415

        sources = discover_sources(
            start,
            include_env=include_env,
            cli_overrides=cli_overrides,
        )

        merged: dict[str, Any] = {}
        loaded_sources: list[ConfigSource] = []

        # Sources are discovered highest-to-lowest, so reverse for merging
        for source in reversed(sources):
            values: dict[str, Any] = {}

            if source.name in (ConfigSourceName.DEFAULT, ConfigSourceName.CLI):
                values = source.values
            elif source.name == ConfigSourceName.ENV:
                values = parse_env_vars()
            elif source.path and source.exists:
                values = read_toml_file(source.path)

            loaded_sources.append(
                ConfigSource(
                    name=source.name,
                    path=source.path,
                    exists=source.exists,
                    values=values,
                )
            )

            if values:
                merged = deep_merge(merged, values)

        return cls(
            _data=merged,
            _sources=tuple(reversed(loaded_sources)),
            _sections=_parse_sections(merged),
        )

    @property
    def sources(self) -> list[ConfigSource]:
        """Return the sources that contributed to this configuration."""
        return list(self._sources)

    @property
    def logging(self) -> LoggingConfig:
        """Return the logging configuration section."""
        return self._section("logging", LoggingConfig)

    @property
    def identity(self) -> IdentityConfig:
        """Return the fallback commit identity section."""
        return self._section("identity", IdentityConfig)

    @property
    def resolver(self) -> ResolverConfig:
        """Return the hash resolution section."""
        return self._section("resolver", ResolverConfig)

    @property
    def list(self) -> ListConfig:
        """Return the list command section."""
        return self._section("list", ListConfig)

    @property
    def hooks(self) -> HooksConfig:
        """Return the stdin payload section."""
        return self._section("hooks", HooksConfig)

    @property
    def ui(self) -> UIConfig:
        """Return the user interface section."""
        return self._section("ui", UIConfig)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a raw configuration value by dotted key.

        Args:
            key: Dotted key path such as ``resolver.max_candidates``.
            default: Value returned when the key is absent.

        Returns:
            The stored value or ``default``.
        """
        current: Any = self._data
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current

    def _section[ModelT: BaseModel](self, name: str, model: type[ModelT]) -> ModelT:
        section = self._sections.get(name)
        if isinstance(section, model):
            return section
        return model()
