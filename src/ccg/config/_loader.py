# pyright: reportAny=false, reportExplicitAny=false
"""Reading, merging and environment parsing for configuration layers."""

import os
import tomllib
from pathlib import Path  # noqa: TC003
from typing import Any, Final

import orjson

from ccg.exceptions import ConfigLoadError

ENV_PREFIX: Final = "CCG_"
ENV_SEPARATOR: Final = "__"

type ConfigData = dict[str, Any]


def read_toml_file(path: Path) -> ConfigData:
    """Parse a TOML configuration file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigLoadError: If the file is not valid TOML.
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Failed to parse TOML file: {e}"
        raise ConfigLoadError(msg, path=path, line=e.lineno, column=e.colno) from e


def _copy(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _copy(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_copy(item) for item in value]
    return value


def deep_merge(base: ConfigData, override: ConfigData) -> ConfigData:
    """Merge ``override`` over ``base`` into a new dictionary.

    Tables merge recursively; every other value, arrays included, is
    replaced by the override. Neither input is modified.

    Args:
        base: Lower-precedence layer.
        override: Higher-precedence layer.

    Returns:
        The merged configuration.
    """
    merged: ConfigData = _copy(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = _copy(value)
    return merged


def set_nested_key(data: ConfigData, dotted_key: str, value: Any) -> None:
    """Store ``value`` under a dotted key such as ``logging.level``.

    Intermediate tables are created, replacing scalars in the way.
    """
    *parents, leaf = dotted_key.split(".")
    current = data
    for part in parents:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]
    current[leaf] = value


def _parse_env_value(value: str) -> Any:
    """Infer the type of an environment value.

    ``true``/``false`` become booleans, integers become ints, bracketed
    JSON becomes a list or table; anything else stays a string.
    """
    if value.lower() in {"true", "false"}:
        return value.lower() == "true"
    try:
        return int(value)
    except ValueError:
        pass
    if value[:1] + value[-1:] in {"[]", "{}"}:
        try:
            return orjson.loads(value)
        except orjson.JSONDecodeError:
            pass
    return value


def parse_env_vars(prefix: str = ENV_PREFIX) -> ConfigData:
    """Collect ``CCG_SECTION__KEY`` variables into a configuration layer.

    ``CCG_RESOLVER__MAX_CANDIDATES=8`` sets ``resolver.max_candidates``.
    Variables without a double underscore (CCG_DEBUG, CCG_AUTHOR_NAME, ...)
    are not configuration keys and are skipped.

    Args:
        prefix: Variable name prefix.

    Returns:
        Nested dictionary of parsed values.
    """
    layer: ConfigData = {}
    for name, raw in os.environ.items():
        if not name.startswith(prefix) or ENV_SEPARATOR not in name[len(prefix) :]:
            continue
        dotted = name[len(prefix) :].replace(ENV_SEPARATOR, ".").lower()
        set_nested_key(layer, dotted, _parse_env_value(raw))
    return layer
