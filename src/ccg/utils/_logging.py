"""Structured file logging for ccg.

Loggers are standalone structlog loggers bound to one file each; global
structlog configuration is never touched, so embedding applications keep
their own setup.
"""

import logging
from os import getenv
from pathlib import Path
from typing import TYPE_CHECKING, Literal, cast

import structlog

from ._paths import get_ccg_cli_log_file

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger, Processor

LogFormatType = Literal["json", "text"]


def resolve_log_level(level: str | None = None) -> int:
    """Resolve a log level name to a logging level.

    CCG_DEBUG forces DEBUG. Without an explicit ``level`` the CCG_LOG_LEVEL
    variable is consulted. Unknown names resolve to INFO.

    Args:
        level: Level name (debug, info, warning, error), or None.

    Returns:
        The logging level as an integer.
    """
    if getenv("CCG_DEBUG"):
        return logging.DEBUG
    name = level if level is not None else getenv("CCG_LOG_LEVEL", "info")
    return logging.getLevelNamesMapping().get(name.upper(), logging.INFO)


def _processors(log_format: LogFormatType) -> "list[Processor]":  # noqa: UP037
    processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if log_format == "json":
        processors += [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        # timestamp [level] event key=value
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    return processors


def create_file_logger(
    path: Path,
    *,
    level: int | None = None,
    log_format: LogFormatType = "json",
) -> "FilteringBoundLogger":  # noqa: UP037
    """Create a logger appending to ``path``.

    Missing parent directories are created.

    Args:
        path: Log file location.
        level: Minimum logging level; resolved from the environment if None.
        log_format: ``json`` for one object per line, ``text`` for key=value.

    Returns:
        A FilteringBoundLogger writing to the file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    effective_level = level if level is not None else resolve_log_level()

    return cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            structlog.WriteLogger(path.open("a")),
            processors=_processors(log_format),
            wrapper_class=structlog.make_filtering_bound_logger(effective_level),
            context_class=dict,
        ),
    )


def create_cli_logger(
    *,
    level: str = "info",
    log_format: LogFormatType = "json",
    log_file: str = "",
    command: str = "",
) -> "FilteringBoundLogger":  # noqa: UP037
    """Create the logger used by CLI commands.

    Args:
        level: Configured level name; CCG_DEBUG still forces DEBUG.
        log_format: Output format, either "json" or "text".
        log_file: Path to log file (uses the per-user ``cli.log`` if empty).
        command: Name of the running subcommand, bound to every entry.

    Returns:
        A FilteringBoundLogger instance configured for CLI logging.
    """
    path = Path(log_file) if log_file else get_ccg_cli_log_file()
    logger = create_file_logger(
        path, level=resolve_log_level(level), log_format=log_format
    )
    return logger.bind(command=command) if command else logger
