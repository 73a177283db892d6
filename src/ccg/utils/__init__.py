"""Shared utilities for ccg."""

from ._author import AuthorInfo, get_author_info
from ._logging import (
    LogFormatType,
    create_cli_logger,
    create_file_logger,
    resolve_log_level,
)
from ._paths import get_ccg_cli_log_file, get_ccg_log_dir, get_user_config_path

__all__ = [
    "AuthorInfo",
    "LogFormatType",
    "create_cli_logger",
    "create_file_logger",
    "get_author_info",
    "get_ccg_cli_log_file",
    "get_ccg_log_dir",
    "get_user_config_path",
    "resolve_log_level",
]
