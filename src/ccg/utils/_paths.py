"""Filesystem locations used by ccg."""

from pathlib import Path

import platformdirs


def get_ccg_log_dir() -> Path:
    """Get the per-user directory for ccg log files.

    Returns:
        Path to the platform log directory for ccg.
    """
    return platformdirs.user_log_path("ccg")


def get_ccg_cli_log_file() -> Path:
    """Get the path to the default CLI log file.

    Returns:
        Path to ``cli.log`` inside the ccg log directory.
    """
    return get_ccg_log_dir() / "cli.log"


def get_user_config_path() -> Path:
    r"""Get platform-specific user config file path.

    - Linux: ``~/.config/ccg/config.toml``
    - macOS: ``~/Library/Application Support/ccg/config.toml``
    - Windows: ``%APPDATA%\ccg\config.toml``

    Returns:
        Path to the user config file for the current platform.
    """
    return platformdirs.user_config_path("ccg") / "config.toml"
