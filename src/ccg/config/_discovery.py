"""Configuration source discovery.

This module locates the configuration files that apply to a working
directory: the per-user file, the project file committed at the worktree
root, and the private file inside the git directory.
"""

from pathlib import Path
from typing import Any

from dulwich.errors import NotGitRepository
from dulwich.repo import Repo

from ccg.utils import get_user_config_path

from ._defaults import DEFAULT_CONFIG
from ._models._common import ConfigSource, ConfigSourceName

PROJECT_CONFIG_NAME = ".ccg.toml"
REPOSITORY_CONFIG_NAME = "ccg.toml"


def find_repository_dirs(start: Path | None = None) -> tuple[Path, Path] | None:
    """Find the worktree root and git directory containing ``start``.

    Args:
        start: Directory to start searching from. Defaults to the current
            working directory.

    Returns:
        Tuple of (worktree root, git directory), or None outside a repository.
    """
    search_path = str((start or Path.cwd()).resolve())
    try:
        repo = Repo.discover(search_path)
    except NotGitRepository:
        return None
    try:
        return Path(repo.path), Path(repo.controldir())
    finally:
        repo.close()


def _file_exists(path: Path) -> bool:
    """Check if a file exists, handling permission errors gracefully."""
    try:
        return path.is_file()
    except OSError:
        return False


def discover_sources(
    start: Path | None = None,
    *,
    include_env: bool = True,
    cli_overrides: dict[str, Any] | None = None,  # pyright: ignore[reportExplicitAny]
) -> list[ConfigSource]:
    """Discover all configuration sources.

    Sources are returned in precedence order (highest first). File-based
    sources are included even when missing, with ``exists=False``. Sources
    that depend on a repository are omitted outside one.

    Args:
        start: Directory used to locate the repository.
        include_env: Include environment variables as a source.
        cli_overrides: Values set by command-line flags.

    Returns:
        List of ConfigSource objects in precedence order (highest first).
    """
    sources: list[ConfigSource] = []

    if cli_overrides is not None:
        sources.append(
            ConfigSource(
                name=ConfigSourceName.CLI,
                path=None,
                exists=bool(cli_overrides),
                values=cli_overrides,
            )
        )

    if include_env:
        sources.append(
            ConfigSource(
                name=ConfigSourceName.ENV,
                path=None,
                exists=True,  # Actual values parsed during loading phase
                values={},
            )
        )

    dirs = find_repository_dirs(start)
    if dirs is not None:
        worktree_root, git_dir = dirs
        repository_path = git_dir / REPOSITORY_CONFIG_NAME
        sources.append(
            ConfigSource(
                name=ConfigSourceName.REPOSITORY,
                path=repository_path,
                exists=_file_exists(repository_path),
                values={},
            )
        )
        project_path = worktree_root / PROJECT_CONFIG_NAME
        sources.append(
            ConfigSource(
                name=ConfigSourceName.PROJECT,
                path=project_path,
                exists=_file_exists(project_path),
                values={},
            )
        )

    user_path = get_user_config_path()
    sources.append(
        ConfigSource(
            name=ConfigSourceName.USER,
            path=user_path,
            exists=_file_exists(user_path),
            values={},
        )
    )

    sources.append(
        ConfigSource(
            name=ConfigSourceName.DEFAULT,
            path=None,
            exists=True,
            values=DEFAULT_CONFIG,
        )
    )

    return sources
