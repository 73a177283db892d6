"""Shared test fixtures for ccg tests."""

import os
import re
from collections.abc import Iterator, Mapping
from pathlib import Path

import pytest
from dulwich import porcelain
from dulwich.repo import Repo
from rich.console import Console

from ccg.cli import CLIContext
from ccg.repository import CHECKPOINT_BRANCH, CheckpointInfo, CheckpointRepository

TEST_AUTHOR = "Test User <test@example.com>"
_CREATED = re.compile(r"Created checkpoint: ([0-9a-f]+)")


@pytest.fixture(autouse=True)
def _isolate_environment(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> Iterator[None]:
    """Keep tests away from the real user config, logs and git identity."""
    home = tmp_path_factory.mktemp("home")
    for key in list(os.environ):
        if key.startswith("CCG_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / "config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(home / "state"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("LANG", "en_US.UTF-8")
    monkeypatch.setenv("CCG_LOGGING__FILE", str(home / "cli.log"))
    monkeypatch.setenv("CCG_AUTHOR_NAME", "Test User")
    monkeypatch.setenv("CCG_AUTHOR_EMAIL", "test@example.com")
    yield
    CLIContext.reset()


@pytest.fixture
def console() -> Console:
    return Console(
        width=70,
        force_terminal=True,
        highlight=False,
        color_system=None,
        legacy_windows=False,
    )


@pytest.fixture
def work_dir(tmp_path: Path) -> Path:
    """An empty directory that is not a git repository."""
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def git_repo(work_dir: Path) -> Path:
    """A freshly initialized git repository with no commits."""
    Repo.init(str(work_dir)).close()
    return work_dir


# ---------------------------------------------------------------------------
# Helper functions for building repository state
# ---------------------------------------------------------------------------


def write_files(root: Path, files: Mapping[str, str | bytes]) -> None:
    """Write files relative to ``root``, creating parent directories."""
    for name, content in files.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content)


def commit_files(
    root: Path, files: Mapping[str, str | bytes], message: str = "user commit"
) -> str:
    """Write files and commit them on the current branch with plain git semantics.

    Returns:
        The new commit SHA.
    """
    write_files(root, files)
    with Repo(str(root)) as repo:
        porcelain.add(repo, paths=[str(root / name) for name in files])
        sha = porcelain.commit(
            repo,
            message=message.encode(),
            author=TEST_AUTHOR.encode(),
            committer=TEST_AUTHOR.encode(),
        )
    return sha.decode("ascii")


def read_head_ref(root: Path) -> bytes:
    """Return the raw HEAD reference value (``ref: ...`` or a SHA)."""
    with Repo(str(root)) as repo:
        value = repo.refs.read_ref(b"HEAD")
    assert value is not None
    return value


def listed_files(root: Path) -> set[str]:
    """Return repository-relative paths of all files outside ``.git``."""
    return {
        path.relative_to(root).as_posix()
        for path in root.rglob("*")
        if path.is_file() and ".git" not in path.relative_to(root).parts
    }


def created_sha(output: str) -> str:
    """Extract the SHA printed by ``ccg create``."""
    match = _CREATED.search(output)
    assert match is not None, output
    return match.group(1)


def latest_checkpoint(root: Path) -> CheckpointInfo:
    """Return the checkpoint at the tip of the checkpoint branch."""
    with CheckpointRepository(root) as repo:
        tip = repo.branch_sha(CHECKPOINT_BRANCH)
        assert tip is not None
        info = repo.get_commit(tip)
    assert info is not None
    return info
