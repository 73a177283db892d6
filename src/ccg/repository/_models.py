# ruff: noqa: TC003  # datetime needed at runtime for dataclass fields
"""Checkpoint repository models.

This module defines data structures describing repository state as seen
by the checkpoint operations.
"""

from dataclasses import dataclass
from datetime import datetime

SHORT_SHA_LENGTH = 7


@dataclass(frozen=True, slots=True)
class CheckpointInfo:
    """Information about a single checkpoint commit.

    Attributes:
        sha: Full 40-character commit SHA hex string.
        message: Complete commit message (subject + body).
        author_name: Author name from commit.
        author_email: Author email from commit.
        timestamp: Author timestamp with the commit's timezone.
        parent_shas: SHA hex strings of parent commits (empty for a root commit).
        tree_sha: SHA hex string of the commit's tree.
    """

    sha: str
    message: str
    author_name: str
    author_email: str
    timestamp: datetime
    parent_shas: tuple[str, ...]
    tree_sha: str

    @property
    def short_sha(self) -> str:
        """Abbreviated SHA used in user-facing output."""
        return self.sha[:SHORT_SHA_LENGTH]

    @property
    def summary(self) -> str:
        """First line of the commit message."""
        lines = self.message.splitlines()
        return lines[0] if lines else ""


@dataclass(frozen=True, slots=True)
class HeadState:
    """Where HEAD points.

    Exactly one of ``branch`` and ``sha`` is set: ``branch`` when HEAD is a
    symbolic reference to a local branch (which may be unborn), ``sha`` when
    HEAD is detached.

    Attributes:
        branch: Local branch name HEAD refers to.
        sha: Commit SHA of a detached HEAD.
    """

    branch: str | None
    sha: str | None = None

    @property
    def is_detached(self) -> bool:
        """True when HEAD is not attached to a branch."""
        return self.branch is None

    def describe(self) -> str:
        """Human-readable name of the head."""
        if self.branch is not None:
            return self.branch
        return f"(detached at {(self.sha or '')[:SHORT_SHA_LENGTH]})"


@dataclass(frozen=True, slots=True)
class ResetResult:
    """Result of a hard reset.

    Attributes:
        sha: Commit SHA the branch now points to.
        written: Repository-relative paths written from the target tree.
        removed: Repository-relative paths deleted from the working tree.
    """

    sha: str
    written: frozenset[str]
    removed: frozenset[str]
