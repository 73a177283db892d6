# ruff: noqa: TC001, TC003  # types needed at runtime for dataclass fields
"""Checkpoint operation results.

Operations return these dataclasses; presentation is left to the caller.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Final, Self

from ccg.diff import ChangeKind, DiffReport, DiffStats
from ccg.repository import CheckpointInfo, HeadState

TIMESTAMP_FORMAT: Final = "%Y-%m-%d %H:%M:%S"
LEGACY_MESSAGE_PREFIX: Final = "Checkpoint created with raw input: "


@dataclass(frozen=True, slots=True)
class InitResult:
    """Result of initializing checkpoint tracking.

    Attributes:
        root: Working tree root of the repository.
        created: True when a new repository was initialized.
        bootstrapped: True when the checkpoint branch was created.
        current_branch: Head description after the operation.
        tip: Checkpoint branch tip.
    """

    root: Path
    created: bool
    bootstrapped: bool
    current_branch: str
    tip: str | None


@dataclass(frozen=True, slots=True)
class CreateResult:
    """Result of creating a checkpoint.

    Attributes:
        sha: New checkpoint SHA, or None when nothing changed.
        message: Commit message used (or that would have been used).
        no_changes: True when the working tree matched the latest checkpoint.
        repository_created: True when a repository was initialized on demand.
    """

    sha: str | None
    message: str
    no_changes: bool = False
    repository_created: bool = False


@dataclass(frozen=True, slots=True)
class ListEntry:
    """A checkpoint as shown in listings."""

    sha: str
    short_sha: str
    timestamp: str
    summary: str
    is_latest: bool = False

    @classmethod
    def from_info(cls, info: CheckpointInfo, *, is_latest: bool = False) -> Self:
        """Build a listing entry from checkpoint information."""
        summary = info.summary.removeprefix(LEGACY_MESSAGE_PREFIX)
        return cls(
            sha=info.sha,
            short_sha=info.short_sha,
            timestamp=info.timestamp.strftime(TIMESTAMP_FORMAT),
            summary=summary,
            is_latest=is_latest,
        )


@dataclass(frozen=True, slots=True)
class RestorePreview:
    """What a restore is about to do, offered for confirmation.

    Attributes:
        target: Checkpoint that will become the tip.
        discarded: Checkpoints newer than the target that leave the branch.
    """

    target: CheckpointInfo
    discarded: int


@dataclass(frozen=True, slots=True)
class RestoreResult:
    """Result of restoring a checkpoint.

    Attributes:
        target: Checkpoint that is now the tip.
        discarded: Number of checkpoints removed from the branch.
        original: Head the user was on, reinstated afterwards.
        removed: Paths deleted from the working tree.
        written: Number of files written from the checkpoint.
    """

    target: CheckpointInfo
    discarded: int
    original: HeadState | None
    removed: frozenset[str]
    written: int


@dataclass(frozen=True, slots=True)
class CheckpointDetails:
    """A checkpoint with its changes relative to its first parent.

    Attributes:
        info: The checkpoint.
        stats: Per-file change statistics.
        report: Rendered diff, present only when requested.
    """

    info: CheckpointInfo
    stats: DiffStats
    report: DiffReport | None = None

    def status_counts(self) -> dict[ChangeKind, int]:
        """Count changed files per change kind."""
        return self.stats.count_by_kind()
