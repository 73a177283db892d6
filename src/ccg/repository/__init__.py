"""Checkpoint repository access.

Classes:
    CheckpointRepository: dulwich-backed repository wrapper.

Models:
    CheckpointInfo: Metadata about a single checkpoint commit.
    HeadState: Where HEAD points (branch or detached commit).
    ResetResult: Outcome of a hard reset.

Example:
    >>> from ccg.repository import CheckpointRepository
    >>> with CheckpointRepository() as repo:
    ...     head = repo.read_head()
    ...     print(head.describe())
"""

from ccg.repository._models import (
    SHORT_SHA_LENGTH,
    CheckpointInfo,
    HeadState,
    ResetResult,
)
from ccg.repository._repository import (
    BOOTSTRAP_MESSAGE,
    CHECKPOINT_BRANCH,
    CheckpointRepository,
    branch_ref,
    commit_to_info,
)

__all__ = [
    "BOOTSTRAP_MESSAGE",
    "CHECKPOINT_BRANCH",
    "SHORT_SHA_LENGTH",
    "CheckpointInfo",
    "CheckpointRepository",
    "HeadState",
    "ResetResult",
    "branch_ref",
    "commit_to_info",
]
