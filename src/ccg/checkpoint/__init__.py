"""Checkpoint lifecycle.

The checkpoint branch is a private ledger of working-tree snapshots. This
package resolves hash queries (``CommitResolver``), isolates every operation
on the checkpoint branch (``BranchIsolation``) and implements the lifecycle
operations (``CheckpointService``).
"""

from ccg.checkpoint._isolation import BranchIsolation, IsolationState, OriginalHead
from ccg.checkpoint._models import (
    LEGACY_MESSAGE_PREFIX,
    TIMESTAMP_FORMAT,
    CheckpointDetails,
    CreateResult,
    InitResult,
    ListEntry,
    RestorePreview,
    RestoreResult,
)
from ccg.checkpoint._resolver import (
    DEFAULT_MAX_CANDIDATES,
    FULL_HASH_LENGTH,
    MIN_PREFIX_LENGTH,
    CommitResolver,
)
from ccg.checkpoint._service import (
    CheckpointService,
    ConfirmRestore,
    is_bootstrap_commit,
    parse_since_date,
)

__all__ = [
    "DEFAULT_MAX_CANDIDATES",
    "FULL_HASH_LENGTH",
    "LEGACY_MESSAGE_PREFIX",
    "MIN_PREFIX_LENGTH",
    "TIMESTAMP_FORMAT",
    "BranchIsolation",
    "CheckpointDetails",
    "CheckpointService",
    "CommitResolver",
    "ConfirmRestore",
    "CreateResult",
    "InitResult",
    "IsolationState",
    "ListEntry",
    "OriginalHead",
    "RestorePreview",
    "RestoreResult",
    "is_bootstrap_commit",
    "parse_since_date",
]
