# ruff: noqa: TC001, TC002  # annotations are evaluated at runtime
"""Branch isolation around checkpoint operations.

Every checkpoint operation runs with HEAD pointing at the checkpoint branch.
``BranchIsolation`` switches HEAD there on entry, bootstrapping the branch
when it does not exist yet, and points HEAD back at the user's branch (or
detached commit) on exit. Switching is symbolic only: the index and the
working tree are never touched by the guard.
"""

from enum import StrEnum
from types import TracebackType
from typing import Final, Self

from structlog.typing import FilteringBoundLogger

from ccg.repository import (
    BOOTSTRAP_MESSAGE,
    CHECKPOINT_BRANCH,
    CheckpointRepository,
    HeadState,
)

# The head recorded on entry and reinstated on exit.
OriginalHead = HeadState


class IsolationState(StrEnum):
    """Lifecycle of an isolation guard."""

    OUTSIDE = "outside"
    SWITCHING = "switching"
    INSIDE = "inside"
    RESTORING = "restoring"


class BranchIsolation:
    """Context manager that runs a block on the checkpoint branch.

    ``leave`` runs exactly once for every successful ``enter``, on every exit
    path. A failure to switch back never masks the result (or the error) of
    the guarded block: it is stored in ``restore_error`` and logged.

    Attributes:
        state: Current lifecycle state.
        original: Head recorded by ``enter``.
        bootstrapped: True when ``enter`` created the checkpoint branch.
        restore_error: Exception raised while switching back, if any.

    Example:
        >>> with BranchIsolation(repo) as guard:
        ...     repo.branch_sha(CHECKPOINT_BRANCH)
    """

    __slots__: Final = (
        "_branch",
        "_logger",
        "_repo",
        "bootstrapped",
        "original",
        "restore_error",
        "state",
    )

    def __init__(
        self,
        repo: CheckpointRepository,
        *,
        branch: str = CHECKPOINT_BRANCH,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        self._repo: CheckpointRepository = repo
        self._branch: str = branch
        self._logger: FilteringBoundLogger | None = logger
        self.state: IsolationState = IsolationState.OUTSIDE
        self.original: OriginalHead | None = None
        self.bootstrapped: bool = False
        self.restore_error: Exception | None = None

    @property
    def branch(self) -> str:
        """Name of the checkpoint branch."""
        return self._branch

    def enter(self) -> OriginalHead:
        """Switch HEAD to the checkpoint branch.

        When the checkpoint branch is missing it is created at the current
        head commit. An unborn current branch first receives an empty root
        commit so the checkpoint branch has something to point at.

        Returns:
            The head to reinstate on ``leave``.

        Raises:
            RuntimeError: If the guard is already active.
        """
        if self.state is not IsolationState.OUTSIDE:
            msg = f"Cannot enter branch isolation while {self.state.value}"
            raise RuntimeError(msg)

        self.state = IsolationState.SWITCHING
        try:
            original = self._repo.read_head()
            if self._repo.branch_sha(self._branch) is None:
                self._bootstrap(original)
            if original.branch != self._branch:
                self._repo.point_head_at_branch(self._branch)
        except BaseException:
            self.state = IsolationState.OUTSIDE
            raise

        self.original = original
        self.state = IsolationState.INSIDE
        if self._logger:
            self._logger.debug(
                "branch_isolation_entered",
                original=original.describe(),
                bootstrapped=self.bootstrapped,
            )
        return original

    def _bootstrap(self, head: OriginalHead) -> None:
        """Create the checkpoint branch at the current head commit."""
        current = self._repo.head_sha(head)
        if current is None and head.branch is not None:
            tree = self._repo.write_empty_tree()
            current = self._repo.create_commit(tree, [], BOOTSTRAP_MESSAGE)
            self._repo.advance_branch(head.branch, None, current)

        if current is not None and head.branch != self._branch:
            self._repo.create_branch(self._branch, current)

        self.bootstrapped = True
        if self._logger:
            self._logger.info(
                "checkpoint_branch_bootstrapped",
                branch=self._branch,
                base=head.describe(),
                sha=current,
            )

    def leave(self) -> None:
        """Point HEAD back at the head recorded by ``enter``.

        Does nothing unless the guard is inside. Errors are captured in
        ``restore_error`` instead of being raised.
        """
        if self.state is not IsolationState.INSIDE or self.original is None:
            return

        self.state = IsolationState.RESTORING
        original = self.original
        try:
            if original.branch is not None:
                if original.branch != self._branch:
                    self._repo.point_head_at_branch(original.branch)
            elif original.sha is not None:
                self._repo.detach_head(original.sha)
        except Exception as e:  # noqa: BLE001
            self.restore_error = e
            if self._logger:
                self._logger.warning(
                    "branch_restore_failed",
                    original=original.describe(),
                    error=str(e),
                )
        finally:
            self.state = IsolationState.OUTSIDE

    def __enter__(self) -> Self:
        """Enter the checkpoint branch."""
        _ = self.enter()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Switch back to the original head."""
        self.leave()
