# ruff: noqa: TC001, TC002, TC003  # annotations are evaluated at runtime
"""Checkpoint lifecycle operations.

``CheckpointService`` implements init, create, list, restore, show and diff.
Each operation opens the repository, runs inside a ``BranchIsolation`` guard
and returns a result dataclass.
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Final

from dulwich.errors import (
    ChecksumMismatch,
    CommitError,
    FileFormatException,
    GitProtocolError,
    HookError,
    NoIndexPresent,
    NotGitRepository,
    ObjectMissing,
    RefFormatError,
    WrongObjectException,
)
from dulwich.porcelain import Error as PorcelainError
from structlog.typing import FilteringBoundLogger

from ccg.checkpoint._isolation import BranchIsolation
from ccg.checkpoint._models import (
    TIMESTAMP_FORMAT,
    CheckpointDetails,
    CreateResult,
    InitResult,
    ListEntry,
    RestorePreview,
    RestoreResult,
)
from ccg.checkpoint._resolver import DEFAULT_MAX_CANDIDATES, CommitResolver
from ccg.config import IdentityConfig
from ccg.diff import DiffRenderer, DiffReport, iter_tree_diff
from ccg.exceptions import (
    BackendOperationFailedError,
    BranchNotFoundError,
    CCGError,
    InvalidArgumentError,
    InvalidDateFormatError,
    NoChangesToCommitError,
    UncommittedChangesError,
    UserCancelledError,
)
from ccg.repository import (
    BOOTSTRAP_MESSAGE,
    CHECKPOINT_BRANCH,
    CheckpointInfo,
    CheckpointRepository,
)

DATE_FORMATS: Final = ("%Y-%m-%d", TIMESTAMP_FORMAT)

# dulwich exceptions that derive directly from Exception
DULWICH_ERRORS: Final = (
    ChecksumMismatch,
    CommitError,
    FileFormatException,
    GitProtocolError,
    HookError,
    NoIndexPresent,
    NotGitRepository,
    ObjectMissing,
    PorcelainError,
    RefFormatError,
    WrongObjectException,
)

type ConfirmRestore = Callable[[RestorePreview], bool]


def parse_since_date(value: str) -> datetime:
    """Parse a date filter given in local time.

    Args:
        value: ``YYYY-MM-DD`` or ``YYYY-MM-DD HH:MM:SS``.

    Returns:
        Timezone-aware datetime in the local timezone.

    Raises:
        InvalidDateFormatError: If the value matches neither format.
    """
    text = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).astimezone()  # noqa: DTZ007
        except ValueError:
            continue
    msg = f"Invalid date: '{value}'"
    raise InvalidDateFormatError(msg, value=value)


def is_bootstrap_commit(info: CheckpointInfo, empty_tree: str) -> bool:
    """True for the empty root commit written when the branch was bootstrapped."""
    return (
        not info.parent_shas
        and info.tree_sha == empty_tree
        and info.message.strip() == BOOTSTRAP_MESSAGE
    )


@contextmanager
def _backend_operation(operation: str) -> Iterator[None]:
    """Wrap unexpected backend failures in BackendOperationFailedError."""
    try:
        yield
    except CCGError:
        raise
    except (OSError, KeyError, ValueError, *DULWICH_ERRORS) as e:
        msg = f"Git operation '{operation}' failed: {e}"
        raise BackendOperationFailedError(msg, operation=operation) from e


class CheckpointService:
    """Checkpoint lifecycle on the repository containing a working directory.

    After every operation ``restore_error`` holds the exception raised while
    switching HEAD back to the user's branch, or None when that succeeded.

    Example:
        >>> service = CheckpointService(Path.cwd())
        >>> result = service.create("Before refactoring")
        >>> service.list_checkpoints(5)
    """

    __slots__: Final = (
        "_identity",
        "_logger",
        "_max_candidates",
        "_renderer",
        "_working_dir",
        "restore_error",
    )

    def __init__(
        self,
        working_dir: Path | None = None,
        *,
        identity: IdentityConfig | None = None,
        max_candidates: int = DEFAULT_MAX_CANDIDATES,
        renderer: DiffRenderer | None = None,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            working_dir: Directory inside the repository. Defaults to the
                current working directory at call time.
            identity: Fallback commit identity.
            max_candidates: Matches listed when a hash prefix is ambiguous.
            renderer: Diff renderer for show and diff.
            logger: Optional structured logger.
        """
        self._working_dir: Path | None = working_dir
        self._identity: IdentityConfig | None = identity
        self._max_candidates: int = max_candidates
        self._renderer: DiffRenderer = (
            renderer if renderer is not None else DiffRenderer()
        )
        self._logger: FilteringBoundLogger | None = logger
        self.restore_error: Exception | None = None

    # =========================================================================
    # Helpers
    # =========================================================================

    def _open(self) -> CheckpointRepository:
        return CheckpointRepository(self._working_dir, identity=self._identity)

    def _open_or_init(self) -> tuple[CheckpointRepository, bool]:
        repo, created = CheckpointRepository.open_or_init(
            self._working_dir, identity=self._identity
        )
        if created and self._logger:
            self._logger.info("repository_initialized", root=str(repo.root))
        return repo, created

    @contextmanager
    def _isolated(self, repo: CheckpointRepository) -> Iterator[BranchIsolation]:
        """Run a block on the checkpoint branch, recording restore failures."""
        guard = BranchIsolation(repo, logger=self._logger)
        self.restore_error = None
        try:
            with guard:
                yield guard
        finally:
            self.restore_error = guard.restore_error

    def _tip(self, repo: CheckpointRepository) -> str:
        tip = repo.branch_sha(CHECKPOINT_BRANCH)
        if tip is None:
            msg = f"Checkpoint branch '{CHECKPOINT_BRANCH}' does not exist"
            raise BranchNotFoundError(msg, branch=CHECKPOINT_BRANCH)
        return tip

    def _tree_of(self, repo: CheckpointRepository, sha: str) -> str:
        info = repo.get_commit(sha)
        if info is None:
            msg = f"Commit is missing from the object store: {sha}"
            raise BackendOperationFailedError(msg, operation="read-commit")
        return info.tree_sha

    def _resolver(self, repo: CheckpointRepository, tip: str | None) -> CommitResolver:
        return CommitResolver(
            repo, tip, max_candidates=self._max_candidates, logger=self._logger
        )

    def _render(
        self, repo: CheckpointRepository, old_tree: str | None, new_tree: str | None
    ) -> DiffReport:
        return self._renderer.render(
            iter_tree_diff(repo.object_store, old_tree, new_tree)
        )

    # =========================================================================
    # Operations
    # =========================================================================

    def init(self) -> InitResult:
        """Set up checkpoint tracking.

        Initializes a repository when none exists (with HEAD on the checkpoint
        branch) and makes sure the checkpoint branch exists.

        Returns:
            InitResult describing what was set up.
        """
        with _backend_operation("init"):
            repo, created = self._open_or_init()
            with repo:
                with self._isolated(repo) as guard:
                    bootstrapped = guard.bootstrapped
                head = repo.read_head()
                return InitResult(
                    root=repo.root,
                    created=created,
                    bootstrapped=bootstrapped,
                    current_branch=head.describe(),
                    tip=repo.branch_sha(CHECKPOINT_BRANCH),
                )

    def create(self, message: str) -> CreateResult:
        """Snapshot the working tree as a new checkpoint.

        A repository is initialized when the working directory is not inside
        one.

        Args:
            message: Commit message for the checkpoint.

        Returns:
            CreateResult with the new SHA, or ``no_changes`` set when the
            working tree matches the latest checkpoint.
        """
        with _backend_operation("create"):
            repo, created = self._open_or_init()
            with repo, self._isolated(repo):
                tip = repo.branch_sha(CHECKPOINT_BRANCH)
                try:
                    sha = self._commit_snapshot(repo, tip, message)
                except NoChangesToCommitError:
                    if self._logger:
                        self._logger.info("checkpoint_skipped", reason="no_changes")
                    return CreateResult(
                        sha=None,
                        message=message,
                        no_changes=True,
                        repository_created=created,
                    )

        if self._logger:
            self._logger.info("checkpoint_created", sha=sha, parent=tip)
        return CreateResult(sha=sha, message=message, repository_created=created)

    def _commit_snapshot(
        self, repo: CheckpointRepository, tip: str | None, message: str
    ) -> str:
        """Commit the working tree on top of ``tip``.

        Raises:
            NoChangesToCommitError: If the working tree matches ``tip``.
        """
        if tip is None:
            if not repo.has_worktree_files():
                msg = "No files to checkpoint"
                raise NoChangesToCommitError(msg)
        elif repo.snapshot_worktree() == self._tree_of(repo, tip):
            msg = "Working tree matches the latest checkpoint"
            raise NoChangesToCommitError(msg)

        tree = repo.stage_all()
        parents = [tip] if tip is not None else []
        sha = repo.create_commit(tree, parents, message)
        repo.advance_branch(CHECKPOINT_BRANCH, tip, sha)
        return sha

    def list_checkpoints(
        self, limit: int, since: datetime | None = None
    ) -> list[ListEntry]:
        """List checkpoints, newest first.

        Args:
            limit: Maximum number of entries, must be positive.
            since: Skip checkpoints older than this moment.

        Returns:
            Up to ``limit`` entries. The bootstrap root commit is never listed.

        Raises:
            InvalidArgumentError: If limit is not positive.
        """
        if limit <= 0:
            msg = f"Limit must be a positive number, got {limit}"
            raise InvalidArgumentError(msg, argument="limit")

        with _backend_operation("list"):
            with self._open() as repo, self._isolated(repo):
                tip = self._tip(repo)
                empty_tree = repo.write_empty_tree()
                entries: list[ListEntry] = []
                for info in repo.iter_history(tip):
                    if is_bootstrap_commit(info, empty_tree):
                        continue
                    if since is not None and info.timestamp < since:
                        continue
                    entries.append(ListEntry.from_info(info, is_latest=info.sha == tip))
                    if len(entries) >= limit:
                        break
                return entries

    def restore(
        self, query: str, confirm: ConfirmRestore | None = None
    ) -> RestoreResult:
        """Reset the checkpoint branch and working tree to a checkpoint.

        Checkpoints newer than the target leave the branch. Non-ignored files
        that are not part of the target are deleted.

        Args:
            query: Hash or hash prefix of the target checkpoint.
            confirm: Called with a preview before anything changes; a false
                answer cancels the restore.

        Returns:
            RestoreResult describing the reset.

        Raises:
            UncommittedChangesError: If the working tree differs from the
                latest checkpoint.
            UserCancelledError: If ``confirm`` declined.
        """
        with _backend_operation("restore"):
            with self._open() as repo, self._isolated(repo) as guard:
                tip = self._tip(repo)
                target = self._resolver(repo, tip).resolve(query)
                self._ensure_clean(repo)

                discarded = repo.count_commits_between(target.sha, tip)
                preview = RestorePreview(target=target, discarded=discarded)
                if confirm is not None and not confirm(preview):
                    msg = "Restore cancelled"
                    raise UserCancelledError(msg)

                reset = repo.hard_reset(CHECKPOINT_BRANCH, target.sha)
                original = guard.original

        if self._logger:
            self._logger.info(
                "checkpoint_restored",
                sha=target.sha,
                discarded=discarded,
                removed=len(reset.removed),
            )
        return RestoreResult(
            target=target,
            discarded=discarded,
            original=original,
            removed=reset.removed,
            written=len(reset.written),
        )

    def _ensure_clean(self, repo: CheckpointRepository) -> None:
        paths = repo.dirty_paths()
        if not paths:
            return
        msg = (
            f"Working tree has uncommitted changes in {len(paths)} path(s); "
            "restore would overwrite them"
        )
        raise UncommittedChangesError(msg, paths=paths)

    def show(self, query: str, *, include_diff: bool = False) -> CheckpointDetails:
        """Describe a checkpoint and its changes against its first parent.

        Args:
            query: Hash or hash prefix.
            include_diff: Attach the rendered diff.

        Returns:
            CheckpointDetails with file statistics and, optionally, the diff.
        """
        with _backend_operation("show"):
            with self._open() as repo, self._isolated(repo):
                info = self._resolver(repo, self._tip(repo)).resolve(query)
                parent_tree = None
                if info.parent_shas:
                    parent_tree = self._tree_of(repo, info.parent_shas[0])
                report = self._render(repo, parent_tree, info.tree_sha)

        return CheckpointDetails(
            info=info,
            stats=report.stats,
            report=report if include_diff else None,
        )

    def diff(self, hash_a: str, hash_b: str | None = None) -> DiffReport:
        """Compare a checkpoint with another checkpoint or the working tree.

        Args:
            hash_a: Hash or prefix of the base checkpoint.
            hash_b: Hash or prefix of the other checkpoint. When omitted the
                live working tree is used.

        Returns:
            The rendered diff from ``hash_a`` to the other side.
        """
        with _backend_operation("diff"):
            with self._open() as repo, self._isolated(repo):
                resolver = self._resolver(repo, self._tip(repo))
                base = resolver.resolve(hash_a)
                if hash_b is not None:
                    other_tree = resolver.resolve(hash_b).tree_sha
                else:
                    other_tree = repo.snapshot_worktree()
                return self._render(repo, base.tree_sha, other_tree)
