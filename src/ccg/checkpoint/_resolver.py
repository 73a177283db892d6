# ruff: noqa: TC001, TC002  # annotations are evaluated at runtime
"""Resolution of user-supplied hash queries to checkpoints."""

from typing import Final

from structlog.typing import FilteringBoundLogger

from ccg.exceptions import AmbiguousHashError, CheckpointNotFoundError, InvalidHashError
from ccg.repository import CheckpointInfo, CheckpointRepository

MIN_PREFIX_LENGTH: Final = 2
FULL_HASH_LENGTH: Final = 40
DEFAULT_MAX_CANDIDATES: Final = 5


class CommitResolver:
    """Resolve full hashes and hash prefixes to checkpoint commits.

    Full 40-character hashes are looked up directly. Shorter prefixes are
    matched against the ancestry of the checkpoint branch tip, newest first.

    Attributes:
        tip: Commit the prefix search starts from, or None for an empty branch.
        max_candidates: Number of matches reported in an ambiguity error.
    """

    __slots__: Final = ("_logger", "_repo", "max_candidates", "tip")

    def __init__(
        self,
        repo: CheckpointRepository,
        tip: str | None,
        *,
        max_candidates: int = DEFAULT_MAX_CANDIDATES,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        self._repo: CheckpointRepository = repo
        self._logger: FilteringBoundLogger | None = logger
        self.tip: str | None = tip
        self.max_candidates: int = max_candidates

    def resolve(self, query: str) -> CheckpointInfo:
        """Resolve a hash or hash prefix.

        Args:
            query: Full hash or prefix of at least two characters. Surrounding
                whitespace and letter case are ignored.

        Returns:
            The matching checkpoint.

        Raises:
            InvalidHashError: If the query is too short or too long.
            CheckpointNotFoundError: If nothing matches.
            AmbiguousHashError: If a prefix matches several checkpoints.
        """
        normalized = query.strip().lower()
        if len(normalized) < MIN_PREFIX_LENGTH:
            msg = (
                f"Hash '{normalized}' is too short: "
                f"at least {MIN_PREFIX_LENGTH} characters are required"
            )
            raise InvalidHashError(msg, query=normalized)
        if len(normalized) > FULL_HASH_LENGTH:
            msg = (
                f"Hash '{normalized}' is too long: "
                f"at most {FULL_HASH_LENGTH} characters are allowed"
            )
            raise InvalidHashError(msg, query=normalized)

        if len(normalized) == FULL_HASH_LENGTH:
            info = self._repo.get_commit(normalized)
            if info is None:
                msg = f"Checkpoint not found: {normalized}"
                raise CheckpointNotFoundError(msg, query=normalized)
            return info

        return self._resolve_prefix(normalized)

    def _resolve_prefix(self, prefix: str) -> CheckpointInfo:
        matches: list[CheckpointInfo] = []
        if self.tip is not None:
            matches = [
                info
                for info in self._repo.iter_history(self.tip)
                if info.sha.startswith(prefix)
            ]

        if self._logger:
            self._logger.debug(
                "hash_prefix_resolved", prefix=prefix, match_count=len(matches)
            )

        if not matches:
            msg = f"No checkpoint matches '{prefix}'"
            raise CheckpointNotFoundError(msg, query=prefix)
        if len(matches) == 1:
            return matches[0]

        shown = matches[: self.max_candidates]
        msg = f"Hash prefix '{prefix}' is ambiguous: {len(matches)} checkpoints match"
        raise AmbiguousHashError(
            msg,
            query=prefix,
            candidates=tuple((info.short_sha, info.summary) for info in shown),
            remaining=len(matches) - len(shown),
        )
