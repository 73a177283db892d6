"""Checkpoint Guardian exceptions."""

from pathlib import Path  # noqa: TC003
from typing import Any, ClassVar


class CCGError(Exception):
    """Base exception for Checkpoint Guardian errors.

    Attributes:
        hint: Remediation hint shown by the CLI below the error chain.
    """

    hint: ClassVar[str] = "Run 'ccg --help' for usage information."


# =============================================================================
# Repository Exceptions
# =============================================================================


class RepositoryNotFoundError(CCGError):
    """Raised when no git repository is found.

    Attributes:
        path: The directory that was searched.
    """

    hint: ClassVar[str] = (
        "Run 'ccg init' to create a repository, or run the command inside one."
    )

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        """Initialize with error message and path context.

        Args:
            message: Human-readable error message.
            path: The directory that was searched.
        """
        super().__init__(message)
        self.path: Path | None = path


class BranchNotFoundError(CCGError):
    """Raised when a branch reference does not exist.

    Attributes:
        branch: Name of the missing branch.
    """

    hint: ClassVar[str] = "Run 'ccg init' to create the checkpoint branch."

    def __init__(self, message: str, *, branch: str) -> None:
        """Initialize with error message and branch context."""
        super().__init__(message)
        self.branch: str = branch


class BackendOperationFailedError(CCGError):
    """Raised when an underlying git operation fails.

    The original exception is available as ``__cause__``.

    Attributes:
        operation: Short name of the failed operation.
    """

    hint: ClassVar[str] = "Check that the repository is not corrupted or locked."

    def __init__(self, message: str, *, operation: str) -> None:
        """Initialize with error message and operation context."""
        super().__init__(message)
        self.operation: str = operation


# =============================================================================
# Checkpoint Exceptions
# =============================================================================


class CheckpointNotFoundError(CCGError):
    """Raised when no checkpoint matches a hash query.

    Attributes:
        query: The hash or prefix that was looked up.
    """

    hint: ClassVar[str] = "Run 'ccg list' to see available checkpoints."

    def __init__(self, message: str, *, query: str) -> None:
        """Initialize with error message and query context."""
        super().__init__(message)
        self.query: str = query


class InvalidHashError(CCGError):
    """Raised when a hash query cannot be used for lookup.

    Attributes:
        query: The rejected hash or prefix.
    """

    hint: ClassVar[str] = (
        "Use at least 2 hexadecimal characters of a hash shown by 'ccg list'."
    )

    def __init__(self, message: str, *, query: str) -> None:
        """Initialize with error message and query context."""
        super().__init__(message)
        self.query: str = query


class AmbiguousHashError(InvalidHashError):
    """Raised when a hash prefix matches more than one checkpoint.

    Attributes:
        query: The ambiguous prefix.
        candidates: Leading matches as (short hash, summary) pairs.
        remaining: Number of matches not included in candidates.
    """

    hint: ClassVar[str] = "Use a longer hash prefix to select a single checkpoint."

    def __init__(
        self,
        message: str,
        *,
        query: str,
        candidates: tuple[tuple[str, str], ...],
        remaining: int = 0,
    ) -> None:
        """Initialize with error message and disambiguation context.

        Args:
            message: Human-readable error message.
            query: The ambiguous prefix.
            candidates: Leading matches as (short hash, summary) pairs.
            remaining: Number of matches not included in candidates.
        """
        super().__init__(message, query=query)
        self.candidates: tuple[tuple[str, str], ...] = candidates
        self.remaining: int = remaining


class InvalidDateFormatError(CCGError):
    """Raised when a date argument cannot be parsed.

    Attributes:
        value: The rejected input.
    """

    hint: ClassVar[str] = "Use YYYY-MM-DD or 'YYYY-MM-DD HH:MM:SS'."

    def __init__(self, message: str, *, value: str) -> None:
        """Initialize with error message and value context."""
        super().__init__(message)
        self.value: str = value


class UncommittedChangesError(CCGError):
    """Raised when the working tree differs from the latest checkpoint.

    Attributes:
        paths: Repository-relative paths that differ.
    """

    hint: ClassVar[str] = (
        "Create a checkpoint with 'ccg create' or discard your changes first."
    )

    def __init__(self, message: str, *, paths: tuple[str, ...] = ()) -> None:
        """Initialize with error message and changed paths."""
        super().__init__(message)
        self.paths: tuple[str, ...] = paths


class NoChangesToCommitError(CCGError):
    """Raised when a checkpoint would be identical to its parent."""


class InvalidArgumentError(CCGError):
    """Raised when a command argument is out of range.

    Attributes:
        argument: Name of the offending argument.
    """

    def __init__(self, message: str, *, argument: str) -> None:
        """Initialize with error message and argument name."""
        super().__init__(message)
        self.argument: str = argument


class UserCancelledError(CCGError):
    """Raised when the user declines a confirmation prompt."""

    hint: ClassVar[str] = ""


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigError(CCGError):
    """Base exception for configuration errors."""

    hint: ClassVar[str] = "Fix the configuration file or unset the CCG_* variable."


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and optional location context."""
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column


class ConfigValidationError(ConfigError):
    """Raised when configuration fails validation."""

    def __init__(
        self,
        message: str,
        *,
        key: str,
        value: Any,  # pyright: ignore[reportAny,reportExplicitAny]
        expected: str,
        source: str | None = None,
    ) -> None:
        """Initialize with error message and validation context."""
        super().__init__(message)
        self.key: str = key
        self.value: Any = value  # pyright: ignore[reportExplicitAny]
        self.expected: str = expected
        self.source: str | None = source
