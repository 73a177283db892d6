"""Shared CLI utilities for commands.

This module provides common utilities used across CLI command implementations:
- Standardized exit codes
- Console construction honoring the global flags
- Error reporting with cause chains and remediation hints
"""

from enum import IntEnum
from pathlib import Path  # noqa: TC003
from typing import Final, Never

from rich.console import Console
from rich.markup import escape

from ccg.checkpoint import CheckpointService
from ccg.diff import DiffRenderer
from ccg.exceptions import (
    AmbiguousHashError,
    BranchNotFoundError,
    CCGError,
    CheckpointNotFoundError,
    ConfigError,
    InvalidArgumentError,
    InvalidDateFormatError,
    InvalidHashError,
    RepositoryNotFoundError,
    UncommittedChangesError,
    UserCancelledError,
)

from ._context import CLIContext

MAX_LISTED_PATHS: Final = 10

__all__ = [
    "ExitCode",
    "build_service",
    "exit_code_for",
    "fail",
    "get_console",
    "get_error_console",
    "print_error_chain",
    "warn_branch_restore",
]


class ExitCode(IntEnum):
    """Standard exit codes for ccg commands."""

    SUCCESS = 0
    LOAD_ERROR = 1
    VALIDATION_ERROR = 2
    NOT_FOUND = 3
    CONFLICT = 4
    INTERNAL_ERROR = 5
    CANCELLED = 6


def exit_code_for(error: CCGError) -> ExitCode:
    """Map an error to the exit code reported by the CLI."""
    match error:
        case UserCancelledError():
            return ExitCode.CANCELLED
        case ConfigError():
            return ExitCode.LOAD_ERROR
        case (
            RepositoryNotFoundError()
            | BranchNotFoundError()
            | CheckpointNotFoundError()
        ):
            return ExitCode.NOT_FOUND
        case InvalidHashError() | InvalidDateFormatError() | InvalidArgumentError():
            return ExitCode.VALIDATION_ERROR
        case UncommittedChangesError():
            return ExitCode.CONFLICT
        case _:
            return ExitCode.INTERNAL_ERROR


def get_console() -> Console:
    """Get a Rich console for command output honoring --quiet and --no-color."""
    ctx = CLIContext.get_current()
    return Console(quiet=ctx.quiet, no_color=ctx.no_color, highlight=False)


def get_error_console() -> Console:
    """Get a Rich console configured for error output to stderr."""
    ctx = CLIContext.get_current()
    return Console(stderr=True, no_color=ctx.no_color, highlight=False)


def build_service(repo_path: Path | None = None) -> CheckpointService:
    """Create a CheckpointService configured from the current CLI context.

    Args:
        repo_path: Directory inside the repository; defaults to --repo, then
            the current working directory.

    Returns:
        A configured CheckpointService.
    """
    ctx = CLIContext.get_current()
    return CheckpointService(
        repo_path if repo_path is not None else ctx.repo_path,
        identity=ctx.config.identity,
        max_candidates=ctx.config.resolver.max_candidates,
        renderer=DiffRenderer(ctx.messages.diff_styles()),
        logger=ctx.logger,
    )


def _causes(error: BaseException) -> list[BaseException]:
    causes: list[BaseException] = []
    seen = {id(error)}
    current = error.__cause__ or (
        None if error.__suppress_context__ else error.__context__
    )
    while current is not None and id(current) not in seen:
        causes.append(current)
        seen.add(id(current))
        current = current.__cause__ or (
            None if current.__suppress_context__ else current.__context__
        )
    return causes


def print_error_chain(console: Console, error: CCGError) -> None:
    """Print an error, its causes, error-specific details and the hint."""
    messages = CLIContext.get_current().messages

    if isinstance(error, UserCancelledError):
        console.print(f"[yellow]{escape(messages.cancelled)}[/yellow]")
        return

    console.print(f"[red]{escape(messages.error_prefix)}[/red] {escape(str(error))}")
    for cause in _causes(error):
        caused_by = escape(messages.caused_by)
        console.print(f"  [dim]{caused_by} {escape(str(cause))}[/dim]")

    if isinstance(error, AmbiguousHashError):
        console.print(escape(messages.candidates_header))
        for short_sha, summary in error.candidates:
            console.print(f"  [yellow]{short_sha}[/yellow] - {escape(summary)}")
        if error.remaining:
            more = messages.more_candidates.format(count=error.remaining)
            console.print(f"  {escape(more)}")
    elif isinstance(error, UncommittedChangesError) and error.paths:
        console.print(escape(messages.changed_paths_header))
        for path in error.paths[:MAX_LISTED_PATHS]:
            console.print(f"  {escape(path)}")
        hidden = len(error.paths) - MAX_LISTED_PATHS
        if hidden > 0:
            console.print(f"  {escape(messages.more_paths.format(count=hidden))}")

    if error.hint:
        prefix = escape(messages.hint_prefix)
        console.print(f"[yellow]{prefix}[/yellow] {escape(error.hint)}")


def fail(error: CCGError, *, console: Console | None = None) -> Never:
    """Report a failed command and exit.

    The failure is logged, the error chain is printed to stderr and the
    process exits with the error's exit code.

    Raises:
        SystemExit: Always raised.
    """
    ctx = CLIContext.get_current()
    code = exit_code_for(error)
    if ctx.logger:
        ctx.logger.error(
            "command_failed",
            error=str(error),
            error_type=type(error).__name__,
            exit_code=int(code),
        )
    print_error_chain(console if console is not None else get_error_console(), error)
    raise SystemExit(code)


def warn_branch_restore(service: CheckpointService) -> None:
    """Warn on stderr when the last operation could not switch HEAD back."""
    if service.restore_error is None:
        return
    messages = CLIContext.get_current().messages
    warning = messages.branch_restore_failed.format(error=service.restore_error)
    get_error_console().print(f"[yellow]{escape(warning)}[/yellow]")
