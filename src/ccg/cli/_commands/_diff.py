# pyright: reportUnusedCallResult=false
"""ccg diff command."""

from typing import Annotated

from cyclopts import App, Parameter
from rich.markup import escape

from ccg.exceptions import CCGError

from ._context import CLIContext
from ._shared import build_service, fail, get_console, warn_branch_restore

app = App(
    name="diff",
    help="Compare a checkpoint with another checkpoint or the working tree.",
    help_on_error=True,
)


@app.default
def diff(
    hash_a: Annotated[
        str,
        Parameter(help="Hash or hash prefix of the base checkpoint."),
    ],
    hash_b: Annotated[
        str | None,
        Parameter(help="Hash or hash prefix to compare with (default: working tree)."),
    ] = None,
) -> None:
    """Show the differences from HASH_A to HASH_B or to the working tree."""
    ctx = CLIContext.get_current()
    messages = ctx.messages
    console = get_console()

    try:
        service = build_service()
        report = service.diff(hash_a, hash_b)
    except CCGError as e:
        fail(e)
    warn_branch_restore(service)

    if ctx.verbose:
        other = hash_b if hash_b is not None else messages.diff_worktree
        header = messages.diff_header.format(a=hash_a, b=other)
        console.print(f"[dim]{escape(header)}[/dim]")
    console.print(report.body)
    if report.summary.plain:
        console.print(report.summary)
