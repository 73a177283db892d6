# pyright: reportUnusedCallResult=false
"""ccg list command."""

from typing import Annotated, Final

from cyclopts import App, Parameter
from rich.markup import escape

from ccg.checkpoint import parse_since_date
from ccg.exceptions import CCGError

from ._context import CLIContext
from ._shared import build_service, fail, get_console, warn_branch_restore

LATEST_MARKER: Final = "[bold green]  ●[/bold green]"
MARKER: Final = "[blue]  ○[/blue]"

app = App(
    name="list",
    help="List recent checkpoints.",
    help_on_error=True,
)


@app.default
def list_checkpoints(
    *,
    number: Annotated[
        int | None,
        Parameter(
            name=["--number", "-n"],
            help="Number of checkpoints to show (default: list.default_limit).",
        ),
    ] = None,
    since: Annotated[
        str | None,
        Parameter(
            name="--since",
            help="Only show checkpoints since YYYY-MM-DD or 'YYYY-MM-DD HH:MM:SS'.",
        ),
    ] = None,
) -> None:
    """List recent checkpoints, newest first."""
    ctx = CLIContext.get_current()
    messages = ctx.messages
    console = get_console()

    limit = number if number is not None else ctx.config.list.default_limit
    try:
        since_date = parse_since_date(since) if since is not None else None
        service = build_service()
        entries = service.list_checkpoints(limit, since_date)
    except CCGError as e:
        fail(e)
    warn_branch_restore(service)

    if not entries:
        console.print(f"[yellow]{escape(messages.list_empty)}[/yellow]")
        return

    console.print(f"[bold green]{escape(messages.list_header)}[/bold green]")
    for entry in entries:
        marker = LATEST_MARKER if entry.is_latest else MARKER
        sha = entry.sha if ctx.verbose else entry.short_sha
        console.print(
            f"{marker} [yellow]{sha}[/yellow] [dim]{entry.timestamp}[/dim] "
            f"{escape(entry.summary)}"
        )
