# pyright: reportUnusedCallResult=false
# ruff: noqa: FBT002
"""ccg show command."""

from typing import Annotated

from cyclopts import App, Parameter
from rich.markup import escape

from ccg.checkpoint import TIMESTAMP_FORMAT
from ccg.exceptions import CCGError

from ._context import CLIContext
from ._shared import build_service, fail, get_console, warn_branch_restore

app = App(
    name="show",
    help="Show a checkpoint and the files it changed.",
    help_on_error=True,
)


@app.default
def show(
    hash: Annotated[  # noqa: A002
        str,
        Parameter(help="Hash or hash prefix of the checkpoint (2+ characters)."),
    ],
    *,
    diff: Annotated[
        bool,
        Parameter(name=["--diff", "-d"], help="Include the detailed diff."),
    ] = False,
) -> None:
    """Show a checkpoint's metadata, changed files and optionally its diff."""
    ctx = CLIContext.get_current()
    messages = ctx.messages
    console = get_console()

    try:
        service = build_service()
        details = service.show(hash, include_diff=diff)
    except CCGError as e:
        fail(e)
    warn_branch_restore(service)

    info = details.info
    header = messages.show_checkpoint.format(sha=info.sha)
    author = messages.show_author.format(
        name=info.author_name, email=info.author_email
    )
    date = messages.show_date.format(
        timestamp=info.timestamp.strftime(TIMESTAMP_FORMAT)
    )
    console.print(f"[yellow]{escape(header)}[/yellow]")
    console.print(escape(author))
    console.print(escape(date))
    console.print()
    for line in info.message.rstrip().splitlines():
        console.print(f"    {escape(line)}")
    console.print()

    styles = messages.diff_styles()
    if not details.stats.files:
        console.print(f"[dim]{escape(messages.show_no_files)}[/dim]")
    else:
        console.print(f"[bold]{escape(messages.show_files)}[/bold]")
        for file_stats in details.stats.files:
            kind = styles.kind(file_stats.kind)
            path = file_stats.path
            if file_stats.old_path is not None:
                path = f"{file_stats.old_path}{styles.rename_arrow}{path}"
            console.print(f"  [{kind.style}]{kind.glyph}[/{kind.style}] {escape(path)}")
        counts = details.status_counts()
        console.print(
            "  [dim]"
            + ", ".join(
                f"{styles.kind(kind).glyph}: {count}" for kind, count in counts.items()
            )
            + "[/dim]"
        )

    if details.report is not None:
        console.print()
        console.print(f"[bold]{escape(messages.show_detailed_diff)}[/bold]")
        console.print(details.report.body)
        if details.report.summary.plain:
            console.print(details.report.summary)
