# pyright: reportUnusedCallResult=false
# ruff: noqa: FBT002
"""ccg restore command."""

from typing import Annotated

from cyclopts import App, Parameter
from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm

from ccg.checkpoint import ConfirmRestore, RestorePreview
from ccg.exceptions import CCGError
from ccg.repository import CHECKPOINT_BRANCH

from ._context import CLIContext
from ._messages import Messages
from ._shared import build_service, fail, get_console, warn_branch_restore

app = App(
    name="restore",
    help="Restore the working tree to a checkpoint.",
    help_on_error=True,
)


def _confirmation(
    console: Console, messages: Messages, *, assume_yes: bool
) -> ConfirmRestore:
    """Build the callback that previews a restore and asks for confirmation."""

    def _confirm(preview: RestorePreview) -> bool:
        target = preview.target
        if preview.discarded:
            warning = messages.restore_discard_warning.format(count=preview.discarded)
            permanent = escape(messages.restore_discard_permanent)
            console.print(f"[yellow]{escape(warning)}[/yellow]")
            console.print(f"[bold red]{permanent}[/bold red]")
        console.print(
            escape(
                messages.restore_target.format(
                    short_sha=target.short_sha, summary=target.summary
                )
            )
        )
        if assume_yes:
            return True
        return Confirm.ask(messages.restore_prompt, console=console, default=False)

    return _confirm


@app.default
def restore(
    hash: Annotated[  # noqa: A002
        str,
        Parameter(help="Hash or hash prefix of the checkpoint (2+ characters)."),
    ],
    *,
    yes: Annotated[
        bool,
        Parameter(name=["--yes", "-y"], help="Skip the confirmation prompt."),
    ] = False,
) -> None:
    """Restore the working tree to a checkpoint.

    The checkpoint branch is reset to the checkpoint; newer checkpoints are
    discarded and files not in the checkpoint are deleted.
    """
    ctx = CLIContext.get_current()
    messages = ctx.messages
    console = get_console()

    confirm = _confirmation(console, messages, assume_yes=yes)
    try:
        service = build_service()
        result = service.restore(hash, confirm)
    except CCGError as e:
        fail(e)
    warn_branch_restore(service)

    done = messages.restore_done.format(short_sha=result.target.short_sha)
    console.print(f"[bold green]{escape(done)}[/bold green]")
    if result.discarded:
        reset = messages.restore_branch_reset.format(branch=CHECKPOINT_BRANCH)
        console.print(escape(reset))
    if result.removed:
        removed = messages.restore_removed.format(count=len(result.removed))
        console.print(escape(removed))
        if ctx.verbose:
            for path in sorted(result.removed):
                console.print(f"  [red]- {escape(path)}[/red]")
    if result.original is not None:
        back_on = messages.restore_back_on.format(branch=result.original.describe())
        console.print(f"[yellow]{escape(back_on)}[/yellow]")
