# pyright: reportUnusedCallResult=false
"""ccg init command."""

from cyclopts import App
from rich.markup import escape

from ccg.exceptions import CCGError
from ccg.repository import CHECKPOINT_BRANCH

from ._context import CLIContext
from ._shared import build_service, fail, get_console, warn_branch_restore

app = App(
    name="init",
    help="Initialize checkpoint tracking in the current repository.",
    help_on_error=True,
)


@app.default
def init() -> None:
    """Initialize checkpoint tracking.

    Creates a git repository when the directory is not inside one, and the
    checkpoint branch when it does not exist yet.
    """
    ctx = CLIContext.get_current()
    messages = ctx.messages
    console = get_console()

    console.print(f"[blue]{escape(messages.init_start)}[/blue]")
    try:
        service = build_service()
        result = service.init()
    except CCGError as e:
        fail(e)
    warn_branch_restore(service)

    if result.created:
        console.print(escape(messages.init_repo_created.format(root=result.root)))
    if result.bootstrapped:
        created = messages.init_branch_created.format(branch=CHECKPOINT_BRANCH)
        console.print(f"[green]{escape(created)}[/green]")
    else:
        exists = messages.init_branch_exists.format(branch=CHECKPOINT_BRANCH)
        console.print(f"[dim]{escape(exists)}[/dim]")

    console.print(f"[bold green]{escape(messages.init_done)}[/bold green]")
    current = messages.init_current_branch.format(branch=result.current_branch)
    console.print(escape(current))
    if result.current_branch == CHECKPOINT_BRANCH:
        console.print(f"[yellow]{escape(messages.init_tip_on_branch)}[/yellow]")
    else:
        tip = messages.init_tip_off_branch.format(branch=CHECKPOINT_BRANCH)
        console.print(f"[yellow]{escape(tip)}[/yellow]")
    if ctx.verbose and result.tip:
        console.print(f"[dim]{result.tip}[/dim]")
