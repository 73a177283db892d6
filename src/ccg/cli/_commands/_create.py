# pyright: reportUnusedCallResult=false
# ruff: noqa: FBT002
"""ccg create command."""

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from rich.markup import escape

from ccg.exceptions import CCGError
from ccg.hooks import probe_stdin, resolve_message
from ccg.repository import SHORT_SHA_LENGTH

from ._context import CLIContext
from ._shared import build_service, fail, get_console, warn_branch_restore

app = App(
    name="create",
    help="Create a checkpoint of the working tree.",
    help_on_error=True,
)


@app.default
def create(
    *,
    message: Annotated[
        str | None,
        Parameter(
            name=["--message", "-m"],
            help="Checkpoint message. Read from a piped hook payload when omitted.",
        ),
    ] = None,
) -> None:
    """Create a checkpoint of the working tree.

    Without --message, a tool-invocation payload piped on stdin is turned
    into the message and its cwd selects the repository. Plain piped text
    is used as is; with no input the message is "Manual checkpoint".
    """
    ctx = CLIContext.get_current()
    messages = ctx.messages
    console = get_console()

    repo_path: Path | None = None
    if message is None:
        timeout = ctx.config.hooks.stdin_timeout_ms / 1000
        message, payload = resolve_message(probe_stdin(timeout))
        if payload is not None and payload.cwd:
            repo_path = Path(payload.cwd)
        if ctx.logger:
            ctx.logger.debug(
                "checkpoint_message_resolved",
                from_payload=payload is not None,
                tool=payload.tool_name if payload is not None else None,
            )

    try:
        service = build_service(repo_path)
        result = service.create(message)
    except CCGError as e:
        fail(e)
    warn_branch_restore(service)

    if result.no_changes:
        console.print(f"[yellow]{escape(messages.create_no_changes)}[/yellow]")
        return

    sha = result.sha or ""
    shown = sha if ctx.verbose else sha[:SHORT_SHA_LENGTH]
    done = messages.create_done.format(short_sha=shown)
    console.print(f"[bold green]{escape(done)}[/bold green]")
