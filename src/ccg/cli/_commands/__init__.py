"""ccg CLI commands."""
# pyright: reportUnusedCallResult=false

from typing import TYPE_CHECKING

from ._context import CLIContext
from ._create import app as create_checkpoint_app
from ._diff import app as diff_app
from ._init import app as init_app
from ._list import app as list_app
from ._messages import CHINESE, ENGLISH, Messages, get_messages
from ._restore import app as restore_app
from ._shared import (
    ExitCode,
    build_service,
    exit_code_for,
    fail,
    get_console,
    get_error_console,
    print_error_chain,
)
from ._show import app as show_app

if TYPE_CHECKING:
    from cyclopts import App

__all__ = [
    "CHINESE",
    "ENGLISH",
    "CLIContext",
    "ExitCode",
    "Messages",
    "build_service",
    "create_checkpoint_app",
    "diff_app",
    "exit_code_for",
    "fail",
    "get_console",
    "get_error_console",
    "get_messages",
    "init_app",
    "list_app",
    "print_error_chain",
    "restore_app",
    "show_app",
]


def register_commands(app: "App") -> None:  # noqa: UP037
    app.command(init_app)
    app.command(create_checkpoint_app)
    app.command(list_app)
    app.command(restore_app)
    app.command(show_app)
    app.command(diff_app)
