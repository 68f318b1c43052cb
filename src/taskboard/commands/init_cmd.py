"""Command: board initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from taskboard.commands._base import TbCommand

if TYPE_CHECKING:
    from taskboard.commands._context import AppContext

_INIT_EXAMPLES = """\
  taskboard init
  taskboard init /path/to/board --user alice
  taskboard init . --default-graph q3"""


@click.command("init", cls=TbCommand, examples=_INIT_EXAMPLES)
@click.argument("path", required=False, default=".")
@click.option("--user", default=None, help="Name recorded as created_by / updated_by.")
@click.option("--default-graph", default=None, help="Graph used when --graph is omitted.")
@click.pass_obj
def init_cmd(
    app: AppContext,
    path: str,
    user: str | None,
    default_graph: str | None,
) -> None:
    """Initialize a new taskboard board."""
    from taskboard.services.init import InitService

    app.emit(
        InitService.init_board(
            Path(path).resolve(),
            user=user or app.settings.board.user,
            default_graph=default_graph,
        )
    )
