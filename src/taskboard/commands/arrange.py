"""Commands: auto-arrange and cycle check."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from taskboard.commands._base import TbCommand, graph_option
from taskboard.services.arrange import ArrangeService

if TYPE_CHECKING:
    from taskboard.commands._context import AppContext

_ARRANGE_EXAMPLES = """\
  taskboard arrange -g q3
  taskboard arrange -g q3 --dry-run
  taskboard --json arrange -g q3"""

_CHECK_EXAMPLES = """\
  taskboard check -g q3
  taskboard --json check -g q3"""


@click.command(cls=TbCommand, examples=_ARRANGE_EXAMPLES)
@graph_option
@click.option("--dry-run", is_flag=True, help="Compute positions without saving them.")
@click.pass_obj
def arrange(app: AppContext, graph_id: str | None, dry_run: bool) -> None:
    """Lay out tasks top-to-bottom by dependency level.

    Fails with CYCLE_DETECTED, leaving every position unchanged, when
    the links contain a cycle.
    """
    app.emit(ArrangeService(app.store).arrange(app.resolve_graph(graph_id), dry_run=dry_run))


@click.command(cls=TbCommand, examples=_CHECK_EXAMPLES)
@graph_option
@click.pass_obj
def check(app: AppContext, graph_id: str | None) -> None:
    """Report whether a graph's links are acyclic."""
    app.emit(ArrangeService(app.store).check(app.resolve_graph(graph_id)))
