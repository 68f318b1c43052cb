"""Command group: dependency links."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from taskboard.commands._base import TbGroup, graph_option
from taskboard.services.link import LinkService

if TYPE_CHECKING:
    from taskboard.commands._context import AppContext

_LINK_EXAMPLES = """\
  taskboard link add design build -g q3
  taskboard link list -g q3
  taskboard link remove Lk9x2"""


@click.group(cls=TbGroup, examples=_LINK_EXAMPLES)
@click.pass_obj
def link(app: AppContext) -> None:
    """Manage dependency links (target depends on source)."""


@link.command(
    examples="""\
  taskboard link add design build -g q3
  taskboard --json link add design build -g q3"""
)
@click.argument("source_id")
@click.argument("target_id")
@graph_option
@click.option("--id", "link_id", default=None, help="Custom link ID.")
@click.pass_obj
def add(
    app: AppContext,
    source_id: str,
    target_id: str,
    graph_id: str | None,
    link_id: str | None,
) -> None:
    """Make TARGET_ID depend on SOURCE_ID."""
    app.emit(
        LinkService(app.store).create(
            app.resolve_graph(graph_id), source_id, target_id, link_id=link_id
        )
    )


@link.command(
    "list",
    examples="""\
  taskboard link list -g q3"""
)
@graph_option
@click.pass_obj
def list_cmd(app: AppContext, graph_id: str | None) -> None:
    """List a graph's links."""
    app.emit(LinkService(app.store).list_links(app.resolve_graph(graph_id)))


@link.command(
    examples="""\
  taskboard link remove Lk9x2"""
)
@click.argument("link_id")
@click.pass_obj
def remove(app: AppContext, link_id: str) -> None:
    """Remove a link by ID."""
    app.emit(LinkService(app.store).delete(link_id))
