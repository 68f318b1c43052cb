"""Command group: graph workspaces."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from taskboard.commands._base import TbGroup
from taskboard.services.graph import GraphService

if TYPE_CHECKING:
    from taskboard.commands._context import AppContext

_GRAPH_EXAMPLES = """\
  taskboard graph create "Q3 Launch"
  taskboard graph create "Q3 Launch" --id q3
  taskboard graph list
  taskboard graph show q3
  taskboard graph rename q3 "Q3 Launch (final)"
  taskboard graph delete q3 --yes"""


@click.group(cls=TbGroup, examples=_GRAPH_EXAMPLES)
@click.pass_obj
def graph(app: AppContext) -> None:
    """Manage graph workspaces."""


@graph.command(
    examples="""\
  taskboard graph create "Q3 Launch"
  taskboard --json graph create Roadmap --id roadmap"""
)
@click.argument("name")
@click.option("--id", "graph_id", default=None, help="Custom graph ID.")
@click.pass_obj
def create(app: AppContext, name: str, graph_id: str | None) -> None:
    """Create a new graph workspace."""
    app.emit(GraphService(app.store).create(name, graph_id=graph_id))


@graph.command(
    "list",
    examples="""\
  taskboard graph list
  taskboard -q graph list"""
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List graph workspaces."""
    app.emit(GraphService(app.store).list_graphs())


@graph.command(
    examples="""\
  taskboard graph show q3"""
)
@click.argument("graph_id")
@click.pass_obj
def show(app: AppContext, graph_id: str) -> None:
    """Show a graph workspace with record counts."""
    app.emit(GraphService(app.store).get(graph_id))


@graph.command(
    examples="""\
  taskboard graph rename q3 'Q3 Launch (final)'"""
)
@click.argument("graph_id")
@click.argument("name")
@click.pass_obj
def rename(app: AppContext, graph_id: str, name: str) -> None:
    """Rename a graph workspace."""
    app.emit(GraphService(app.store).rename(graph_id, name))


@graph.command(
    examples="""\
  taskboard graph delete q3 --yes"""
)
@click.argument("graph_id")
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_obj
def delete(app: AppContext, graph_id: str, yes: bool) -> None:
    """Delete a graph and all of its tasks, links, and workflows."""
    if not yes:
        click.confirm(f"Delete graph {graph_id} and everything in it?", abort=True)
    app.emit(GraphService(app.store).delete(graph_id))
