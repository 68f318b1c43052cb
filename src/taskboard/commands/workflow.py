"""Command group: workflows."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from taskboard.commands._base import TbGroup, graph_option
from taskboard.services.workflow import WorkflowService

if TYPE_CHECKING:
    from taskboard.commands._context import AppContext

_WORKFLOW_EXAMPLES = """\
  taskboard workflow add Marketing -g q3
  taskboard workflow list -g q3
  taskboard workflow remove wf1"""


@click.group(cls=TbGroup, examples=_WORKFLOW_EXAMPLES)
@click.pass_obj
def workflow(app: AppContext) -> None:
    """Manage workflows (labels that group tasks)."""


@workflow.command(
    examples="""\
  taskboard workflow add Marketing -g q3
  taskboard workflow add Engineering -g q3 --id eng"""
)
@click.argument("label")
@graph_option
@click.option("--id", "workflow_id", default=None, help="Custom workflow ID.")
@click.pass_obj
def add(app: AppContext, label: str, graph_id: str | None, workflow_id: str | None) -> None:
    """Add a workflow to a graph."""
    app.emit(
        WorkflowService(app.store).create(
            app.resolve_graph(graph_id), label, workflow_id=workflow_id
        )
    )


@workflow.command(
    "list",
    examples="""\
  taskboard workflow list -g q3"""
)
@graph_option
@click.pass_obj
def list_cmd(app: AppContext, graph_id: str | None) -> None:
    """List a graph's workflows."""
    app.emit(WorkflowService(app.store).list_workflows(app.resolve_graph(graph_id)))


@workflow.command(
    examples="""\
  taskboard workflow remove eng"""
)
@click.argument("workflow_id")
@click.pass_obj
def remove(app: AppContext, workflow_id: str) -> None:
    """Remove a workflow and untag its tasks."""
    app.emit(WorkflowService(app.store).delete(workflow_id))
