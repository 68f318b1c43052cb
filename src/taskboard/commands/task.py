"""Command group: tasks."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from taskboard.commands._base import TbGroup, graph_option
from taskboard.domain.types import TaskStatus
from taskboard.services.task import TaskService

if TYPE_CHECKING:
    from taskboard.commands._context import AppContext

_STATUS_CHOICE = click.Choice([s.value for s in TaskStatus], case_sensitive=False)

_TASK_EXAMPLES = """\
  taskboard task add "Write launch plan" -g q3
  taskboard task add "Ship" -g q3 --status "In Process" --workflow wf1
  taskboard task list -g q3 --status Pending
  taskboard task show AbC123
  taskboard task update AbC123 --status Completed
  taskboard task move AbC123 400 380
  taskboard task delete AbC123"""


@click.group(cls=TbGroup, examples=_TASK_EXAMPLES)
@click.pass_obj
def task(app: AppContext) -> None:
    """Create, inspect, and edit tasks."""


@task.command(
    examples="""\
  taskboard task add "Write launch plan" -g q3
  taskboard task add "Review" -g q3 --description "Final pass" --assign alice
  taskboard --json task add "Ship" -g q3 --id ship --x 100 --y 100"""
)
@click.argument("title")
@graph_option
@click.option("--description", default="", help="Task description.")
@click.option("--status", type=_STATUS_CHOICE, default=TaskStatus.PENDING.value, help="Status.")
@click.option("--workflow", "workflow_id", default=None, help="Workflow ID to tag the task with.")
@click.option("--assign", "assigned_to", default=None, help="Assignee.")
@click.option("--bg", "background_color", default="#ffffff", help="Background color.")
@click.option("--fg", "foreground_color", default="#000000", help="Foreground color.")
@click.option("--x", type=float, default=None, help="Initial canvas X.")
@click.option("--y", type=float, default=None, help="Initial canvas Y.")
@click.option("--id", "task_id", default=None, help="Custom task ID.")
@click.pass_obj
def add(
    app: AppContext,
    title: str,
    graph_id: str | None,
    description: str,
    status: str,
    workflow_id: str | None,
    assigned_to: str | None,
    background_color: str,
    foreground_color: str,
    x: float | None,
    y: float | None,
    task_id: str | None,
) -> None:
    """Add a task to a graph."""
    app.emit(
        TaskService(app.store).create(
            app.resolve_graph(graph_id),
            title,
            description=description,
            status=status,
            workflow_id=workflow_id,
            assigned_to=assigned_to,
            assigned_by=app.settings.board.user if assigned_to else None,
            background_color=background_color,
            foreground_color=foreground_color,
            x=x,
            y=y,
            task_id=task_id,
        )
    )


@task.command(
    "list",
    examples="""\
  taskboard task list -g q3
  taskboard task list -g q3 --workflow wf1 --status "In Process"
  taskboard task list -g q3 --status Pending --all"""
)
@graph_option
@click.option("--workflow", "workflow_id", default=None, help="Only tasks in this workflow.")
@click.option("--status", type=_STATUS_CHOICE, default=None, help="Only tasks with this status.")
@click.option("--all", "include_filtered", is_flag=True, help="Show filtered tasks dimmed.")
@click.pass_obj
def list_cmd(
    app: AppContext,
    graph_id: str | None,
    workflow_id: str | None,
    status: str | None,
    include_filtered: bool,
) -> None:
    """List a graph's tasks."""
    app.emit(
        TaskService(app.store).list_tasks(
            app.resolve_graph(graph_id),
            workflow_id=workflow_id,
            status=status,
            include_filtered=include_filtered,
        )
    )


@task.command(
    examples="""\
  taskboard task show AbC123"""
)
@click.argument("task_id")
@click.pass_obj
def show(app: AppContext, task_id: str) -> None:
    """Show a task with its dependencies."""
    app.emit(TaskService(app.store).get(task_id))


@task.command(
    examples="""\
  taskboard task update AbC123 --title "New title"
  taskboard task update AbC123 --status Completed --workflow wf2
  taskboard task update AbC123 --workflow ''"""
)
@click.argument("task_id")
@click.option("--title", default=None)
@click.option("--description", default=None)
@click.option("--status", type=_STATUS_CHOICE, default=None)
@click.option("--workflow", "workflow_id", default=None, help='Workflow ID ("" to clear).')
@click.option("--assign", "assigned_to", default=None)
@click.option("--bg", "background_color", default=None)
@click.option("--fg", "foreground_color", default=None)
@click.pass_obj
def update(app: AppContext, task_id: str, **fields: Any) -> None:
    """Update task fields."""
    changes = {k: v for k, v in fields.items() if v is not None}
    if changes.get("assigned_to"):
        changes["assigned_by"] = app.settings.board.user
    if not changes:
        raise click.UsageError("Nothing to update. Pass at least one field option.")
    app.emit(TaskService(app.store).update(task_id, changes=changes))


@task.command(
    examples="""\
  taskboard task move AbC123 400 380
  taskboard task move AbC123 -- -50 380"""
)
@click.argument("task_id")
@click.argument("x", type=float)
@click.argument("y", type=float)
@click.pass_obj
def move(app: AppContext, task_id: str, x: float, y: float) -> None:
    """Set a task's canvas position."""
    app.emit(TaskService(app.store).move(task_id, x, y))


@task.command(
    examples="""\
  taskboard task delete AbC123"""
)
@click.argument("task_id")
@click.pass_obj
def delete(app: AppContext, task_id: str) -> None:
    """Delete a task and its links."""
    app.emit(TaskService(app.store).delete(task_id))
