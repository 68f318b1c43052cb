"""TaskService — task CRUD, filtering, and dependency lookups.

Pipeline for mutations: VALIDATE → APPLY → RESPOND. Task deletion also
removes every link touching the task so the dependency graph never
holds dangling edges.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import delete, insert, or_, select, text, update

from taskboard.domain.filters import TaskFilter
from taskboard.domain.ids import generate_id, validate_id
from taskboard.domain.layout import grid_position
from taskboard.domain.types import (
    DEFAULT_BACKGROUND,
    DEFAULT_FOREGROUND,
    TaskStatus,
    parse_status,
)
from taskboard.infrastructure.database.schema import links, tasks, workflows
from taskboard.services._helpers import now_iso
from taskboard.services.base import BaseService
from taskboard.services.result import ServiceResult, fail
from taskboard.services.telemetry import traced

UPDATABLE_FIELDS = frozenset(
    {
        "title",
        "description",
        "status",
        "background_color",
        "foreground_color",
        "assigned_to",
        "assigned_by",
        "workflow_id",
        "x",
        "y",
    }
)


class TaskService(BaseService):
    """Handles task creation, queries, updates, moves, and deletion."""

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    @traced
    def create(
        self,
        graph_id: str,
        title: str,
        *,
        description: str = "",
        status: str = TaskStatus.PENDING,
        background_color: str = DEFAULT_BACKGROUND,
        foreground_color: str = DEFAULT_FOREGROUND,
        assigned_to: str | None = None,
        assigned_by: str | None = None,
        workflow_id: str | None = None,
        x: float | None = None,
        y: float | None = None,
        task_id: str | None = None,
    ) -> ServiceResult:
        """Create a task in *graph_id*. Position stays unset unless given."""
        op = "create_task"
        title = title.strip()
        if not title:
            return fail(op, "VALIDATION_FAILED", "Task title must not be empty")
        if task_id is not None and not validate_id(task_id):
            return fail(op, "VALIDATION_FAILED", f"Invalid task ID: {task_id!r}")
        try:
            resolved_status = parse_status(status)
        except ValueError as exc:
            return fail(op, "INVALID_STATUS", str(exc))

        new_id = task_id or generate_id()
        now = now_iso()
        values: dict[str, Any] = {
            "id": new_id,
            "graph_id": graph_id,
            "title": title,
            "description": description,
            "status": resolved_status.value,
            "background_color": background_color,
            "foreground_color": foreground_color,
            "created_by": self._user,
            "created_at": now,
            "updated_at": now,
            "assigned_to": assigned_to,
            "assigned_by": assigned_by,
            "workflow_id": workflow_id,
            "x": x,
            "y": y,
        }

        with self._store.transaction() as txn:
            err = self._require_graph(txn, graph_id, op)
            if err is not None:
                return err
            if txn.exists(tasks, new_id):
                return fail(op, "ALREADY_EXISTS", f"Task already exists: {new_id}")
            if workflow_id is not None:
                err = self._check_workflow(txn, workflow_id, graph_id, op)
                if err is not None:
                    return err
            txn.conn.execute(insert(tasks).values(**values))

        return ServiceResult(ok=True, op=op, data=values)

    # ------------------------------------------------------------------
    # Query
    # ------------------------------------------------------------------

    @traced
    def get(self, task_id: str) -> ServiceResult:
        """Fetch a task with its workflow label and direct dependencies.

        ``upstream`` lists the tasks this one depends on (link sources),
        ``downstream`` the tasks that depend on it (link targets).
        """
        op = "get_task"
        with self._store.transaction() as txn:
            row = txn.get_task(task_id)
            if row is None:
                return fail(op, "NOT_FOUND", f"No task found with ID: {task_id}")
            workflow = txn.get_workflow(row["workflow_id"]) if row["workflow_id"] else None

        g = self._store.graph.for_graph(row["graph_id"])
        data = {
            **row,
            "workflow_label": workflow["label"] if workflow else "",
            "upstream": list(g.predecessors(task_id)),
            "downstream": list(g.successors(task_id)),
        }
        return ServiceResult(ok=True, op=op, data=data)

    @traced
    def list_tasks(
        self,
        graph_id: str,
        *,
        workflow_id: str | None = None,
        status: str | None = None,
        include_filtered: bool = False,
    ) -> ServiceResult:
        """List a graph's tasks, applying the workflow/status filter.

        Each item carries ``filtered`` (True when it fails an active
        criterion). Filtered tasks are omitted unless *include_filtered*.
        """
        op = "list_tasks"
        if status is not None:
            try:
                status = parse_status(status).value
            except ValueError as exc:
                return fail(op, "INVALID_STATUS", str(exc))
        criteria = TaskFilter(workflow_id=workflow_id, status=status)

        with self._store.transaction() as txn:
            err = self._require_graph(txn, graph_id, op)
            if err is not None:
                return err
            labels = {
                row.id: row.label
                for row in txn.conn.execute(
                    select(workflows.c.id, workflows.c.label).where(
                        workflows.c.graph_id == graph_id
                    )
                )
            }
            rows = txn.conn.execute(
                select(tasks).where(tasks.c.graph_id == graph_id).order_by(text("rowid"))
            ).fetchall()

        items: list[dict[str, Any]] = []
        hidden = 0
        for index, row in enumerate(rows):
            task = dict(row._mapping)
            # Unplaced tasks show at their default grid slot, counted over the
            # whole workspace so filtering does not move them.
            grid_x, grid_y = grid_position(index)
            task["placed"] = task["x"] is not None and task["y"] is not None
            task["display_x"] = grid_x if task["x"] is None else task["x"]
            task["display_y"] = grid_y if task["y"] is None else task["y"]
            task["workflow_label"] = labels.get(task["workflow_id"], "")
            task["filtered"] = not criteria.matches(task)
            if task["filtered"] and not include_filtered:
                hidden += 1
                continue
            items.append(task)

        return ServiceResult(
            ok=True,
            op=op,
            data={"graph_id": graph_id, "count": len(items), "hidden": hidden, "items": items},
        )

    # ------------------------------------------------------------------
    # Update / move
    # ------------------------------------------------------------------

    @traced
    def update(self, task_id: str, *, changes: dict[str, Any]) -> ServiceResult:
        """Apply field *changes* to a task and stamp updated_at / updated_by."""
        return self._apply("update_task", task_id, changes)

    @traced
    def move(self, task_id: str, x: float, y: float) -> ServiceResult:
        """Set a task's canvas position, as when a drag finishes."""
        return self._apply("move_task", task_id, {"x": x, "y": y})

    def _apply(self, op: str, task_id: str, changes: dict[str, Any]) -> ServiceResult:
        unknown = sorted(set(changes) - UPDATABLE_FIELDS)
        if unknown:
            return fail(op, "VALIDATION_FAILED", f"Unknown fields: {', '.join(unknown)}")

        values = dict(changes)
        if "title" in values:
            values["title"] = str(values["title"]).strip()
            if not values["title"]:
                return fail(op, "VALIDATION_FAILED", "Task title must not be empty")
        if "status" in values:
            try:
                values["status"] = parse_status(str(values["status"])).value
            except ValueError as exc:
                return fail(op, "INVALID_STATUS", str(exc))
        if "workflow_id" in values and not values["workflow_id"]:
            values["workflow_id"] = None

        with self._store.transaction() as txn:
            row = txn.get_task(task_id)
            if row is None:
                return fail(op, "NOT_FOUND", f"No task found with ID: {task_id}")
            if values.get("workflow_id"):
                err = self._check_workflow(txn, values["workflow_id"], row["graph_id"], op)
                if err is not None:
                    return err

            fields_changed = sorted(k for k, v in values.items() if row[k] != v)
            now = now_iso()
            if fields_changed:
                txn.conn.execute(
                    update(tasks)
                    .where(tasks.c.id == task_id)
                    .values(**values, updated_at=now, updated_by=self._user)
                )

        data: dict[str, Any] = {"id": task_id, "fields_changed": fields_changed}
        if op == "move_task":
            data["x"] = values["x"]
            data["y"] = values["y"]
        return ServiceResult(ok=True, op=op, data=data)

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    @traced
    def delete(self, task_id: str) -> ServiceResult:
        """Delete a task and every link that touches it."""
        op = "delete_task"
        with self._store.transaction() as txn:
            if not txn.exists(tasks, task_id):
                return fail(op, "NOT_FOUND", f"No task found with ID: {task_id}")
            links_removed = txn.conn.execute(
                delete(links).where(or_(links.c.source_id == task_id, links.c.target_id == task_id))
            ).rowcount
            txn.conn.execute(delete(tasks).where(tasks.c.id == task_id))

        return ServiceResult(
            ok=True,
            op=op,
            data={"id": task_id, "links_removed": links_removed},
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _check_workflow(txn: Any, workflow_id: str, graph_id: str, op: str) -> ServiceResult | None:
        workflow = txn.get_workflow(workflow_id)
        if workflow is None or workflow["graph_id"] != graph_id:
            return fail(op, "NOT_FOUND", f"No workflow {workflow_id} in graph {graph_id}")
        return None
