"""WorkflowService — workflow tags within a graph workspace.

Workflows group tasks orthogonally to the dependency links. A task
carries at most one ``workflow_id``.
"""

from __future__ import annotations

from sqlalchemy import delete, insert, select, update

from taskboard.domain.ids import generate_id
from taskboard.infrastructure.database.schema import tasks, workflows
from taskboard.services.base import BaseService
from taskboard.services.result import ServiceResult, fail
from taskboard.services.telemetry import traced


class WorkflowService(BaseService):
    """Handles workflow creation, listing, and removal."""

    @traced
    def create(self, graph_id: str, label: str, *, workflow_id: str | None = None) -> ServiceResult:
        """Create a workflow label in *graph_id*."""
        op = "create_workflow"
        label = label.strip()
        if not label:
            return fail(op, "VALIDATION_FAILED", "Workflow label must not be empty")

        new_id = workflow_id or generate_id()
        with self._store.transaction() as txn:
            err = self._require_graph(txn, graph_id, op)
            if err is not None:
                return err
            if txn.exists(workflows, new_id):
                return fail(op, "ALREADY_EXISTS", f"Workflow already exists: {new_id}")
            txn.conn.execute(insert(workflows).values(id=new_id, label=label, graph_id=graph_id))

        return ServiceResult(
            ok=True,
            op=op,
            data={"id": new_id, "label": label, "graph_id": graph_id},
        )

    @traced
    def list_workflows(self, graph_id: str) -> ServiceResult:
        """List the workflows of one graph in creation order."""
        op = "list_workflows"
        with self._store.transaction() as txn:
            err = self._require_graph(txn, graph_id, op)
            if err is not None:
                return err
            rows = txn.conn.execute(
                select(workflows).where(workflows.c.graph_id == graph_id)
            ).fetchall()

        items = [dict(row._mapping) for row in rows]
        return ServiceResult(ok=True, op=op, data={"count": len(items), "items": items})

    @traced
    def delete(self, workflow_id: str) -> ServiceResult:
        """Delete a workflow and untag the tasks that referenced it."""
        op = "delete_workflow"
        with self._store.transaction() as txn:
            if not txn.exists(workflows, workflow_id):
                return fail(op, "NOT_FOUND", f"No workflow found with ID: {workflow_id}")
            untagged = txn.conn.execute(
                update(tasks).where(tasks.c.workflow_id == workflow_id).values(workflow_id=None)
            ).rowcount
            txn.conn.execute(delete(workflows).where(workflows.c.id == workflow_id))

        return ServiceResult(ok=True, op=op, data={"id": workflow_id, "untagged": untagged})
