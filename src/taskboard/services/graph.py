"""GraphService — graph workspace CRUD.

A graph is the top-level tenancy unit: every workflow, task, and link
belongs to exactly one. Deleting a graph deletes everything in it.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import delete, func, insert, or_, select, update

from taskboard.domain.ids import generate_id, validate_id
from taskboard.infrastructure.database.schema import graphs, links, tasks, workflows
from taskboard.services._helpers import now_iso
from taskboard.services.base import BaseService
from taskboard.services.result import ServiceResult, fail
from taskboard.services.telemetry import traced


class GraphService(BaseService):
    """Handles graph workspace creation, listing, renaming, and deletion."""

    @traced
    def create(self, name: str, *, graph_id: str | None = None) -> ServiceResult:
        """Create a graph workspace, optionally with a caller-supplied id."""
        op = "create_graph"
        name = name.strip()
        if not name:
            return fail(op, "VALIDATION_FAILED", "Graph name must not be empty")
        if graph_id is not None and not validate_id(graph_id):
            return fail(op, "VALIDATION_FAILED", f"Invalid graph ID: {graph_id!r}")

        new_id = graph_id or generate_id()
        now = now_iso()
        with self._store.transaction() as txn:
            if txn.exists(graphs, new_id):
                return fail(op, "ALREADY_EXISTS", f"Graph already exists: {new_id}")
            txn.conn.execute(
                insert(graphs).values(
                    id=new_id,
                    name=name,
                    created_by=self._user,
                    created_at=now,
                    updated_at=now,
                )
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={"id": new_id, "name": name, "created_by": self._user, "created_at": now},
        )

    @traced
    def list_graphs(self) -> ServiceResult:
        """List all graph workspaces with their task counts."""
        task_counts = (
            select(tasks.c.graph_id, func.count().label("task_count"))
            .group_by(tasks.c.graph_id)
            .subquery()
        )
        with self._store.engine.connect() as conn:
            rows = conn.execute(
                select(graphs, func.coalesce(task_counts.c.task_count, 0).label("task_count"))
                .outerjoin(task_counts, task_counts.c.graph_id == graphs.c.id)
                .order_by(graphs.c.created_at, graphs.c.id)
            ).fetchall()

        items = [dict(row._mapping) for row in rows]
        return ServiceResult(ok=True, op="list_graphs", data={"count": len(items), "items": items})

    @traced
    def get(self, graph_id: str) -> ServiceResult:
        """Fetch one graph workspace with task, link, and workflow counts."""
        op = "get_graph"
        with self._store.transaction() as txn:
            row = txn.get_graph(graph_id)
            if row is None:
                return fail(op, "NOT_FOUND", f"No graph found with ID: {graph_id}")
            counts: dict[str, Any] = {}
            for key, table in (("tasks", tasks), ("links", links), ("workflows", workflows)):
                counts[key] = txn.conn.execute(
                    select(func.count()).select_from(table).where(table.c.graph_id == graph_id)
                ).scalar_one()

        return ServiceResult(ok=True, op=op, data={**row, "counts": counts})

    @traced
    def rename(self, graph_id: str, name: str) -> ServiceResult:
        """Change a graph's display name."""
        op = "rename_graph"
        name = name.strip()
        if not name:
            return fail(op, "VALIDATION_FAILED", "Graph name must not be empty")

        now = now_iso()
        with self._store.transaction() as txn:
            if not txn.exists(graphs, graph_id):
                return fail(op, "NOT_FOUND", f"No graph found with ID: {graph_id}")
            txn.conn.execute(
                update(graphs).where(graphs.c.id == graph_id).values(name=name, updated_at=now)
            )

        return ServiceResult(ok=True, op=op, data={"id": graph_id, "name": name, "updated_at": now})

    @traced
    def delete(self, graph_id: str) -> ServiceResult:
        """Delete a graph and every workflow, task, and link inside it."""
        op = "delete_graph"
        with self._store.transaction() as txn:
            if not txn.exists(graphs, graph_id):
                return fail(op, "NOT_FOUND", f"No graph found with ID: {graph_id}")
            # Links first: they reference tasks by foreign key, including links
            # filed under another graph that point at one of these tasks.
            member_ids = select(tasks.c.id).where(tasks.c.graph_id == graph_id)
            removed: dict[str, int] = {
                "links": txn.conn.execute(
                    delete(links).where(
                        or_(
                            links.c.graph_id == graph_id,
                            links.c.source_id.in_(member_ids),
                            links.c.target_id.in_(member_ids),
                        )
                    )
                ).rowcount
            }
            for key, table in (("tasks", tasks), ("workflows", workflows)):
                result = txn.conn.execute(delete(table).where(table.c.graph_id == graph_id))
                removed[key] = result.rowcount
            txn.conn.execute(delete(graphs).where(graphs.c.id == graph_id))

        return ServiceResult(ok=True, op=op, data={"id": graph_id, "removed": removed})
