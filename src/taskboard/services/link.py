"""LinkService — directed dependency links between tasks.

A link ``source -> target`` means the target depends on the source.
Both tasks must belong to the link's graph. Duplicate links and self
links are rejected here, so the arrange algorithms never see them.
Links that close a cycle are accepted; ``check`` and ``arrange`` report
the cycle.
"""

from __future__ import annotations

from sqlalchemy import delete, insert, select

from taskboard.domain.ids import generate_id
from taskboard.infrastructure.database.schema import links
from taskboard.services.base import BaseService
from taskboard.services.result import ServiceResult, fail
from taskboard.services.telemetry import traced


class LinkService(BaseService):
    """Handles link creation, listing, and removal."""

    @traced
    def create(
        self,
        graph_id: str,
        source_id: str,
        target_id: str,
        *,
        link_id: str | None = None,
    ) -> ServiceResult:
        """Link *source_id* -> *target_id* within *graph_id*."""
        op = "create_link"
        if source_id == target_id:
            return fail(op, "SELF_LINK", f"A task cannot depend on itself: {source_id}")

        new_id = link_id or generate_id()
        with self._store.transaction() as txn:
            err = self._require_graph(txn, graph_id, op)
            if err is not None:
                return err
            for task_id in (source_id, target_id):
                task = txn.get_task(task_id)
                if task is None or task["graph_id"] != graph_id:
                    return fail(op, "NOT_FOUND", f"No task {task_id} in graph {graph_id}")
            existing = txn.find_link(graph_id, source_id, target_id)
            if existing is not None:
                return fail(
                    op,
                    "DUPLICATE_LINK",
                    f"Link {source_id} -> {target_id} already exists",
                    link_id=existing,
                )
            if txn.exists(links, new_id):
                return fail(op, "ALREADY_EXISTS", f"Link already exists: {new_id}")
            txn.conn.execute(
                insert(links).values(
                    id=new_id,
                    graph_id=graph_id,
                    source_id=source_id,
                    target_id=target_id,
                )
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={"id": new_id, "graph_id": graph_id, "source": source_id, "target": target_id},
        )

    @traced
    def list_links(self, graph_id: str) -> ServiceResult:
        """List a graph's links in creation order."""
        op = "list_links"
        with self._store.transaction() as txn:
            err = self._require_graph(txn, graph_id, op)
            if err is not None:
                return err
            rows = txn.conn.execute(select(links).where(links.c.graph_id == graph_id)).fetchall()

        items = [
            {"id": row.id, "source": row.source_id, "target": row.target_id} for row in rows
        ]
        return ServiceResult(ok=True, op=op, data={"count": len(items), "items": items})

    @traced
    def delete(self, link_id: str) -> ServiceResult:
        """Remove one link by id."""
        op = "delete_link"
        with self._store.transaction() as txn:
            link = txn.get_link(link_id)
            if link is None:
                return fail(op, "NOT_FOUND", f"No link found with ID: {link_id}")
            txn.conn.execute(delete(links).where(links.c.id == link_id))

        return ServiceResult(
            ok=True,
            op=op,
            data={"id": link_id, "source": link["source_id"], "target": link["target_id"]},
        )
