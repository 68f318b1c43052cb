"""DependencyGraph — lazy-built NetworkX graphs of one workspace's tasks.

One DiGraph per graph workspace, built from the tasks and links tables
on first access and cached until invalidated. The store invalidates
after every transaction, so a graph never outlives the rows it was
built from.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import networkx as nx

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

type _Graph = nx.DiGraph


class DependencyGraph:
    """Lazy-loading per-workspace dependency graphs backed by SQLite."""

    def __init__(self, db: Engine) -> None:
        self._db = db
        self._graphs: dict[str, _Graph] = {}

    def for_graph(self, graph_id: str) -> _Graph:
        """Return the DiGraph for *graph_id*, building from DB on first access."""
        g = self._graphs.get(graph_id)
        if g is None:
            g = self._build_from_db(graph_id)
            self._graphs[graph_id] = g
        return g

    def invalidate(self) -> None:
        """Clear all cached graphs, forcing rebuild on next access."""
        self._graphs.clear()

    def _build_from_db(self, graph_id: str) -> _Graph:
        """Build a DiGraph from the workspace's tasks and links.

        Loads tasks first (so isolated tasks appear as nodes), in
        insertion order, then adds links whose endpoints are both tasks
        of this workspace. Node and edge iteration order is therefore
        stable for a given database state.
        """
        from sqlalchemy import select, text

        from taskboard.infrastructure.database.schema import links, tasks

        g: _Graph = nx.DiGraph()
        with self._db.connect() as conn:
            rows = conn.execute(
                select(tasks.c.id, tasks.c.title, tasks.c.status, tasks.c.x, tasks.c.y)
                .where(tasks.c.graph_id == graph_id)
                .order_by(text("rowid"))
            )
            for row in rows:
                g.add_node(row.id, title=row.title, status=row.status, x=row.x, y=row.y)

            rows = conn.execute(
                select(links.c.id, links.c.source_id, links.c.target_id)
                .where(links.c.graph_id == graph_id)
                .order_by(text("rowid"))
            )
            for row in rows:
                if row.source_id in g and row.target_id in g:
                    g.add_edge(row.source_id, row.target_id, link_id=row.id)
        return g
