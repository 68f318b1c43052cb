"""Store — repository pattern over the board database.

The Store is the single dependency injected into every service. It owns
the database engine and the per-workspace dependency graphs. The
:meth:`transaction` context manager wraps one SQLAlchemy transaction and
invalidates cached graphs when it ends, whether it committed or rolled
back.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlalchemy import select, update

from taskboard.infrastructure.database.engine import init_database
from taskboard.infrastructure.database.schema import graphs, links, tasks, workflows
from taskboard.infrastructure.graph.engine import DependencyGraph

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from sqlalchemy import Connection, Table
    from sqlalchemy.engine import Engine

    from taskboard.config.settings import TbSettings



# ---------------------------------------------------------------------------
# StoreTransaction: yielded to callers within transaction()
# ---------------------------------------------------------------------------


@dataclass
class StoreTransaction:
    """Active transaction context with lookup helpers."""

    conn: Connection

    def _get(self, table: Table, record_id: str) -> dict[str, Any] | None:
        row = self.conn.execute(select(table).where(table.c.id == record_id)).first()
        return dict(row._mapping) if row is not None else None

    def get_graph(self, graph_id: str) -> dict[str, Any] | None:
        """Fetch a graph workspace row as a dict, or None."""
        return self._get(graphs, graph_id)

    def get_task(self, task_id: str) -> dict[str, Any] | None:
        """Fetch a task row as a dict, or None."""
        return self._get(tasks, task_id)

    def get_workflow(self, workflow_id: str) -> dict[str, Any] | None:
        """Fetch a workflow row as a dict, or None."""
        return self._get(workflows, workflow_id)

    def get_link(self, link_id: str) -> dict[str, Any] | None:
        """Fetch a link row as a dict, or None."""
        return self._get(links, link_id)

    def exists(self, table: Table, record_id: str) -> bool:
        """True if *table* has a row with id *record_id*."""
        row = self.conn.execute(select(table.c.id).where(table.c.id == record_id)).first()
        return row is not None

    def find_link(self, graph_id: str, source_id: str, target_id: str) -> str | None:
        """Return the id of the link source -> target in *graph_id*, if any."""
        row = self.conn.execute(
            select(links.c.id).where(
                links.c.graph_id == graph_id,
                links.c.source_id == source_id,
                links.c.target_id == target_id,
            )
        ).first()
        return str(row.id) if row is not None else None


# ---------------------------------------------------------------------------
# Store: the repository
# ---------------------------------------------------------------------------


class Store:
    """Repository encapsulating database and dependency-graph access.

    Constructed lazily by the CLI context from :class:`TbSettings`.
    Services receive the Store via their :class:`BaseService` constructor.
    """

    def __init__(self, settings: TbSettings) -> None:
        self._settings = settings
        self._engine: Engine = init_database(self.root)
        self._graph = DependencyGraph(self._engine)

    @property
    def root(self) -> Path:
        """The board root directory."""
        return self._settings.board_root

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for direct access when needed)."""
        return self._engine

    @property
    def graph(self) -> DependencyGraph:
        """Per-workspace dependency graphs (lazy-built from DB links)."""
        return self._graph

    @property
    def settings(self) -> TbSettings:
        """The resolved settings for this board."""
        return self._settings

    @contextmanager
    def transaction(self) -> Iterator[StoreTransaction]:
        """One database transaction; graph caches are invalidated on exit.

        Commits when the block exits normally, rolls back on exception.

        **Warning:** Do not read ``store.graph`` within a transaction
        block. Graphs are built from committed state and will not
        reflect pending writes.
        """
        with self._engine.begin() as conn:
            try:
                yield StoreTransaction(conn=conn)
            finally:
                self._graph.invalidate()

    def update_task_position(self, task_id: str, x: float, y: float) -> bool:
        """Set a task's canvas position (``x`` and ``y`` only).

        Idempotent update-by-id in its own short transaction, so it can
        run from worker threads in parallel with other position writes.
        Returns False if the task no longer exists.
        """
        with self.transaction() as txn:
            result = txn.conn.execute(
                update(tasks).where(tasks.c.id == task_id).values(x=x, y=y)
            )
            return result.rowcount > 0

    def close(self) -> None:
        """Dispose the engine's connection pool."""
        self._engine.dispose()
