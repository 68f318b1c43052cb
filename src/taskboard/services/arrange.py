"""ArrangeService — auto-arrange a graph workspace into dependency levels.

Pipeline (each arrow is a logged state transition)::

    IDLE → DETECTING → CYCLE_FOUND                      (terminal, error)
                     → LEVELING → LAYOUT_COMPUTING
                                → PERSISTING → DONE     (terminal)

Every call starts fresh from IDLE on a snapshot of the workspace's
tasks and links; nothing is locked against concurrent edits, and the
store's last write wins.

Persistence fans out one position update per task to a thread pool and
waits for all of them. A failed write does not roll back the layout that
was already applied to the returned nodes; each failure is reported per
task id as a warning, and retrying means running arrange again.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from enum import StrEnum
from typing import Any

import structlog

from taskboard.domain.cycles import detect_cycle, format_cycle
from taskboard.domain.layout import CanvasNode, Position, apply_positions, compute_layout
from taskboard.domain.levels import compute_levels
from taskboard.services.base import BaseService
from taskboard.services.result import ServiceError, ServiceResult
from taskboard.services.telemetry import annotate_current, trace_span, traced

logger = logging.getLogger(__name__)
log = structlog.get_logger("taskboard.arrange")


class ArrangeState(StrEnum):
    """States of one arrange run."""

    IDLE = "idle"
    DETECTING = "detecting"
    CYCLE_FOUND = "cycle_found"
    LEVELING = "leveling"
    LAYOUT_COMPUTING = "layout_computing"
    PERSISTING = "persisting"
    DONE = "done"


class _Run:
    """State tracker for a single arrange invocation."""

    def __init__(self, graph_id: str) -> None:
        self.graph_id = graph_id
        self.state = ArrangeState.IDLE
        self.history: list[str] = [self.state.value]

    def advance(self, state: ArrangeState) -> None:
        log.debug("arrange.state", graph_id=self.graph_id, prev=self.state.value, state=state.value)
        self.state = state
        self.history.append(state.value)


class ArrangeService(BaseService):
    """Detects cycles, levels, lays out, and persists task positions."""

    # ------------------------------------------------------------------
    # check: cycle detection only
    # ------------------------------------------------------------------

    @traced
    def check(self, graph_id: str) -> ServiceResult:
        """Report whether the workspace's dependency graph is acyclic."""
        op = "check"
        with self._store.transaction() as txn:
            err = self._require_graph(txn, graph_id, op)
            if err is not None:
                return err

        g = self._store.graph.for_graph(graph_id)
        with trace_span("detect_cycle"):
            cycle = detect_cycle(g.nodes, g.edges)

        warnings: list[str] = []
        if cycle is not None:
            warnings.append(f"Dependency cycle: {format_cycle(cycle)}")
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "graph_id": graph_id,
                "nodes": g.number_of_nodes(),
                "links": g.number_of_edges(),
                "acyclic": cycle is None,
                "cycle": cycle,
            },
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # arrange: full pipeline
    # ------------------------------------------------------------------

    @traced
    def arrange(self, graph_id: str, *, dry_run: bool = False) -> ServiceResult:
        """Lay out every task of *graph_id* by dependency level.

        With *dry_run*, positions are computed and returned but nothing
        is written to the store.
        """
        op = "arrange"
        with self._store.transaction() as txn:
            err = self._require_graph(txn, graph_id, op)
            if err is not None:
                return err

        run = _Run(graph_id)
        annotate_current(graph_id=graph_id, dry_run=dry_run)

        # Snapshot: node/edge lists are copied so later edits can't leak in.
        g = self._store.graph.for_graph(graph_id)
        node_ids = list(g.nodes)
        edges = list(g.edges)
        nodes = [
            CanvasNode(id=n, x=attrs.get("x"), y=attrs.get("y"), data=dict(attrs))
            for n, attrs in g.nodes(data=True)
        ]

        if not node_ids:
            run.advance(ArrangeState.DONE)
            return ServiceResult(
                ok=True,
                op=op,
                data=self._payload(run, nodes, {}, persisted=0, failed=[], dry_run=dry_run),
            )

        run.advance(ArrangeState.DETECTING)
        with trace_span("detect_cycle") as span:
            cycle = detect_cycle(node_ids, edges)
            if span:
                span.annotate("nodes", len(node_ids))
                span.annotate("edges", len(edges))
        if cycle is not None:
            run.advance(ArrangeState.CYCLE_FOUND)
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="CYCLE_DETECTED",
                    message=f"Dependency cycle: {format_cycle(cycle)}. Remove a link to arrange.",
                    detail={"graph_id": graph_id, "cycle": cycle, "state": run.state.value},
                ),
            )

        run.advance(ArrangeState.LEVELING)
        with trace_span("compute_levels"):
            levels = compute_levels(node_ids, edges)

        run.advance(ArrangeState.LAYOUT_COMPUTING)
        with trace_span("compute_layout"):
            positions = compute_layout(levels, self._store.settings.layout.geometry())
        arranged = apply_positions(nodes, positions)

        failed: list[dict[str, str]] = []
        persisted = 0
        if not dry_run:
            run.advance(ArrangeState.PERSISTING)
            with trace_span("persist_positions") as span:
                failed = self._persist(positions)
                persisted = len(positions) - len(failed)
                if span:
                    span.annotate("persisted", persisted)
                    span.annotate("failed", len(failed))
        run.advance(ArrangeState.DONE)

        warnings = [f"Position not saved for task {f['id']}: {f['error']}" for f in failed]
        if failed:
            warnings.append(
                f"{len(failed)} of {len(positions)} positions were not saved; "
                "run arrange again to retry"
            )
        return ServiceResult(
            ok=True,
            op=op,
            data=self._payload(
                run,
                arranged,
                levels,
                persisted=persisted,
                failed=failed,
                dry_run=dry_run,
            ),
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _persist(self, positions: dict[str, Position]) -> list[dict[str, str]]:
        """Write all positions concurrently; return the per-task failures.

        Every update is submitted before any result is awaited. Results
        are collected in submission order so failure reports are stable.
        """
        workers = min(self._store.settings.arrange.max_workers, len(positions))
        failed: list[dict[str, str]] = []
        with ThreadPoolExecutor(max_workers=max(workers, 1)) as pool:
            futures: dict[str, Future[bool]] = {
                task_id: pool.submit(self._store.update_task_position, task_id, x, y)
                for task_id, (x, y) in positions.items()
            }
            for task_id, future in futures.items():
                try:
                    if not future.result():
                        failed.append({"id": task_id, "error": "task no longer exists"})
                except Exception as exc:
                    logger.warning("Position write failed for %s", task_id, exc_info=True)
                    failed.append({"id": task_id, "error": str(exc)})
        return failed

    @staticmethod
    def _payload(
        run: _Run,
        nodes: list[CanvasNode],
        levels: dict[str, int],
        *,
        persisted: int,
        failed: list[dict[str, str]],
        dry_run: bool,
    ) -> dict[str, Any]:
        items = [
            {
                "id": node.id,
                "title": node.data.get("title", ""),
                "level": levels.get(node.id, 0),
                "x": node.x,
                "y": node.y,
            }
            for node in nodes
        ]
        return {
            "graph_id": run.graph_id,
            "state": run.state.value,
            "states": run.history,
            "dry_run": dry_run,
            "count": len(items),
            "levels": (max(levels.values()) + 1) if levels else 0,
            "persisted": persisted,
            "failed": failed,
            "items": items,
        }
