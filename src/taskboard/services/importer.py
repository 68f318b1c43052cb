"""ImportService — load a board exported as TSV files.

Reads ``Graphs.tsv``, ``Workflows.tsv``, ``Tasks.tsv`` and ``Links.tsv``
from one directory, in that order so references resolve. Records keep
their original ids. A record whose id already exists is skipped, never
overwritten, so an import can be re-run safely. Missing files are
skipped with a warning.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import Table, insert
from sqlalchemy.exc import IntegrityError

from taskboard.domain.types import DEFAULT_BACKGROUND, DEFAULT_FOREGROUND, parse_status
from taskboard.infrastructure.database.schema import graphs, links, tasks, workflows
from taskboard.infrastructure.tsv import TSV_FILES, read_tsv
from taskboard.services._helpers import now_iso, parse_float
from taskboard.services.base import BaseService
from taskboard.services.result import ServiceResult, fail
from taskboard.services.telemetry import trace_span, traced

IMPORT_USER = "migration"
_EXISTS = "already exists"


class ImportService(BaseService):
    """Imports graphs, workflows, tasks, and links from TSV exports."""

    @traced
    def import_tsv(self, directory: Path) -> ServiceResult:
        """Import every TSV file found in *directory*."""
        op = "import_tsv"
        if not directory.is_dir():
            return fail(op, "NOT_FOUND", f"Not a directory: {directory}")
        present = {kind: directory / name for kind, name in TSV_FILES.items()}
        if not any(path.is_file() for path in present.values()):
            expected = ", ".join(TSV_FILES.values())
            return fail(op, "NO_FILES", f"No TSV files in {directory} (expected {expected})")

        warnings: list[str] = []
        stats: dict[str, dict[str, int]] = {}
        builders = {
            "graphs": self._graph_values,
            "workflows": self._workflow_values,
            "tasks": self._task_values,
            "links": self._link_values,
        }
        tables = {"graphs": graphs, "workflows": workflows, "tasks": tasks, "links": links}

        for kind, path in present.items():
            counts = {"imported": 0, "skipped": 0, "errors": 0}
            stats[kind] = counts
            if not path.is_file():
                warnings.append(f"{path.name} not found, skipping {kind}")
                continue

            with trace_span(f"import_{kind}"):
                for row in read_tsv(path):
                    values, reason = builders[kind](row)
                    if values is None:
                        counts["skipped"] += 1
                        warnings.append(f"{kind[:-1]} {row['id']}: {reason}, skipping")
                        continue
                    try:
                        reason = self._insert_new(tables[kind], values)
                    except IntegrityError as exc:
                        counts["errors"] += 1
                        warnings.append(f"{kind[:-1]} {row['id']}: {exc.orig}")
                        continue
                    if reason is None:
                        counts["imported"] += 1
                        continue
                    counts["skipped"] += 1
                    if reason != _EXISTS:
                        warnings.append(f"{kind[:-1]} {row['id']}: {reason}, skipping")

        return ServiceResult(
            ok=True,
            op=op,
            data={"directory": str(directory), "stats": stats},
            warnings=warnings,
        )

    def _insert_new(self, table: Table, values: dict[str, Any]) -> str | None:
        """Insert *values*; return why the row was skipped, or None if inserted.

        Links whose endpoints are tasks of another graph are refused. An
        endpoint that does not exist at all is left to the foreign key.
        """
        with self._store.transaction() as txn:
            if txn.exists(table, values["id"]):
                return _EXISTS
            if table is links:
                for task_id in (values["source_id"], values["target_id"]):
                    task = txn.get_task(task_id)
                    if task is not None and task["graph_id"] != values["graph_id"]:
                        return f"task {task_id} not in graph {values['graph_id']}"
            txn.conn.execute(insert(table).values(**values))
        return None

    # ------------------------------------------------------------------
    # Row -> insert values. Each returns (values, None) or (None, reason).
    # ------------------------------------------------------------------

    @staticmethod
    def _graph_values(row: dict[str, Any]) -> tuple[dict[str, Any] | None, str | None]:
        now = now_iso()
        return {
            "id": row["id"],
            "name": row.get("name") or "",
            "created_by": row.get("createdBy") or IMPORT_USER,
            "created_at": row.get("createdAt") or now,
            "updated_at": row.get("updatedAt") or now,
        }, None

    @staticmethod
    def _workflow_values(row: dict[str, Any]) -> tuple[dict[str, Any] | None, str | None]:
        if not row.get("graph_id"):
            return None, "missing graph_id"
        return {"id": row["id"], "label": row.get("label") or "", "graph_id": row["graph_id"]}, None

    @staticmethod
    def _task_values(row: dict[str, Any]) -> tuple[dict[str, Any] | None, str | None]:
        if not row.get("graph_id"):
            return None, "missing graph_id"
        try:
            status = parse_status(row.get("status") or "Pending").value
        except ValueError as exc:
            return None, str(exc)
        now = now_iso()
        return {
            "id": row["id"],
            "graph_id": row["graph_id"],
            "title": row.get("title") or "",
            "description": row.get("description") or "",
            "status": status,
            "background_color": row.get("backgroundColor") or DEFAULT_BACKGROUND,
            "foreground_color": row.get("foregroundColor") or DEFAULT_FOREGROUND,
            "created_by": row.get("createdBy") or IMPORT_USER,
            "created_at": row.get("createdAt") or now,
            "updated_at": row.get("updatedAt") or now,
            "updated_by": row.get("updatedBy"),
            "assigned_to": row.get("assignedTo"),
            "assigned_by": row.get("assignedBy"),
            "workflow_id": row.get("workflow_id"),
            "x": parse_float(row.get("x")),
            "y": parse_float(row.get("y")),
        }, None

    @staticmethod
    def _link_values(row: dict[str, Any]) -> tuple[dict[str, Any] | None, str | None]:
        if not (row.get("source") and row.get("target") and row.get("graph_id")):
            return None, "missing source, target, or graph_id"
        if row["source"] == row["target"]:
            return None, "self link"
        return {
            "id": row["id"],
            "graph_id": row["graph_id"],
            "source_id": row["source"],
            "target_id": row["target"],
        }, None
