"""Tests for ImportService — TSV board import."""

from __future__ import annotations

from pathlib import Path

import pytest

from taskboard.infrastructure.store import Store
from taskboard.services.arrange import ArrangeService
from taskboard.services.graph import GraphService
from taskboard.services.importer import ImportService
from taskboard.services.task import TaskService


def _write(directory: Path, name: str, *lines: str) -> None:
    (directory / name).write_text("\n".join(lines) + "\n", encoding="utf-8")


@pytest.fixture
def export_dir(tmp_path: Path) -> Path:
    """A complete four-file export with one graph, workflow, two tasks, one link."""
    d = tmp_path / "export"
    d.mkdir()
    _write(d, "Graphs.tsv", "id\tname\tcreatedBy", 'g1\t"Q3 Launch"\talice')
    _write(d, "Workflows.tsv", "id\tlabel\tgraph_id", "wf1\tMarketing\tg1")
    _write(
        d,
        "Tasks.tsv",
        "id\ttitle\tstatus\tgraph_id\tworkflow_id\tbackgroundColor\tassignedTo\tx\ty",
        "t1\tDesign\tPending\tg1\twf1\t#ff0000\tbob\t10\t20",
        "t2\tBuild\tIn Process\tg1\t\t\t\t\t",
    )
    _write(d, "Links.tsv", "id\tsource\ttarget\tgraph_id", "L1\tt1\tt2\tg1")
    return d


class TestImportTsv:
    def test_full_import(self, store: Store, export_dir: Path) -> None:
        result = ImportService(store).import_tsv(export_dir)
        assert result.ok, result.error
        stats = result.data["stats"]
        assert stats["graphs"] == {"imported": 1, "skipped": 0, "errors": 0}
        assert stats["workflows"]["imported"] == 1
        assert stats["tasks"]["imported"] == 2
        assert stats["links"]["imported"] == 1

        t1 = TaskService(store).get("t1").data
        assert t1["background_color"] == "#ff0000"
        assert t1["foreground_color"] == "#000000"
        assert t1["assigned_to"] == "bob"
        assert (t1["x"], t1["y"]) == (10.0, 20.0)
        assert t1["created_by"] == "migration"
        assert t1["downstream"] == ["t2"]

        t2 = TaskService(store).get("t2").data
        assert t2["status"] == "In Process"
        assert t2["workflow_id"] is None
        assert t2["x"] is None

    def test_reimport_skips_existing(self, store: Store, export_dir: Path) -> None:
        ImportService(store).import_tsv(export_dir)
        result = ImportService(store).import_tsv(export_dir)
        assert result.ok
        for counts in result.data["stats"].values():
            assert counts["imported"] == 0
            assert counts["errors"] == 0

    def test_missing_files_warn(self, store: Store, export_dir: Path) -> None:
        (export_dir / "Links.tsv").unlink()
        result = ImportService(store).import_tsv(export_dir)
        assert result.ok
        assert any("Links.tsv" in w for w in result.warnings)

    def test_self_link_skipped(self, store: Store, export_dir: Path) -> None:
        _write(export_dir, "Links.tsv", "id\tsource\ttarget\tgraph_id", "L1\tt1\tt1\tg1")
        result = ImportService(store).import_tsv(export_dir)
        assert result.data["stats"]["links"] == {"imported": 0, "skipped": 1, "errors": 0}

    def test_dangling_link_is_error(self, store: Store, export_dir: Path) -> None:
        _write(export_dir, "Links.tsv", "id\tsource\ttarget\tgraph_id", "L1\tt1\tghost\tg1")
        result = ImportService(store).import_tsv(export_dir)
        assert result.ok
        assert result.data["stats"]["links"]["errors"] == 1
        assert result.warnings

    def test_link_across_graphs_skipped(self, store: Store, export_dir: Path) -> None:
        _write(export_dir, "Graphs.tsv", "id\tname", "g1\tOne", "g2\tTwo")
        _write(
            export_dir,
            "Tasks.tsv",
            "id\ttitle\tgraph_id",
            "t1\tDesign\tg1",
            "t2\tBuild\tg1",
            "t3\tElsewhere\tg2",
        )
        _write(
            export_dir,
            "Links.tsv",
            "id\tsource\ttarget\tgraph_id",
            "L1\tt1\tt2\tg1",
            "L2\tt1\tt3\tg1",
        )
        result = ImportService(store).import_tsv(export_dir)
        assert result.data["stats"]["links"] == {"imported": 1, "skipped": 1, "errors": 0}
        assert any("t3 not in graph g1" in w for w in result.warnings)
        assert ArrangeService(store).check("g1").data["links"] == 1
        assert GraphService(store).delete("g2").ok

    def test_bad_status_skipped(self, store: Store, export_dir: Path) -> None:
        _write(export_dir, "Tasks.tsv", "id\ttitle\tstatus\tgraph_id", "t9\tX\tBlocked\tg1")
        result = ImportService(store).import_tsv(export_dir)
        assert result.data["stats"]["tasks"]["skipped"] == 1

    def test_not_a_directory(self, store: Store, tmp_path: Path) -> None:
        result = ImportService(store).import_tsv(tmp_path / "missing")
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_no_files(self, store: Store, tmp_path: Path) -> None:
        empty = tmp_path / "empty"
        empty.mkdir()
        result = ImportService(store).import_tsv(empty)
        assert result.error is not None
        assert result.error.code == "NO_FILES"
