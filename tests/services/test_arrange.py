"""Tests for ArrangeService: cycle gate, leveling, layout, and persistence."""

from __future__ import annotations

from typing import Any

import pytest

from taskboard.infrastructure.store import Store
from taskboard.services.arrange import ArrangeService, ArrangeState
from taskboard.services.task import TaskService
from tests.conftest import build_board, create_graph, create_link, create_task


def _positions(store: Store, *task_ids: str) -> dict[str, tuple[Any, Any]]:
    svc = TaskService(store)
    out = {}
    for task_id in task_ids:
        data = svc.get(task_id).data
        out[task_id] = (data["x"], data["y"])
    return out


def _items(result: Any) -> dict[str, dict[str, Any]]:
    return {item["id"]: item for item in result.data["items"]}


# ---------------------------------------------------------------------------
# arrange: end-to-end scenarios
# ---------------------------------------------------------------------------


class TestArrange:
    def test_chain(self, store: Store) -> None:
        gid = build_board(store, ["A", "B", "C"], [("A", "B"), ("B", "C")])
        result = ArrangeService(store).arrange(gid)
        assert result.ok, result.error
        items = _items(result)
        assert [items[t]["level"] for t in "ABC"] == [0, 1, 2]
        assert _positions(store, "A", "B", "C") == {
            "A": (100.0, 100.0),
            "B": (100.0, 380.0),
            "C": (100.0, 660.0),
        }
        assert result.data["persisted"] == 3
        assert result.data["failed"] == []
        assert result.data["levels"] == 3

    def test_fan_out(self, store: Store) -> None:
        gid = build_board(store, ["A", "B", "C"], [("A", "B"), ("A", "C")])
        result = ArrangeService(store).arrange(gid)
        assert result.ok
        assert _positions(store, "B", "C") == {"B": (-50.0, 380.0), "C": (250.0, 380.0)}

    def test_shortcut_edge(self, store: Store) -> None:
        gid = build_board(store, ["A", "B", "C"], [("A", "B"), ("B", "C"), ("A", "C")])
        result = ArrangeService(store).arrange(gid)
        assert _items(result)["C"]["level"] == 2

    def test_single_task(self, store: Store) -> None:
        gid = build_board(store, ["A"], [])
        result = ArrangeService(store).arrange(gid)
        assert result.ok
        assert result.warnings == []
        assert _positions(store, "A") == {"A": (100.0, 100.0)}

    def test_state_history(self, store: Store) -> None:
        gid = build_board(store, ["A", "B"], [("A", "B")])
        result = ArrangeService(store).arrange(gid)
        assert result.data["state"] == ArrangeState.DONE
        assert result.data["states"] == [
            "idle",
            "detecting",
            "leveling",
            "layout_computing",
            "persisting",
            "done",
        ]

    def test_empty_graph(self, store: Store) -> None:
        create_graph(store, "Empty", graph_id="empty")
        result = ArrangeService(store).arrange("empty")
        assert result.ok
        assert result.data["count"] == 0
        assert result.data["levels"] == 0
        assert result.data["states"] == ["idle", "done"]

    def test_unknown_graph(self, store: Store) -> None:
        result = ArrangeService(store).arrange("nope")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_only_position_changes(self, store: Store) -> None:
        gid = build_board(store, ["A", "B"], [("A", "B")])
        before = TaskService(store).get("B").data
        ArrangeService(store).arrange(gid)
        after = TaskService(store).get("B").data
        for key in ("title", "status", "description", "updated_at", "workflow_id"):
            assert after[key] == before[key]

    def test_idempotent(self, store: Store) -> None:
        gid = build_board(store, ["A", "B", "C", "D"], [("A", "B"), ("A", "C"), ("C", "D")])
        first = ArrangeService(store).arrange(gid)
        second = ArrangeService(store).arrange(gid)
        assert first.data["items"] == second.data["items"]

    def test_other_graph_untouched(self, store: Store) -> None:
        gid = build_board(store, ["A", "B"], [("A", "B")])
        create_graph(store, "Other", graph_id="other")
        create_task(store, "other", "Z", task_id="Z", x=7.0, y=8.0)
        ArrangeService(store).arrange(gid)
        assert _positions(store, "Z") == {"Z": (7.0, 8.0)}

    def test_custom_geometry(self, board_root: Any) -> None:
        (board_root / "taskboard.toml").write_text("[layout]\nstart_x = 0\nstart_y = 0\n")
        from taskboard.config.settings import TbSettings

        s = Store(TbSettings.from_cli(board_root=board_root))
        try:
            gid = build_board(s, ["A", "B"], [("A", "B")])
            ArrangeService(s).arrange(gid)
            assert _positions(s, "A", "B") == {"A": (0.0, 0.0), "B": (0.0, 280.0)}
        finally:
            s.close()


# ---------------------------------------------------------------------------
# arrange: cycles
# ---------------------------------------------------------------------------


class TestArrangeCycle:
    def test_two_task_cycle(self, store: Store, monkeypatch: pytest.MonkeyPatch) -> None:
        gid = build_board(store, ["A", "B"], [("A", "B"), ("B", "A")])
        called: list[Any] = []
        monkeypatch.setattr(
            "taskboard.services.arrange.compute_levels",
            lambda *a, **kw: called.append(a),
        )
        result = ArrangeService(store).arrange(gid)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "CYCLE_DETECTED"
        cycle = result.error.detail["cycle"]
        assert set(cycle) == {"A", "B"}
        assert cycle[0] == cycle[-1]
        assert result.error.detail["state"] == "cycle_found"
        assert called == []

    def test_cycle_leaves_positions(self, store: Store) -> None:
        create_graph(store, "Board", graph_id="g1")
        for task_id, pos in (("A", (1.0, 2.0)), ("B", (3.0, 4.0)), ("C", (None, None))):
            create_task(store, "g1", task_id, task_id=task_id, x=pos[0], y=pos[1])
        create_link(store, "g1", "A", "B")
        create_link(store, "g1", "B", "C")
        create_link(store, "g1", "C", "A")
        result = ArrangeService(store).arrange("g1")
        assert not result.ok
        assert _positions(store, "A", "B", "C") == {
            "A": (1.0, 2.0),
            "B": (3.0, 4.0),
            "C": (None, None),
        }

    def test_message_names_cycle(self, store: Store) -> None:
        gid = build_board(store, ["A", "B"], [("A", "B"), ("B", "A")])
        result = ArrangeService(store).arrange(gid)
        assert result.error is not None
        assert "A → B → A" in result.error.message


# ---------------------------------------------------------------------------
# arrange: dry run and persistence failures
# ---------------------------------------------------------------------------


class TestArrangePersistence:
    def test_dry_run_writes_nothing(self, store: Store) -> None:
        gid = build_board(store, ["A", "B"], [("A", "B")])
        result = ArrangeService(store).arrange(gid, dry_run=True)
        assert result.ok
        assert result.data["dry_run"] is True
        assert result.data["persisted"] == 0
        assert "persisting" not in result.data["states"]
        assert _items(result)["B"]["y"] == 380.0
        assert _positions(store, "A", "B") == {"A": (None, None), "B": (None, None)}

    def test_partial_failure_reported(self, store: Store, monkeypatch: pytest.MonkeyPatch) -> None:
        gid = build_board(store, ["A", "B", "C"], [("A", "B"), ("B", "C")])
        original = store.update_task_position

        def flaky(task_id: str, x: float, y: float) -> bool:
            if task_id == "B":
                raise RuntimeError("disk full")
            return original(task_id, x, y)

        monkeypatch.setattr(store, "update_task_position", flaky)
        result = ArrangeService(store).arrange(gid)
        assert result.ok
        assert result.data["failed"] == [{"id": "B", "error": "disk full"}]
        assert result.data["persisted"] == 2
        assert any("B" in w and "disk full" in w for w in result.warnings)
        # The returned layout still carries B's computed position.
        assert _items(result)["B"]["y"] == 380.0
        # Writes for the other tasks are not rolled back.
        monkeypatch.setattr(store, "update_task_position", original)
        assert _positions(store, "A", "C") == {"A": (100.0, 100.0), "C": (100.0, 660.0)}

    def test_vanished_task_reported(self, store: Store, monkeypatch: pytest.MonkeyPatch) -> None:
        gid = build_board(store, ["A", "B"], [("A", "B")])
        original = store.update_task_position

        def vanish(task_id: str, x: float, y: float) -> bool:
            if task_id == "A":
                return False
            return original(task_id, x, y)

        monkeypatch.setattr(store, "update_task_position", vanish)
        result = ArrangeService(store).arrange(gid)
        assert result.ok
        assert result.data["failed"] == [{"id": "A", "error": "task no longer exists"}]

    def test_all_updates_issued(self, store: Store, monkeypatch: pytest.MonkeyPatch) -> None:
        ids = [f"t{i}" for i in range(12)]
        gid = build_board(store, ids, [])
        seen: list[str] = []
        original = store.update_task_position

        def record(task_id: str, x: float, y: float) -> bool:
            seen.append(task_id)
            return original(task_id, x, y)

        monkeypatch.setattr(store, "update_task_position", record)
        result = ArrangeService(store).arrange(gid)
        assert result.ok
        assert sorted(seen) == sorted(ids)


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------


class TestCheck:
    def test_acyclic(self, store: Store) -> None:
        gid = build_board(store, ["A", "B"], [("A", "B")])
        result = ArrangeService(store).check(gid)
        assert result.ok
        assert result.data["acyclic"] is True
        assert result.data["cycle"] is None
        assert result.data["nodes"] == 2
        assert result.data["links"] == 1
        assert result.warnings == []

    def test_cycle_reported_as_warning(self, store: Store) -> None:
        gid = build_board(store, ["A", "B"], [("A", "B"), ("B", "A")])
        result = ArrangeService(store).check(gid)
        assert result.ok
        assert result.data["acyclic"] is False
        assert result.data["cycle"] == ["A", "B", "A"]
        assert len(result.warnings) == 1

    def test_unknown_graph(self, store: Store) -> None:
        result = ArrangeService(store).check("nope")
        assert not result.ok
