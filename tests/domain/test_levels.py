"""Tests for longest-path leveling."""

from __future__ import annotations

import logging
import random

import networkx as nx
import pytest

from taskboard.domain.adjacency import build_adjacency
from taskboard.domain.levels import compute_levels, find_roots


class TestFindRoots:
    def test_roots_in_node_order(self) -> None:
        adjacency = build_adjacency(["B", "A", "C"], [("A", "C")])
        assert find_roots(adjacency) == ["B", "A"]

    def test_no_roots_in_cycle(self) -> None:
        adjacency = build_adjacency(["A", "B"], [("A", "B"), ("B", "A")])
        assert find_roots(adjacency) == []


class TestComputeLevels:
    def test_chain(self) -> None:
        levels = compute_levels(["A", "B", "C"], [("A", "B"), ("B", "C")])
        assert levels == {"A": 0, "B": 1, "C": 2}

    def test_longest_path_wins(self) -> None:
        """A->B, B->C, A->C: C sits below B, not beside it."""
        levels = compute_levels(["A", "B", "C"], [("A", "B"), ("B", "C"), ("A", "C")])
        assert levels["C"] == 2

    def test_shortcut_edge_listed_first(self) -> None:
        levels = compute_levels(["A", "B", "C"], [("A", "C"), ("A", "B"), ("B", "C")])
        assert levels == {"A": 0, "B": 1, "C": 2}

    def test_fan_out(self) -> None:
        levels = compute_levels(["A", "B", "C"], [("A", "B"), ("A", "C")])
        assert levels == {"A": 0, "B": 1, "C": 1}

    def test_multiple_roots(self) -> None:
        levels = compute_levels(["A", "X", "B"], [("A", "B"), ("X", "B")])
        assert levels == {"A": 0, "X": 0, "B": 1}

    def test_no_edges_all_zero(self) -> None:
        assert compute_levels(["A", "B", "C"], []) == {"A": 0, "B": 0, "C": 0}

    def test_single_node(self) -> None:
        assert compute_levels(["A"], []) == {"A": 0}

    def test_empty(self) -> None:
        assert compute_levels([], []) == {}

    def test_result_keeps_node_order(self) -> None:
        levels = compute_levels(["C", "B", "A"], [("A", "B"), ("B", "C")])
        assert list(levels) == ["C", "B", "A"]

    def test_dangling_edges_ignored(self) -> None:
        levels = compute_levels(["A", "B"], [("A", "B"), ("ghost", "A")])
        assert levels == {"A": 0, "B": 1}

    def test_no_root_fallback_terminates(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="taskboard.domain.levels"):
            levels = compute_levels(["A", "B"], [("A", "B"), ("B", "A")])
        assert set(levels) == {"A", "B"}
        assert all(0 <= level <= 1 for level in levels.values())
        assert "No root found" in caplog.text

    def test_dag_levels_without_relaxation(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def _no_relax(*_args: object) -> dict[str, int]:
            raise AssertionError("acyclic input fell back to relaxation")

        monkeypatch.setattr("taskboard.domain.levels._relax", _no_relax)
        nodes = [f"n{i}" for i in range(2000)]
        edges = [(nodes[i], nodes[i + 1]) for i in range(1999)]
        edges += [(nodes[i], nodes[i + 2]) for i in range(1998)]
        levels = compute_levels(nodes, edges)
        assert levels == {node: i for i, node in enumerate(nodes)}

    def test_cycle_behind_root_terminates(self) -> None:
        levels = compute_levels(["R", "A", "B"], [("R", "A"), ("A", "B"), ("B", "A")])
        assert levels["R"] == 0
        assert max(levels.values()) <= 2


class TestLevelInvariant:
    @staticmethod
    def _random_dag(seed: int, n: int = 40, p: float = 0.1) -> nx.DiGraph:
        rng = random.Random(seed)
        g = nx.DiGraph()
        g.add_nodes_from(f"n{i}" for i in range(n))
        for i in range(n):
            for j in range(i + 1, n):
                if rng.random() < p:
                    g.add_edge(f"n{i}", f"n{j}")
        return g

    @pytest.mark.parametrize("seed", range(10))
    def test_every_edge_descends(self, seed: int) -> None:
        g = self._random_dag(seed)
        assert nx.is_directed_acyclic_graph(g)
        levels = compute_levels(list(g.nodes), list(g.edges))
        assert all(level >= 0 for level in levels.values())
        for source, target in g.edges:
            assert levels[target] >= levels[source] + 1

    @pytest.mark.parametrize("seed", range(5))
    def test_matches_longest_path_oracle(self, seed: int) -> None:
        g = self._random_dag(seed)
        expected: dict[str, int] = {}
        for node in nx.topological_sort(g):
            preds = list(g.predecessors(node))
            expected[node] = max((expected[p] + 1 for p in preds), default=0)
        assert compute_levels(list(g.nodes), list(g.edges)) == expected
