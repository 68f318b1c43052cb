"""Longest-path leveling of an acyclic dependency graph.

A node's level is the length of the longest path reaching it from any
root (a node with no incoming edges), so every dependent sits strictly
below all of its parents.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable

from taskboard.domain.adjacency import Edge, build_adjacency, in_degrees, ordered_nodes

logger = logging.getLogger(__name__)


def find_roots(adjacency: dict[str, list[str]]) -> list[str]:
    """Nodes with zero incoming edges, in adjacency order."""
    degrees = in_degrees(adjacency)
    return [node for node, degree in degrees.items() if degree == 0]


def compute_levels(nodes: Iterable[str], edges: Iterable[Edge]) -> dict[str, int]:
    """Assign every node an integer level, breadth-first from the roots.

    On acyclic input a child is queued only once all of its parents are
    leveled, so each edge is relaxed once. If that pass cannot reach
    every node the graph has a cycle, and levels are recomputed by plain
    relaxation, which may revisit a node once per improvement.

    Precondition: the graph is acyclic. If there is at least one edge but
    no root (only possible when the precondition was bypassed), every
    node is seeded as a root instead of failing. Candidate levels are
    capped at ``len(nodes) - 1``, the longest possible simple path, so
    relaxation terminates even on cyclic input.

    Nodes unreachable from any root default to level 0. Edges touching
    ids absent from *nodes* are ignored. The result is ordered like
    *nodes*.
    """
    order = ordered_nodes(nodes)
    adjacency = build_adjacency(order, edges)

    roots = find_roots(adjacency)
    has_edges = any(adjacency.values())
    if has_edges and not roots:
        logger.warning(
            "No root found among %d nodes; treating every node as a root",
            len(order),
        )
        roots = list(order)

    levels = _levels_in_topological_order(adjacency, roots)
    if len(levels) < len(order):
        levels = _relax(adjacency, roots, max(len(order) - 1, 0))
    return {node: levels.get(node, 0) for node in order}


def _levels_in_topological_order(
    adjacency: dict[str, list[str]], roots: list[str]
) -> dict[str, int]:
    waiting = in_degrees(adjacency)
    levels: dict[str, int] = dict.fromkeys(roots, 0)
    queue: deque[str] = deque(root for root in roots if waiting[root] == 0)
    while queue:
        parent = queue.popleft()
        for child in adjacency[parent]:
            levels[child] = max(levels.get(child, 0), levels[parent] + 1)
            waiting[child] -= 1
            if waiting[child] == 0:
                queue.append(child)
    return {node: level for node, level in levels.items() if waiting[node] == 0}


def _relax(adjacency: dict[str, list[str]], roots: list[str], max_level: int) -> dict[str, int]:
    """Capped relaxation; terminates on cyclic input."""
    levels: dict[str, int] = dict.fromkeys(roots, 0)
    queue: deque[str] = deque(roots)
    while queue:
        parent = queue.popleft()
        candidate = levels[parent] + 1
        if candidate > max_level:
            continue
        for child in adjacency[parent]:
            if candidate > levels.get(child, -1):
                levels[child] = candidate
                queue.append(child)
    return levels
