"""Adjacency helpers shared by the arrange algorithms.

Edges reference node ids only. Any edge whose source or target is not
in the node set is dropped here, so dangling links never reach the
algorithms and never raise.
"""

from __future__ import annotations

from collections.abc import Iterable

type Edge = tuple[str, str]


def ordered_nodes(nodes: Iterable[str]) -> list[str]:
    """Deduplicate *nodes*, keeping first-seen order."""
    return list(dict.fromkeys(nodes))


def build_adjacency(nodes: Iterable[str], edges: Iterable[Edge]) -> dict[str, list[str]]:
    """Map each node to its targets, in edge order.

    Every node gets an entry (isolated nodes map to an empty list).
    Parallel edges are kept as given.
    """
    adjacency: dict[str, list[str]] = {node: [] for node in nodes}
    for source, target in edges:
        if source in adjacency and target in adjacency:
            adjacency[source].append(target)
    return adjacency


def in_degrees(adjacency: dict[str, list[str]]) -> dict[str, int]:
    """Count incoming edges per node from an adjacency map."""
    degrees = dict.fromkeys(adjacency, 0)
    for targets in adjacency.values():
        for target in targets:
            degrees[target] += 1
    return degrees
