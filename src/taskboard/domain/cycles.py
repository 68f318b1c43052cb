"""Cycle detection over the task dependency graph.

Depth-first search with white/gray/black bookkeeping: ``visited`` holds
every node ever entered, ``on_stack`` only the nodes on the current
exploration path. Reaching an ``on_stack`` node closes a cycle.

The search uses an explicit stack of child iterators instead of
recursion, so a 10K-node chain cannot exhaust the interpreter's call
stack. Roots are tried in node-set order and children in edge order,
which makes the reported cycle the first back edge found by the
equivalent recursive search.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from taskboard.domain.adjacency import Edge, build_adjacency, ordered_nodes


def detect_cycle(nodes: Iterable[str], edges: Iterable[Edge]) -> list[str] | None:
    """Return one cycle as a closed path, or None if the graph is acyclic.

    The path runs from the first occurrence of the repeated node on the
    DFS path through the current node, then repeats the first node:
    ``A -> B -> A`` is reported as ``["A", "B", "A"]`` and a self-loop
    on ``A`` as ``["A", "A"]``. It is the cycle along the DFS path, not
    necessarily the shortest cycle in the graph.

    Edges touching ids absent from *nodes* are ignored.
    """
    order = ordered_nodes(nodes)
    adjacency = build_adjacency(order, edges)

    visited: set[str] = set()
    path: list[str] = []
    # node -> index into path, for the gray set
    on_stack: dict[str, int] = {}

    for start in order:
        if start in visited:
            continue

        visited.add(start)
        on_stack[start] = len(path)
        path.append(start)
        stack: list[tuple[str, Iterator[str]]] = [(start, iter(adjacency[start]))]

        while stack:
            node, children = stack[-1]
            for child in children:
                if child in on_stack:
                    return [*path[on_stack[child] :], child]
                if child not in visited:
                    visited.add(child)
                    on_stack[child] = len(path)
                    path.append(child)
                    stack.append((child, iter(adjacency[child])))
                    break
            else:
                stack.pop()
                path.pop()
                del on_stack[node]

    return None


def format_cycle(cycle: list[str]) -> str:
    """Render a cycle path for display, e.g. ``A → B → A``."""
    return " → ".join(cycle)
