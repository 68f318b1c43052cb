"""Deterministic canvas layout from level assignments.

Each level becomes one row. Rows are centered on the same vertical
centerline (``start_x``) whatever their width, and stacked downward
from ``start_y`` by ``vertical_spacing`` per level.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

type Position = tuple[float, float]


@dataclass(frozen=True)
class LayoutGeometry:
    """Fixed geometric constants for the layout, in pixels.

    ``node_height`` does not affect placement; it is kept so callers can
    size rendered nodes consistently with the spacing.
    """

    node_width: float = 240
    node_height: float = 200
    horizontal_spacing: float = 300
    vertical_spacing: float = 280
    start_x: float = 100
    start_y: float = 100


DEFAULT_GEOMETRY = LayoutGeometry()

# Where the canvas shows a task that has never been placed: a 5-wide grid.
GRID_COLUMNS = 5
GRID_CELL = (250.0, 200.0)
GRID_MARGIN = 50.0


def grid_position(index: int) -> Position:
    """Default canvas position of the *index*-th task of a workspace."""
    row, column = divmod(index, GRID_COLUMNS)
    return column * GRID_CELL[0] + GRID_MARGIN, row * GRID_CELL[1] + GRID_MARGIN


def group_by_level(levels: Mapping[str, int]) -> dict[int, list[str]]:
    """Group node ids by level, keeping the mapping's iteration order."""
    groups: dict[int, list[str]] = {}
    for node_id, level in levels.items():
        groups.setdefault(level, []).append(node_id)
    return groups


def compute_layout(
    levels: Mapping[str, int],
    geometry: LayoutGeometry = DEFAULT_GEOMETRY,
) -> dict[str, Position]:
    """Compute an ``(x, y)`` position for every node in *levels*.

    For a row of N nodes::

        total_width   = N * horizontal_spacing - (horizontal_spacing - node_width)
        level_start_x = start_x - total_width / 2 + node_width / 2
        x_i           = level_start_x + i * horizontal_spacing
        y             = start_y + level * vertical_spacing

    Pure function: the same input always yields identical output.
    """
    h = geometry.horizontal_spacing
    positions: dict[str, Position] = {}
    for level, row in group_by_level(levels).items():
        total_width = len(row) * h - (h - geometry.node_width)
        level_start_x = geometry.start_x - total_width / 2 + geometry.node_width / 2
        y = float(geometry.start_y + level * geometry.vertical_spacing)
        for i, node_id in enumerate(row):
            positions[node_id] = (float(level_start_x + i * h), y)
    return positions


@dataclass(frozen=True)
class CanvasNode:
    """A task as placed on the canvas: id, position, and opaque data."""

    id: str
    x: float | None = None
    y: float | None = None
    data: dict[str, Any] = field(default_factory=dict)


def apply_positions(
    nodes: Iterable[CanvasNode],
    positions: Mapping[str, Position],
) -> list[CanvasNode]:
    """Return *nodes* with positions replaced from *positions*.

    Nodes without a computed position are returned unchanged. Fields
    other than ``x`` and ``y`` are never touched.
    """
    merged: list[CanvasNode] = []
    for node in nodes:
        pos = positions.get(node.id)
        if pos is None:
            merged.append(node)
        else:
            merged.append(replace(node, x=pos[0], y=pos[1]))
    return merged
