"""Sidebar-style task filtering by workflow and status.

A task is *filtered* (dimmed on the canvas, hidden from list output)
when it fails either active criterion. With no criteria set, nothing is
filtered.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class TaskFilter:
    """Active filter criteria. ``None`` means the criterion is off."""

    workflow_id: str | None = None
    status: str | None = None

    @property
    def active(self) -> bool:
        return self.workflow_id is not None or self.status is not None

    def matches(self, task: dict[str, Any]) -> bool:
        """True if *task* passes every active criterion."""
        if self.workflow_id is not None and task.get("workflow_id") != self.workflow_id:
            return False
        if self.status is not None and task.get("status") != self.status:
            return False
        return True
