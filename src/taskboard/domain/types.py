"""Task status enum and display defaults.

Task status has three values and no enforced transition order. Colors
are CSS hex strings used when rendering a task on the canvas.
"""

from __future__ import annotations

from enum import StrEnum


class TaskStatus(StrEnum):
    """Task progress status."""

    PENDING = "Pending"
    IN_PROCESS = "In Process"
    COMPLETED = "Completed"


DEFAULT_BACKGROUND = "#ffffff"
DEFAULT_FOREGROUND = "#000000"


def parse_status(value: str) -> TaskStatus:
    """Resolve *value* to a TaskStatus, case-insensitively.

    Accepts the display value (``"In Process"``) or the member name
    (``"in_process"``). Raises ``ValueError`` for anything else.
    """
    normalized = value.strip().lower()
    for status in TaskStatus:
        if normalized in (status.value.lower(), status.name.lower()):
            return status
    valid = ", ".join(s.value for s in TaskStatus)
    msg = f"Unknown status {value!r}. Valid: {valid}"
    raise ValueError(msg)
