"""The return type of every taskboard service call.

Anything a user can cause (unknown IDs, a dependency cycle, a duplicate
link, a bad status) comes back as ``ok=False`` with a stable error
``code``. Exceptions are left for genuine faults.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one service op.

    ``op`` names the operation (``"arrange"``, ``"create_task"``) and
    selects the renderer. ``warnings`` carry non-fatal problems even on
    success; ``meta`` holds the telemetry span tree under ``--verbose``.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None


def fail(op: str, code: str, message: str, **detail: Any) -> ServiceResult:
    """Build the ``ok=False`` result for *op*; keyword args become ``error.detail``."""
    error = ServiceError(code=code, message=message, detail=detail)
    return ServiceResult(ok=False, op=op, error=error)
