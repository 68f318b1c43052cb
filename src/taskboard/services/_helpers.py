"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, datetime


def now_iso() -> str:
    """Current UTC time as standard ISO 8601 (record timestamps)."""
    return datetime.now(UTC).isoformat()


def parse_float(value: str | float | None) -> float | None:
    """Parse an optional coordinate; blank or unparsable values give None.

    Examples:
        >>> parse_float("12.5")
        12.5
        >>> parse_float("")
        >>> parse_float(None)
    """
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
