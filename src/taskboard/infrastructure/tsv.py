"""Tab-separated export files (one per record kind).

Format: first non-blank line is the header row; values are trimmed and
a single pair of surrounding double quotes is stripped. Empty cells
become None. Rows without an ``id`` are dropped.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path

TSV_FILES: dict[str, str] = {
    "graphs": "Graphs.tsv",
    "workflows": "Workflows.tsv",
    "tasks": "Tasks.tsv",
    "links": "Links.tsv",
}


def _clean(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        value = value[1:-1]
    return value


def parse_tsv(text: str) -> list[dict[str, Any]]:
    """Parse TSV *text* into row dicts keyed by header."""
    lines = [line for line in text.splitlines() if line.strip()]
    if not lines:
        return []

    headers = [_clean(h) for h in lines[0].split("\t")]
    rows: list[dict[str, Any]] = []
    for line in lines[1:]:
        values = [_clean(v) for v in line.split("\t")]
        row: dict[str, Any] = {}
        for i, header in enumerate(headers):
            value = values[i] if i < len(values) else ""
            row[header] = value or None
        if row.get("id"):
            rows.append(row)
    return rows


def read_tsv(path: Path) -> list[dict[str, Any]]:
    """Read and parse a TSV file."""
    return parse_tsv(path.read_text(encoding="utf-8"))
