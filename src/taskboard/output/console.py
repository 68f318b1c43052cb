"""Rich Console factory and theme for taskboard output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

TB_THEME = Theme(
    {
        "tb.ok": "bold green",
        "tb.error": "bold red",
        "tb.warning": "bold yellow",
        "tb.op": "bold cyan",
        "tb.key": "dim",
        "tb.id": "bold blue",
        "tb.title": "bold",
        "tb.level": "magenta",
        "tb.status.pending": "yellow",
        "tb.status.in_process": "cyan",
        "tb.status.completed": "green",
    }
)

_STATUS_STYLES: dict[str, str] = {
    "Pending": "tb.status.pending",
    "In Process": "tb.status.in_process",
    "Completed": "tb.status.completed",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=TB_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_status(status: str) -> str:
    """Return the Rich style name for a task status."""
    return _STATUS_STYLES.get(status, "")
