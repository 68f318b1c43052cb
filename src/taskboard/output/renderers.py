"""Human-readable output for taskboard results.

One renderer per service op (tables for listings, panels for single
records, a level summary for arrange), looked up in ``_OP_RENDERERS``.
Ops without an entry print their data as ``key: value`` lines.
Everything is drawn on a StringIO-backed console and returned as text.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from taskboard.output.console import create_console, get_output, style_for_status

if TYPE_CHECKING:
    from rich.console import Console

    from taskboard.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode: ids only."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(
            str(item["id"]) for item in items if isinstance(item, dict) and "id" in item
        )
    if "id" in result.data:
        return str(result.data["id"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    console.print(Text("OK", style="tb.ok"), Text(f"  {result.op}", style="tb.op"))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="tb.key")
    if key == "id" or key.endswith("_id") or key in ("source", "target"):
        v = Text(str(value), style="tb.id")
    elif key in ("title", "name", "label"):
        v = Text(str(value), style="tb.title")
    elif isinstance(value, (dict, list)):
        v = Text(json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(k, v)


def _fmt_coord(value: Any) -> str:
    if value is None:
        return "-"
    return f"{float(value):g}"


def _display_coords(item: dict[str, Any]) -> list[Text]:
    """X/Y cells; default-grid coordinates of unplaced tasks are dimmed."""
    style = "tb.key" if item.get("placed") is False else ""
    return [
        Text(_fmt_coord(item.get("display_x", item.get("x"))), style=style),
        Text(_fmt_coord(item.get("display_y", item.get("y"))), style=style),
    ]


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{ak}={av}" for ak, av in annotations.items()) + ")"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(Text("ERROR", style="tb.error"), Text(f"  {result.op}", style="tb.op"), "—", msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Mutation renderers ────────────────────────────────────────────────


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render create/update/move/delete results."""
    _status_line(console, result)
    mutation_keys = (
        "id",
        "name",
        "title",
        "label",
        "status",
        "graph_id",
        "source",
        "target",
        "x",
        "y",
        "fields_changed",
        "links_removed",
        "untagged",
        "removed",
    )
    for key in mutation_keys:
        if key in result.data:
            _field(console, key, result.data[key])
    if verbose:
        _render_meta(console, result)


# ── Query renderers ───────────────────────────────────────────────────


def _render_graph_table(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("ID", style="tb.id", no_wrap=True)
    table.add_column("Name", style="tb.title")
    table.add_column("Tasks", justify="right")
    table.add_column("Created By")
    if verbose:
        table.add_column("Created", style="dim")
    for item in items:
        row = [
            str(item.get("id", "")),
            str(item.get("name", "")),
            str(item.get("task_count", 0)),
            str(item.get("created_by", "")),
        ]
        if verbose:
            row.append(str(item.get("created_at", "")))
        table.add_row(*row)
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} graphs")


def _render_graph(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    counts = d.get("counts", {})
    lines = [
        f"created by: {d.get('created_by', '')}",
        f"created: {d.get('created_at', '')}",
        f"updated: {d.get('updated_at', '')}",
        f"tasks: {counts.get('tasks', 0)}  links: {counts.get('links', 0)}  "
        f"workflows: {counts.get('workflows', 0)}",
    ]
    title = f"{d.get('id', '?')} — {d.get('name', '')}"
    console.print(Panel("\n".join(lines), title=title, border_style="dim", expand=False))


def _render_task_table(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("ID", style="tb.id", no_wrap=True)
    table.add_column("Title", style="tb.title")
    table.add_column("Status")
    table.add_column("Workflow")
    table.add_column("X", justify="right")
    table.add_column("Y", justify="right")
    if verbose:
        table.add_column("Assigned To")
    for item in items:
        status = str(item.get("status", ""))
        row: list[Any] = [
            str(item.get("id", "")),
            str(item.get("title", "")),
            Text(status, style=style_for_status(status)),
            str(item.get("workflow_label", "")),
            *_display_coords(item),
        ]
        if verbose:
            row.append(str(item.get("assigned_to") or ""))
        style = "dim" if item.get("filtered") else None
        table.add_row(*row, style=style)
    console.print(table)
    summary = f"\n{result.data.get('count', len(items))} tasks"
    if result.data.get("hidden"):
        summary += f" ({result.data['hidden']} hidden by filter)"
    unplaced = sum(1 for item in items if item.get("placed") is False)
    if unplaced:
        summary += f"; {unplaced} not yet placed, shown dimmed at their grid slot"
    console.print(summary)


def _render_task(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    lines: list[str] = []
    panel_keys = (
        "status",
        "workflow_label",
        "assigned_to",
        "assigned_by",
        "created_by",
        "updated_by",
    )
    for key in panel_keys:
        val = d.get(key)
        if val:
            lines.append(f"{key.replace('_', ' ')}: {val}")
    lines.append(f"position: ({_fmt_coord(d.get('x'))}, {_fmt_coord(d.get('y'))})")
    if d.get("upstream"):
        lines.append(f"depends on: {', '.join(d['upstream'])}")
    if d.get("downstream"):
        lines.append(f"required by: {', '.join(d['downstream'])}")
    description = d.get("description", "")
    content = "\n".join(lines)
    if description:
        content += f"\n\n{description.strip()}"

    title = f"{d.get('id', '?')} — {d.get('title', 'Untitled')}"
    style = style_for_status(str(d.get("status", "")))
    console.print(Panel(content, title=title, border_style=style or "dim", expand=False))


def _render_link_table(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("ID", style="tb.id", no_wrap=True)
    table.add_column("Source", style="tb.id")
    table.add_column("Target", style="tb.id")
    for item in items:
        table.add_row(str(item["id"]), str(item["source"]), str(item["target"]))
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} links")


def _render_workflow_table(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("ID", style="tb.id", no_wrap=True)
    table.add_column("Label", style="tb.title")
    for item in items:
        table.add_row(str(item["id"]), str(item["label"]))
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} workflows")


# ── Arrange renderers ─────────────────────────────────────────────────


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "graph_id", d.get("graph_id"))
    _field(console, "nodes", d.get("nodes", 0))
    _field(console, "links", d.get("links", 0))
    if d.get("acyclic"):
        console.print("  [tb.ok]no dependency cycles[/tb.ok]")
    else:
        cycle = " → ".join(d.get("cycle") or [])
        console.print(f"  [tb.error]cycle[/tb.error] {cycle}")
    if verbose:
        _render_meta(console, result)


def _render_arrange(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "graph_id", d.get("graph_id"))
    _field(console, "state", d.get("state"))
    _field(console, "levels", d.get("levels", 0))
    if d.get("dry_run"):
        _field(console, "dry_run", True)
    else:
        _field(console, "persisted", d.get("persisted", 0))

    items = d.get("items", [])
    if items:
        console.print()
        table = Table(show_header=True, pad_edge=False, expand=False)
        table.add_column("ID", style="tb.id", no_wrap=True)
        table.add_column("Title", style="tb.title")
        table.add_column("Level", style="tb.level", justify="right")
        table.add_column("X", justify="right")
        table.add_column("Y", justify="right")
        for item in sorted(items, key=lambda i: (i["level"], i["x"] or 0)):
            table.add_row(
                str(item["id"]),
                str(item.get("title", "")),
                str(item["level"]),
                _fmt_coord(item.get("x")),
                _fmt_coord(item.get("y")),
            )
        console.print(table)

    for failure in d.get("failed", []):
        console.print(f"  [tb.error]not saved[/tb.error] {failure['id']}: {failure['error']}")
    if verbose:
        _render_meta(console, result)


def _render_import(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "directory", result.data.get("directory", ""))
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("Kind")
    table.add_column("Imported", justify="right", style="tb.ok")
    table.add_column("Skipped", justify="right")
    table.add_column("Errors", justify="right", style="tb.error")
    for kind, counts in result.data.get("stats", {}).items():
        table.add_row(
            kind,
            str(counts["imported"]),
            str(counts["skipped"]),
            str(counts["errors"]),
        )
    console.print(table)
    if verbose:
        _render_meta(console, result)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Graphs
    "create_graph": _render_mutation,
    "rename_graph": _render_mutation,
    "delete_graph": _render_mutation,
    "list_graphs": _render_graph_table,
    "get_graph": _render_graph,
    # Tasks
    "create_task": _render_mutation,
    "update_task": _render_mutation,
    "move_task": _render_mutation,
    "delete_task": _render_mutation,
    "list_tasks": _render_task_table,
    "get_task": _render_task,
    # Links
    "create_link": _render_mutation,
    "delete_link": _render_mutation,
    "list_links": _render_link_table,
    # Workflows
    "create_workflow": _render_mutation,
    "delete_workflow": _render_mutation,
    "list_workflows": _render_workflow_table,
    # Arrange
    "check": _render_check,
    "arrange": _render_arrange,
    # Import
    "import_tsv": _render_import,
}
