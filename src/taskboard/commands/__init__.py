"""Click commands for taskboard, attached to the root group by register_commands()."""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click

# (module under taskboard.commands, attribute) for each top-level command.
_COMMANDS = (
    ("init_cmd", "init_cmd"),
    ("graph", "graph"),
    ("workflow", "workflow"),
    ("task", "task"),
    ("link", "link"),
    ("arrange", "arrange"),
    ("arrange", "check"),
    ("import_cmd", "import_cmd"),
)


def register_commands(cli: click.Group) -> None:
    for module_name, attr in _COMMANDS:
        module = import_module(f"taskboard.commands.{module_name}")
        cli.add_command(getattr(module, attr))
