"""Command: TSV import (named import_cmd because ``import`` is a keyword)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from taskboard.commands._base import TbCommand
from taskboard.services.importer import ImportService

if TYPE_CHECKING:
    from taskboard.commands._context import AppContext

_IMPORT_EXAMPLES = """\
  taskboard import ./export
  taskboard --json import ./export"""


@click.command("import", cls=TbCommand, examples=_IMPORT_EXAMPLES)
@click.argument("directory", type=click.Path(file_okay=False, path_type=Path))
@click.pass_obj
def import_cmd(app: AppContext, directory: Path) -> None:
    """Import Graphs/Workflows/Tasks/Links TSV exports from DIRECTORY.

    Records whose id already exists are skipped, so re-running an
    import is safe.
    """
    app.emit(ImportService(app.store).import_tsv(directory))
