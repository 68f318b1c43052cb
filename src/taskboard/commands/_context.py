"""AppContext: the ``ctx.obj`` every taskboard command receives.

Owns the settings, the lazily opened Store, and the single place where a
ServiceResult becomes output and an exit code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from taskboard.config.logging import configure_logging
from taskboard.output.formatters import OutputSettings, format_result
from taskboard.services.telemetry import enable_telemetry

if TYPE_CHECKING:
    from taskboard.config.settings import TbSettings
    from taskboard.infrastructure.store import Store
    from taskboard.services.result import ServiceResult


class AppContext:
    """Per-invocation state, passed down with ``@click.pass_obj``.

    The store opens on first access, so ``--help``, ``--version`` and
    ``--examples`` never create a database.
    """

    def __init__(self, settings: TbSettings) -> None:
        self.settings = settings
        self.output = OutputSettings(
            json_output=settings.json_output,
            quiet=settings.quiet,
            verbose=settings.verbose,
        )
        self._store: Store | None = None

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        if settings.verbose:
            enable_telemetry()

    @property
    def store(self) -> Store:
        if self._store is None:
            from taskboard.infrastructure.store import Store

            self._store = Store(self.settings)
        return self._store

    def close(self) -> None:
        """Release the database engine, if one was opened."""
        if self._store is not None:
            self._store.close()
            self._store = None

    def resolve_graph(self, graph_id: str | None) -> str:
        """Pick the workspace for a command: ``--graph``, else ``[board] default_graph``."""
        resolved = graph_id or self.settings.board.default_graph
        if not resolved:
            raise click.UsageError("No graph selected. Pass --graph or set [board] default_graph.")
        return resolved

    def emit(self, result: ServiceResult) -> None:
        """Print *result*; exit with status 1 if it failed.

        Successful output goes to stdout. Outside ``--json`` mode its
        warnings follow on stderr, one ``WARNING:`` line each. Failures
        are printed to stderr.
        """
        text = format_result(result, settings=self.output)
        if not result.ok:
            click.echo(text, err=True)
            raise SystemExit(1)

        click.echo(text)
        if not self.output.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
