"""``taskboard`` entry point: global flags, then the command tree."""

from __future__ import annotations

import click

from taskboard import __version__
from taskboard.commands import register_commands
from taskboard.commands._context import AppContext
from taskboard.config.settings import TbSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="taskboard")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print IDs and counts only.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logs and stage timings.")
@click.option("--log-json", is_flag=True, help="Write stderr logs as JSON lines.")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Use this taskboard.toml instead of searching for one.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, **flags: bool) -> None:
    """taskboard: task/workflow boards with dependency-level auto-arrange."""
    app = AppContext(TbSettings.from_cli(config_path=config_path, **flags))
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
