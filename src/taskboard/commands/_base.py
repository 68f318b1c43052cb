"""Click base classes shared by every taskboard command.

Commands and groups built with ``cls=TbCommand`` / ``cls=TbGroup`` take
an ``examples=`` string. It is printed by ``--examples`` rather than by
``--help``, and ``--help`` ends with a pointer to it.
"""

from __future__ import annotations

from typing import Any

import click


class _ExamplesMixin:
    """Adds the eager ``--examples`` flag when an examples text is given."""

    examples: str | None = None

    def _init_examples(self, examples: str | None) -> None:
        self.examples = examples
        if not examples:
            return
        self.params.append(  # type: ignore[attr-defined]
            click.Option(
                ["--examples"],
                is_flag=True,
                expose_value=False,
                is_eager=True,
                callback=self._print_examples,
                help="Show usage examples.",
            )
        )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if value:
            click.echo(f"Examples for '{ctx.command_path}':\n\n{self.examples}")
            ctx.exit(0)

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        super().format_epilog(ctx, formatter)  # type: ignore[misc]
        if self.examples:
            formatter.write_paragraph()
            formatter.write_text("Run with --examples for usage examples.")


class TbCommand(_ExamplesMixin, click.Command):
    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class TbGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands default to :class:`TbCommand`."""

    command_class = TbCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


def graph_option(func: Any) -> Any:
    """``-g/--graph`` for commands that act on one workspace."""
    return click.option(
        "-g",
        "--graph",
        "graph_id",
        default=None,
        help="Graph ID (defaults to [board] default_graph).",
    )(func)
