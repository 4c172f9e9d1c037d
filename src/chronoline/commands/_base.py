"""Click base classes with an ``--examples`` flag.

``--help`` stays short; ``--examples`` prints ready-to-paste invocations
and exits. Groups default their subcommands to :class:`ChronoCommand`,
so ``@group.command(examples=...)`` works without ``cls=``.
"""

from __future__ import annotations

from typing import Any

import click


def _print_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value:
        return
    command = ctx.command
    click.echo(f"Examples for '{ctx.command_path}':\n")
    click.echo(getattr(command, "examples", ""))
    ctx.exit(0)


class _ExamplesMixin:
    """Adds the eager ``--examples`` option when *examples* is given."""

    params: list[click.Parameter]

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=_print_examples,
                    help="Show usage examples.",
                )
            )


class ChronoCommand(_ExamplesMixin, click.Command):
    """Command accepting ``examples=``."""


class ChronoGroup(_ExamplesMixin, click.Group):
    """Group accepting ``examples=``; its subcommands are ChronoCommands."""

    command_class = ChronoCommand
