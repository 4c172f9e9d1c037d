"""Command group: inspect the tag condition language."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from chronoline.commands._base import ChronoGroup

if TYPE_CHECKING:
    from chronoline.commands._context import AppContext

_CONDITION_EXAMPLES = """\
  chronoline condition translate "history/rome AND NOT(draft, archive)"
  chronoline condition check "history" --tag history/rome
  chronoline -q condition check "NOT(draft)" --tag draft"""


@click.group(cls=ChronoGroup, examples=_CONDITION_EXAMPLES)
@click.pass_obj
def condition(app: AppContext) -> None:
    """Translate and test timeline tag conditions."""


@condition.command(
    examples="""\
  chronoline condition translate "a AND b"
  chronoline condition translate "NOT(a/b, c) OR d\""""
)
@click.argument("query")
@click.pass_obj
def translate(app: AppContext, query: str) -> None:
    """Show the normalized expression for QUERY."""
    app.emit(app.service.translate(query))


@condition.command(
    examples="""\
  chronoline condition check "proj" --tag proj/x
  chronoline condition check "a AND NOT(b)" --tag a --tag b/c"""
)
@click.argument("query")
@click.option("--tag", "tags", multiple=True, help="Note tag (repeatable).")
@click.pass_obj
def check(app: AppContext, query: str, tags: tuple[str, ...]) -> None:
    """Evaluate QUERY against the given note tags."""
    app.emit(app.service.check(query, list(tags)))
