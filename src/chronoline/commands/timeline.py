"""Command group: build timelines from note folders."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from chronoline.commands._base import ChronoGroup

if TYPE_CHECKING:
    from chronoline.commands._context import AppContext

_TIMELINE_EXAMPLES = """\
  chronoline timeline build notes/
  chronoline timeline build notes/ --condition "history AND NOT(draft)"
  chronoline timeline build notes/rome.md notes/carthage.md --preset verbose-day
  chronoline --json timeline build vault/"""


@click.group(cls=ChronoGroup, examples=_TIMELINE_EXAMPLES)
@click.pass_obj
def timeline(app: AppContext) -> None:
    """Build timelines from tagged markdown notes."""


@timeline.command(
    examples="""\
  chronoline timeline build notes/
  chronoline timeline build notes/ --condition "war/punic OR rome"
  chronoline timeline build notes/ --preset malanachan-calendar
  chronoline -q timeline build notes/"""
)
@click.argument(
    "paths",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, path_type=Path),
)
@click.option("--condition", default=None, help="Tag condition (overrides config).")
@click.option("--preset", default=None, help="Date preset name (overrides config).")
@click.pass_obj
def build(
    app: AppContext,
    paths: tuple[Path, ...],
    condition: str | None,
    preset: str | None,
) -> None:
    """Collect, filter, and sort events from notes under PATHS."""
    app.emit(app.service.build_from_paths(paths, condition=condition, preset=preset))
