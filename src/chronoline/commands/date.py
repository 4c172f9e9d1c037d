"""Command group: parse and format dates with presets."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from chronoline.commands._base import ChronoGroup

if TYPE_CHECKING:
    from chronoline.commands._context import AppContext

_DATE_EXAMPLES = """\
  chronoline date parse 2024-03-07
  chronoline date format 2024-03-07 --preset verbose-day
  chronoline date format 1250-2-7-3 --preset malanachan-calendar
  chronoline date presets"""


@click.group(cls=ChronoGroup, examples=_DATE_EXAMPLES)
@click.pass_obj
def date(app: AppContext) -> None:
    """Parse and format calendar dates."""


@date.command(
    examples="""\
  chronoline date parse 2024-03-07
  chronoline date parse 1250-2 --preset malanachan-calendar
  chronoline --json date parse -- -500-01-01"""
)
@click.argument("value")
@click.option("--preset", default=None, help="Date preset name (overrides config).")
@click.pass_obj
def parse(app: AppContext, value: str, preset: str | None) -> None:
    """Parse VALUE into abstract date components."""
    app.emit(app.service.parse_date(value, preset=preset))


@date.command(
    name="format",
    examples="""\
  chronoline date format 2024-03-07
  chronoline date format 1492-10-12 --preset dnd-calendar-of-harptos-dalereckoning"""
)
@click.argument("value")
@click.option("--preset", default=None, help="Date preset name (overrides config).")
@click.pass_obj
def format_cmd(app: AppContext, value: str, preset: str | None) -> None:
    """Parse VALUE and render it with the preset's display template."""
    app.emit(app.service.format_date(value, preset=preset))


@date.command(examples="  chronoline date presets")
@click.pass_obj
def presets(app: AppContext) -> None:
    """List the available date presets (* marks the default)."""
    app.emit(app.service.list_presets())
