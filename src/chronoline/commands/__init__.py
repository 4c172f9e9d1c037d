"""Subcommand modules for chronoline.

Provides register_commands() which uses deferred imports to keep
``chronoline --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups on the root CLI group."""
    from chronoline.commands.condition import condition
    from chronoline.commands.date import date
    from chronoline.commands.timeline import timeline

    cli.add_command(timeline)
    cli.add_command(condition)
    cli.add_command(date)
