"""``chronoline`` entry point: global output/config flags and subcommands."""

from __future__ import annotations

import click

from chronoline import __version__
from chronoline.commands import register_commands
from chronoline.commands._base import ChronoGroup
from chronoline.commands._context import AppContext
from chronoline.config.settings import ChronoSettings

_ROOT_EXAMPLES = """\
  chronoline timeline build notes/ --condition "history AND NOT(draft)"
  chronoline --json date format 2024-03-07 --preset verbose-day
  chronoline -c ~/vault/chronoline.toml timeline build ~/vault
  chronoline -v --log-json timeline build notes/ 2> build.log"""


@click.group(cls=ChronoGroup, invoke_without_command=True, examples=_ROOT_EXAMPLES)
@click.version_option(version=__version__, prog_name="chronoline")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print only the essential value.")
@click.option("-v", "--verbose", is_flag=True, help="Show result metadata and debug logs.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.option(
    "-c",
    "--config",
    "config_path",
    default=None,
    help="Use this chronoline.toml instead of searching for one.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, **flags: bool) -> None:
    """chronoline — timeline events from tagged markdown notes."""
    ctx.obj = AppContext(ChronoSettings.from_cli(config_path=config_path, **flags))
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
