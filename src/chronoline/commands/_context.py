"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy service construction and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from chronoline.config.logging import configure_logging
from chronoline.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from chronoline.config.settings import ChronoSettings
    from chronoline.services.result import ServiceResult
    from chronoline.services.timeline import TimelineService


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The timeline service (and with it the preset list) is built lazily on
    first use so ``--help`` and ``--version`` stay cheap.
    """

    def __init__(self, settings: ChronoSettings) -> None:
        self.settings = settings
        self._service: TimelineService | None = None
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def service(self) -> TimelineService:
        """The timeline service (created lazily on first access)."""
        if self._service is None:
            from chronoline.services.timeline import TimelineService

            self._service = TimelineService(self.settings)
        return self._service

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
