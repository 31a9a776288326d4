"""AppContext — the object every subcommand receives via ``@click.pass_obj``.

The root group builds it from the global flags. Building it configures
logging; :meth:`AppContext.emit` owns stream routing and exit codes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from modelviews.config.logging import configure_logging
from modelviews.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from modelviews.config.settings import ModelViewsSettings
    from modelviews.services.result import ServiceResult


class AppContext:
    """Settings plus output helpers shared by all subcommands."""

    def __init__(self, settings: ModelViewsSettings) -> None:
        self.settings = settings
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def emit(self, result: ServiceResult, *, raw: str | None = None) -> None:
        """Print *result* and set the exit status.

        Success prints to stdout and returns; warnings go to stderr unless
        the output is JSON (they are in the payload) or quiet. Failure prints
        to stderr and exits with status 1.

        Args:
            raw: Printed verbatim instead of the formatted result on success,
                unless JSON output was requested.
        """
        settings = self.output_settings
        if not result.ok:
            click.echo(format_result(result, settings=settings), err=True)
            raise SystemExit(1)

        if raw is not None and not settings.json_output:
            click.echo(raw, nl=False)
        else:
            click.echo(format_result(result, settings=settings))
        if not (settings.json_output or settings.quiet):
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
