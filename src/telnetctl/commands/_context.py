"""AppContext — settings, logging, and result emission for one run.

Created once by the CLI command.  Status lines go to stdout alongside the
relayed bytes; errors and warnings go to stderr so they never mix into
a piped byte stream.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from telnetctl.output.renderers import render_result

if TYPE_CHECKING:
    from telnetctl.config.settings import TelnetSettings
    from telnetctl.services.result import ServiceResult


class AppContext:
    """Shared per-invocation context."""

    def __init__(self, settings: TelnetSettings) -> None:
        self.settings = settings

        from telnetctl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    def emit(self, result: ServiceResult) -> None:
        """Output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): status line to stdout unless ``--quiet``.
          Warnings always go to stderr.
        * Failure: writes to stderr, exits with code 1.
        """
        output = render_result(result, verbose=self.settings.verbose)
        if result.ok:
            if not self.settings.quiet:
                click.echo(output)
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
