"""Root CLI command for telnetctl: connect, relay, report."""

from __future__ import annotations

import click

from telnetctl import __version__
from telnetctl.commands._base import TelnetCommand
from telnetctl.commands._context import AppContext
from telnetctl.config.settings import TelnetSettings


@click.command(
    cls=TelnetCommand,
    examples="""\
  # Connect with the default 10 second connect timeout
  telnetctl example.com 80

  # Give up after 3 seconds if the host does not answer
  telnetctl --timeout=3s 1.1.1.1 123

  # Only relay bytes, no status lines
  telnetctl -q localhost 6379""",
)
@click.version_option(version=__version__, prog_name="telnetctl")
@click.argument("host")
@click.argument("port", type=click.IntRange(1, 65535))
@click.option(
    "-t",
    "--timeout",
    default=None,
    help="Connect timeout in seconds, e.g. 10s. Unparsable values mean 10s.",
)
@click.option("-q", "--quiet", is_flag=True, help="No status lines, only relayed bytes.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging and session details.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
def cli(
    host: str,
    port: int,
    timeout: str | None,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """Connect to HOST:PORT over TCP and relay stdin/stdout.

    Each line typed is sent to the peer; bytes from the peer are written
    to stdout as they arrive.  An empty line or Ctrl+D closes the
    connection, and so does the peer closing its side.
    """
    # Unset flags stay None so env vars and the TOML file can supply them.
    settings = TelnetSettings.from_cli(
        config_path=config_path,
        timeout=timeout,
        quiet=quiet or None,
        verbose=verbose or None,
        log_json=log_json or None,
    )
    app = AppContext(settings)

    from telnetctl.infrastructure.console import stdin_lines, stdout_sink
    from telnetctl.services.session import SessionService

    service = SessionService(settings.connection(host, port), settings.relay)
    app.emit(service.resolve())
    app.emit(service.connect())
    app.emit(service.relay(stdin_lines(), stdout_sink()))
