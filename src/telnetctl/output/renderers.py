"""Operation-specific Rich renderers for session ServiceResults.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.text import Text

from telnetctl.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from telnetctl.services.result import ServiceResult


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a status line.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="tn.key")
    console.print(k, Text(str(value)), sep="", end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    for key, value in result.meta.items():
        _field(console, key, value)


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="tn.error")
    op = Text(f"  {result.op}", style="tn.op")
    console.print(label, op, Text(" — "), Text(msg), sep="")

    if verbose and err:
        _field(console, "code", err.code)
        for k, v in err.detail.items():
            _field(console, k, v)
        _render_meta(console, result)


def _render_resolve(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    endpoint = Text(result.data["endpoint"], style="tn.endpoint")
    console.print(Text("Trying "), endpoint, Text("..."), sep="")


def _render_connect(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    endpoint = Text(result.data["endpoint"], style="tn.endpoint")
    console.print(Text("Connected to ", style="tn.ok"), endpoint, Text("."), sep="")
    if verbose:
        _render_meta(console, result)


def _render_relay(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    console.print(Text("Connection closed."))
    if verbose:
        for key in ("reason", "bytes_sent", "bytes_received"):
            if key in result.data:
                _field(console, key, result.data[key])
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    console.print(Text("OK", style="tn.ok"), Text(f"  {result.op}", style="tn.op"), sep="")
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


_OP_RENDERERS: dict[str, Any] = {
    "resolve": _render_resolve,
    "connect": _render_connect,
    "relay": _render_relay,
}
