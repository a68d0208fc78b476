"""Error taxonomy for the client.

Pre-connection errors (resolution, connect) are fatal for the run.
Relay errors are local to one direction and only trigger session shutdown.
Each error carries a stable ``code`` that the service layer copies into
:class:`~telnetctl.services.result.ServiceError`.
"""

from __future__ import annotations

from typing import Any, ClassVar


class TelnetError(Exception):
    """Base class for all telnetctl errors."""

    code: ClassVar[str] = "TELNET_ERROR"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail: dict[str, Any] = detail


class ResolutionError(TelnetError):
    """Host/port did not resolve to any address."""

    code = "RESOLUTION_ERROR"


class ConnectTimeout(TelnetError):
    """Handshake did not complete inside the configured duration."""

    code = "CONNECT_TIMEOUT"


class ConnectError(TelnetError):
    """Handshake failed for a reason other than timeout."""

    code = "CONNECT_ERROR"


class RelayError(TelnetError):
    """I/O failure in one relay direction after the session was established."""

    code = "RELAY_ERROR"


class RelayReadError(RelayError):
    """Socket-to-output direction failed."""

    code = "RELAY_READ_ERROR"


class RelayWriteError(RelayError):
    """Input-to-socket direction failed."""

    code = "RELAY_WRITE_ERROR"
