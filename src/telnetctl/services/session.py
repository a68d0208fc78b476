"""SessionService — one client session from resolution to closure.

Steps are called in order by the CLI so it can print a status line
between them::

    service = SessionService(connection)
    service.resolve()   # "Trying 93.184.216.34:80..."
    service.connect()   # "Connected to 93.184.216.34:80."
    service.relay(lines, output)   # "Connection closed."

Pre-connection failures end the session (lifecycle ``connecting -> closed``)
and come back as ``ok=False`` results.  Relay errors never fail the relay
step; they are surfaced as warnings.
"""

from __future__ import annotations

import logging
import socket
import time
from collections.abc import Iterable
from typing import Any, BinaryIO

import structlog

from telnetctl.config.models import ConnectionConfig, RelayConfig
from telnetctl.domain.endpoint import Endpoint
from telnetctl.domain.errors import ConnectError, ConnectTimeout, ResolutionError, TelnetError
from telnetctl.domain.lifecycle import SessionLifecycle, SessionState
from telnetctl.infrastructure import network
from telnetctl.infrastructure.relay import Relay
from telnetctl.services.result import ServiceError, ServiceResult

logger = logging.getLogger(__name__)


def _failure(op: str, exc: TelnetError, meta: dict[str, Any] | None = None) -> ServiceResult:
    return ServiceResult(ok=False, op=op, error=ServiceError.from_exception(exc), meta=meta)


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class SessionService:
    """Drives resolve -> connect -> relay for a single connection."""

    def __init__(self, connection: ConnectionConfig, relay: RelayConfig | None = None) -> None:
        self._connection = connection
        self._relay_config = relay or RelayConfig()
        self._lifecycle = SessionLifecycle()
        self._endpoint: Endpoint | None = None
        self._sock: socket.socket | None = None

    @property
    def state(self) -> SessionState:
        return self._lifecycle.state

    @property
    def endpoint(self) -> Endpoint | None:
        return self._endpoint

    def resolve(self) -> ServiceResult:
        """Resolve the configured host to its first endpoint."""
        host, port = self._connection.host, self._connection.port
        try:
            endpoint = network.resolve(host, port)
        except ResolutionError as exc:
            self._lifecycle.advance(SessionState.CLOSED)
            return _failure("resolve", exc)

        self._endpoint = endpoint
        structlog.contextvars.bind_contextvars(endpoint=str(endpoint))
        return ServiceResult(
            ok=True,
            op="resolve",
            data={"host": host, "port": port, "endpoint": str(endpoint)},
        )

    def connect(self) -> ServiceResult:
        """Open the TCP connection, bounded by the configured timeout."""
        if self._endpoint is None:
            msg = "connect() requires a successful resolve()"
            raise RuntimeError(msg)

        start = time.perf_counter()
        try:
            sock = network.connect(self._endpoint, self._connection.connect_timeout)
        except (ConnectTimeout, ConnectError) as exc:
            self._lifecycle.advance(SessionState.CLOSED)
            return _failure("connect", exc, meta={"duration_ms": _elapsed_ms(start)})

        self._sock = sock
        self._lifecycle.advance(SessionState.ACTIVE)
        return ServiceResult(
            ok=True,
            op="connect",
            data={"endpoint": str(self._endpoint)},
            meta={"duration_ms": _elapsed_ms(start)},
        )

    def relay(self, lines: Iterable[bytes], output: BinaryIO) -> ServiceResult:
        """Pump bytes between *lines*/*output* and the socket until closure."""
        if self._sock is None:
            msg = "relay() requires a successful connect()"
            raise RuntimeError(msg)

        start = time.perf_counter()
        relay = Relay(
            self._sock,
            lines,
            output,
            config=self._relay_config,
            lifecycle=self._lifecycle,
        )
        try:
            outcome = relay.run()
        finally:
            self._sock = None
            structlog.contextvars.unbind_contextvars("endpoint")

        warnings: list[str] = []
        if outcome.error is not None:
            warnings.append(outcome.error.message)
        logger.debug(
            "Relay finished: %s (sent=%d, received=%d)",
            outcome.reason,
            outcome.bytes_sent,
            outcome.bytes_received,
        )
        return ServiceResult(
            ok=True,
            op="relay",
            data={
                "endpoint": str(self._endpoint),
                "reason": str(outcome.reason),
                "bytes_sent": outcome.bytes_sent,
                "bytes_received": outcome.bytes_received,
            },
            warnings=warnings,
            meta={"duration_ms": _elapsed_ms(start)},
        )
