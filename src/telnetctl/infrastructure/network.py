"""Resolver and connector.

Resolution picks the first address the system resolver returns; there is
no fallback across candidates.  Connecting is bounded by a hard timeout
enforced through ``socket.settimeout``.
"""

from __future__ import annotations

import logging
import socket

from telnetctl.domain.endpoint import Endpoint
from telnetctl.domain.errors import ConnectError, ConnectTimeout, ResolutionError

logger = logging.getLogger(__name__)


def resolve(host: str, port: int) -> Endpoint:
    """Resolve *host* and *port* to the first TCP endpoint.

    Raises:
        ResolutionError: The lookup failed or returned no addresses.
    """
    try:
        candidates = socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)
    except (socket.gaierror, UnicodeError) as exc:
        msg = f"Could not resolve {host}:{port}: {exc}"
        raise ResolutionError(msg, host=host, port=port) from exc

    if not candidates:
        msg = f"Could not resolve {host}:{port}: no addresses returned"
        raise ResolutionError(msg, host=host, port=port)

    family, _type, _proto, _canonname, sockaddr = candidates[0]
    endpoint = Endpoint(family=family, sockaddr=tuple(sockaddr))
    logger.debug("Resolved %s:%s to %s (%d candidates)", host, port, endpoint, len(candidates))
    return endpoint


def connect(endpoint: Endpoint, timeout: float) -> socket.socket:
    """Open a TCP connection to *endpoint* within *timeout* seconds.

    The returned socket is back in blocking mode, ready for the relay.

    Raises:
        ConnectTimeout: The handshake did not finish in time.
        ConnectError: The handshake was refused or failed otherwise.
    """
    if timeout <= 0:
        msg = f"Connect timeout must be positive, got {timeout}"
        raise ConnectError(msg, endpoint=str(endpoint), timeout=timeout)

    sock = socket.socket(endpoint.family, socket.SOCK_STREAM)
    try:
        sock.settimeout(timeout)
    except OverflowError as exc:
        sock.close()
        msg = f"Connect timeout too large: {timeout}"
        raise ConnectError(msg, endpoint=str(endpoint), timeout=timeout) from exc

    try:
        sock.connect(endpoint.sockaddr)
    except TimeoutError as exc:
        sock.close()
        msg = f"Connection to {endpoint} timed out after {timeout:g}s"
        raise ConnectTimeout(msg, endpoint=str(endpoint), timeout=timeout) from exc
    except OSError as exc:
        sock.close()
        msg = f"Connection to {endpoint} failed: {exc.strerror or exc}"
        raise ConnectError(msg, endpoint=str(endpoint), errno=exc.errno) from exc

    sock.settimeout(None)
    logger.info("Connected to %s", endpoint)
    return sock
