"""Resolved network endpoint.

INVARIANT: An Endpoint is immutable once resolved and is consumed by
exactly one connect attempt.
"""

from __future__ import annotations

import socket
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Endpoint:
    """A concrete address ready for ``socket.connect``.

    Attributes:
        family: Address family reported by the resolver.
        sockaddr: Raw socket address tuple (2-tuple for IPv4, 4-tuple for IPv6).
    """

    family: socket.AddressFamily
    sockaddr: tuple[Any, ...]

    @property
    def address(self) -> str:
        return str(self.sockaddr[0])

    @property
    def port(self) -> int:
        return int(self.sockaddr[1])

    def __str__(self) -> str:
        if self.family == socket.AF_INET6:
            return f"[{self.address}]:{self.port}"
        return f"{self.address}:{self.port}"
