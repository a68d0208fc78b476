"""Connect-timeout parsing.

Lenient contract: every trailing ``s`` is stripped and the rest must be an
unsigned decimal count of seconds.  Anything else falls back to the default
instead of failing, so ``--timeout=abc`` connects with 10 seconds.
"""

from __future__ import annotations

import re

DEFAULT_TIMEOUT_SECONDS = 10

# Unsigned 64-bit ceiling for the parsed seconds value.
MAX_TIMEOUT_SECONDS = 2**64 - 1

_SECONDS_RE = re.compile(r"^\+?[0-9]+$")


def parse_timeout(value: str | None, default: int = DEFAULT_TIMEOUT_SECONDS) -> int:
    """Parse a timeout string such as ``"10s"`` into whole seconds.

    Only the ``s`` suffix is understood; other units (``"5m"``), signs
    other than ``+``, whitespace and overflowing values all yield *default*.
    """
    if value is None:
        return default
    digits = value.rstrip("s")
    if not _SECONDS_RE.match(digits):
        return default
    seconds = int(digits)
    if seconds > MAX_TIMEOUT_SECONDS:
        return default
    return seconds
