"""Session lifecycle and relay termination reasons.

Per-session state machine::

    connecting -> active -> closing -> closed
    connecting -> closed                (connect failed)

``active`` is the only state in which both relay directions run.
``closing`` begins the instant either direction observes a terminal
condition; the ``active -> closing`` edge can be taken exactly once, which
makes :meth:`SessionLifecycle.advance` the single-shot shutdown guard.
"""

from __future__ import annotations

import threading
from enum import StrEnum


class SessionState(StrEnum):
    """Lifecycle states of a client session."""

    CONNECTING = "connecting"
    ACTIVE = "active"
    CLOSING = "closing"
    CLOSED = "closed"


class TerminationReason(StrEnum):
    """Why the relay stopped."""

    PEER_CLOSED = "peer_closed"
    LOCAL_EOF = "local_eof"
    LOCAL_EMPTY_LINE = "local_empty_line"
    READ_ERROR = "read_error"
    WRITE_ERROR = "write_error"


SESSION_TRANSITIONS: dict[str, list[str]] = {
    "connecting": ["active", "closed"],
    "active": ["closing"],
    "closing": ["closed"],
    "closed": [],
}


def is_valid_transition(
    current: str,
    target: str,
    transitions: dict[str, list[str]],
) -> bool:
    """Check if transitioning from *current* to *target* is allowed."""
    allowed = transitions.get(current, [])
    return target in allowed


class SessionLifecycle:
    """Thread-safe holder of the current :class:`SessionState`.

    Shared by both relay directions.  Only the state and the first
    termination reason are guarded by the lock; socket I/O happens outside it.
    """

    def __init__(self, state: SessionState = SessionState.CONNECTING) -> None:
        self._state = state
        self._reason: TerminationReason | None = None
        self._lock = threading.Lock()

    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._state

    @property
    def reason(self) -> TerminationReason | None:
        with self._lock:
            return self._reason

    def advance(self, target: SessionState, reason: TerminationReason | None = None) -> bool:
        """Move to *target* if the transition is valid.

        Returns False (and changes nothing) when the transition is not
        allowed from the current state.  *reason* is recorded only by the
        call that performs the ``active -> closing`` transition.
        """
        with self._lock:
            if not is_valid_transition(self._state, target, SESSION_TRANSITIONS):
                return False
            self._state = target
            if target is SessionState.CLOSING and reason is not None:
                self._reason = reason
            return True

    @property
    def is_active(self) -> bool:
        return self.state is SessionState.ACTIVE
