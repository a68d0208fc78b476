"""Relay — bidirectional byte pump between the console and a socket.

Two directions run concurrently for the lifetime of a session:

- socket -> output on the calling thread: waits for readability with a
  selector bounded by ``poll_interval``, then writes each chunk verbatim
  and flushes.
- input -> socket on a daemon worker: sends each console line, terminator
  included; an empty line or end of input ends the session.

The directions share no mutable state except the socket (reader only
calls ``recv``, writer only calls ``sendall``) and the
:class:`~telnetctl.domain.lifecycle.SessionLifecycle`.  Whichever direction
stops first wins the ``active -> closing`` transition and shuts the socket
down, which wakes the other one.

INVARIANT: once closing has begun, neither direction touches the socket
again except for the owner's final ``close()``.
"""

from __future__ import annotations

import logging
import selectors
import socket
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from typing import BinaryIO

from telnetctl.config.models import RelayConfig
from telnetctl.domain.errors import RelayError, RelayReadError, RelayWriteError
from telnetctl.domain.lifecycle import SessionLifecycle, SessionState, TerminationReason

logger = logging.getLogger(__name__)

# Lines that request the end of the session instead of being sent.
_EMPTY_LINES = (b"", b"\n", b"\r\n")


@dataclass(frozen=True)
class RelayOutcome:
    """Summary of a finished relay session."""

    reason: TerminationReason
    bytes_sent: int = 0
    bytes_received: int = 0
    error: RelayError | None = None


class Relay:
    """Owns a connected socket for one session and pumps bytes both ways.

    Args:
        sock: Connected stream socket in blocking mode.
        lines: Lazy source of console lines (bytes, terminator included).
        output: Binary sink for bytes received from the peer.
        config: Buffer size and poll interval.
        lifecycle: Shared session state; must be ``active`` when
            :meth:`run` is called.
    """

    def __init__(
        self,
        sock: socket.socket,
        lines: Iterable[bytes],
        output: BinaryIO,
        *,
        config: RelayConfig | None = None,
        lifecycle: SessionLifecycle | None = None,
    ) -> None:
        self._sock = sock
        self._lines = lines
        self._output = output
        self._config = config or RelayConfig()
        self._lifecycle = lifecycle or SessionLifecycle(SessionState.ACTIVE)
        self._error: RelayError | None = None
        self._bytes_sent = 0
        self._bytes_received = 0

    @property
    def lifecycle(self) -> SessionLifecycle:
        return self._lifecycle

    def run(self) -> RelayOutcome:
        """Relay until either direction terminates, then release the socket.

        Blocks the calling thread.  Returns once the socket is closed; an
        input worker still blocked on console input is abandoned.
        """
        if not self._lifecycle.is_active:
            msg = f"Relay requires an active session, got {self._lifecycle.state}"
            raise RuntimeError(msg)

        worker = threading.Thread(
            target=self._pump_input,
            name="telnetctl-input",
            daemon=True,
        )
        worker.start()
        try:
            self._pump_output()
        finally:
            if self._lifecycle.is_active:
                self._begin_closing(TerminationReason.READ_ERROR)
            worker.join(timeout=self._config.poll_interval)
            if worker.is_alive():
                logger.debug("Input direction still waiting on console; abandoning it")
            self._sock.close()
            self._lifecycle.advance(SessionState.CLOSED)

        reason = self._lifecycle.reason
        if reason is None:
            msg = "Relay closed without a termination reason"
            raise RuntimeError(msg)
        return RelayOutcome(
            reason=reason,
            bytes_sent=self._bytes_sent,
            bytes_received=self._bytes_received,
            error=self._error,
        )

    # ── Socket -> output ──────────────────────────────────────────────

    def _pump_output(self) -> None:
        selector = selectors.DefaultSelector()
        selector.register(self._sock, selectors.EVENT_READ)
        try:
            while self._lifecycle.is_active:
                if not selector.select(timeout=self._config.poll_interval):
                    continue
                try:
                    chunk = self._sock.recv(self._config.buffer_size)
                except (BlockingIOError, InterruptedError):
                    continue
                except OSError as exc:
                    error = RelayReadError(f"Socket read failed: {exc}", errno=exc.errno)
                    self._begin_closing(TerminationReason.READ_ERROR, error)
                    return

                if not chunk:
                    self._begin_closing(TerminationReason.PEER_CLOSED)
                    return

                try:
                    self._output.write(chunk)
                    self._output.flush()
                except (OSError, ValueError) as exc:
                    error = RelayReadError(f"Output write failed: {exc}")
                    self._begin_closing(TerminationReason.READ_ERROR, error)
                    return
                self._bytes_received += len(chunk)
        finally:
            selector.close()

    # ── Input -> socket ───────────────────────────────────────────────

    def _pump_input(self) -> None:
        reason = TerminationReason.LOCAL_EOF
        error: RelayError | None = None
        try:
            reason, error = self._send_lines()
        except (OSError, ValueError) as exc:
            logger.debug("Console read failed, treating as end of input: %s", exc)
        finally:
            self._begin_closing(reason, error)

    def _send_lines(self) -> tuple[TerminationReason, RelayError | None]:
        for line in self._lines:
            if not self._lifecycle.is_active:
                break
            if line in _EMPTY_LINES:
                return TerminationReason.LOCAL_EMPTY_LINE, None
            try:
                self._sock.sendall(line)
            except OSError as exc:
                error = RelayWriteError(f"Socket write failed: {exc}", errno=exc.errno)
                return TerminationReason.WRITE_ERROR, error
            self._bytes_sent += len(line)
        return TerminationReason.LOCAL_EOF, None

    # ── Joint shutdown ────────────────────────────────────────────────

    def _begin_closing(self, reason: TerminationReason, error: RelayError | None = None) -> bool:
        """Enter ``closing`` and shut the socket down, at most once.

        Returns False when another direction already started closing; its
        reason wins and *error* is discarded.
        """
        if not self._lifecycle.advance(SessionState.CLOSING, reason):
            return False
        if error is not None:
            self._error = error
            logger.debug("Relay direction failed: %s", error)
        logger.debug("Session closing: %s", reason)
        try:
            self._sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            logger.debug("Socket shutdown failed", exc_info=True)
        return True
