"""Shared pytest fixtures and test helpers for telnetctl tests."""

from __future__ import annotations

import logging
import queue
import socket
import threading
from collections.abc import Callable, Generator, Iterator

import pytest
import structlog
from click.testing import CliRunner


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo configure_logging() and bound contextvars after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    pkg = logging.getLogger("telnetctl")
    pkg_level = pkg.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    pkg.setLevel(pkg_level)
    structlog.contextvars.clear_contextvars()


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory) -> None:
    """Keep the developer's env vars and config files out of settings resolution."""
    for name in (
        "TELNETCTL_CONFIG",
        "TELNETCTL_TIMEOUT",
        "TELNETCTL_QUIET",
        "TELNETCTL_VERBOSE",
        "TELNETCTL_LOG_JSON",
        "TELNETCTL_RELAY__BUFFER_SIZE",
        "TELNETCTL_RELAY__POLL_INTERVAL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path_factory.mktemp("cwd"))


# ---------------------------------------------------------------------------
# Console line sources
# ---------------------------------------------------------------------------


class ScriptedLines:
    """Line source fed by the test; blocks like a console until fed or finished."""

    def __init__(self, *lines: bytes) -> None:
        self._queue: queue.Queue[bytes | None] = queue.Queue()
        for line in lines:
            self.feed(line)

    def feed(self, line: bytes) -> None:
        self._queue.put(line)

    def finish(self) -> None:
        """Signal end of input (Ctrl+D)."""
        self._queue.put(None)

    def __iter__(self) -> Iterator[bytes]:
        while True:
            line = self._queue.get()
            if line is None:
                return
            yield line


@pytest.fixture
def scripted_lines() -> Generator[Callable[..., ScriptedLines]]:
    """Factory for ScriptedLines; unblocks every abandoned input worker on teardown."""
    created: list[ScriptedLines] = []

    def factory(*lines: bytes) -> ScriptedLines:
        source = ScriptedLines(*lines)
        created.append(source)
        return source

    yield factory
    for source in created:
        source.finish()


# ---------------------------------------------------------------------------
# Loopback sockets
# ---------------------------------------------------------------------------


@pytest.fixture
def tcp_pair() -> Generator[tuple[socket.socket, socket.socket]]:
    """Connected loopback TCP sockets: ``(client, peer)``."""
    listener = socket.create_server(("127.0.0.1", 0))
    client = socket.create_connection(listener.getsockname(), timeout=5)
    client.settimeout(None)
    peer, _ = listener.accept()
    listener.close()
    try:
        yield client, peer
    finally:
        client.close()
        peer.close()


def recv_until_eof(sock: socket.socket, timeout: float = 5.0) -> bytes:
    """Read everything the other side sends until it shuts down."""
    sock.settimeout(timeout)
    received = bytearray()
    while chunk := sock.recv(4096):
        received.extend(chunk)
    return bytes(received)


@pytest.fixture
def read_all() -> Callable[..., bytes]:
    return recv_until_eof


class PeerServer:
    """One-shot loopback TCP server standing in for the remote host.

    Sends *greeting* on accept.  With *close_after_greeting* it then closes;
    otherwise it records everything received until the client shuts down.
    """

    def __init__(self, greeting: bytes = b"", *, close_after_greeting: bool = False) -> None:
        self._listener = socket.create_server(("127.0.0.1", 0))
        self._listener.settimeout(5)
        self.port: int = self._listener.getsockname()[1]
        self.greeting = greeting
        self.close_after_greeting = close_after_greeting
        self.received = b""
        self.done = threading.Event()
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _serve(self) -> None:
        try:
            conn, _ = self._listener.accept()
        except OSError:
            return
        with conn:
            if self.greeting:
                conn.sendall(self.greeting)
            if not self.close_after_greeting:
                try:
                    self.received = recv_until_eof(conn)
                except OSError:
                    pass
        self.done.set()

    def close(self) -> None:
        self._listener.close()


@pytest.fixture
def peer_server() -> Generator[Callable[..., PeerServer]]:
    """Factory for PeerServer instances, closed on teardown."""
    servers: list[PeerServer] = []

    def factory(greeting: bytes = b"", *, close_after_greeting: bool = False) -> PeerServer:
        server = PeerServer(greeting, close_after_greeting=close_after_greeting)
        servers.append(server)
        return server

    yield factory
    for server in servers:
        server.close()


@pytest.fixture
def closed_port() -> int:
    """A loopback port with nothing listening on it."""
    placeholder = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    placeholder.bind(("127.0.0.1", 0))
    port: int = placeholder.getsockname()[1]
    placeholder.close()
    return port
