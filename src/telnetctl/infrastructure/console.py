"""Console adapter: stdin as a lazy line source, stdout as a byte sink.

Uses Click's binary stream accessors so the relay sees raw bytes, and so
``CliRunner`` can substitute the streams in tests.
"""

from __future__ import annotations

import io
from collections.abc import Iterator
from typing import BinaryIO

import click


def read_lines(stream: BinaryIO) -> Iterator[bytes]:
    """Yield lines from *stream*, each including its terminator.

    The final line may lack a terminator.  Iteration ends at end of input
    (Ctrl+D on a terminal).
    """
    yield from iter(stream.readline, b"")


def stdin_lines() -> Iterator[bytes]:
    """Line source bound to the process's standard input.

    A real stdin descriptor is read through a private unbuffered ``FileIO``:
    the input worker may still be blocked in it at interpreter shutdown,
    and ``sys.stdin``'s buffer lock must not be held then.
    """
    stream = click.get_binary_stream("stdin")
    try:
        fd = stream.fileno()
    except (OSError, ValueError):
        return read_lines(stream)
    return read_lines(io.FileIO(fd, "rb", closefd=False))


def stdout_sink() -> BinaryIO:
    """Binary standard output for relayed bytes."""
    return click.get_binary_stream("stdout")
