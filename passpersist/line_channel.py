"""
Line-oriented input with a bounded wait, and the response framing shared by both modes.
"""
from __future__ import annotations

import io
import os
import selectors
import time
from typing import IO, Any, Optional, Sequence

LINE_SEPARATOR = "\n"
_READ_CHUNK = 4096


def frame_response(lines: Sequence[str]) -> str:
    """Join result lines and terminate the block with one trailing separator."""
    return LINE_SEPARATOR.join([*lines, ""])


def write_response(output: IO[str], lines: Sequence[str]) -> None:
    output.write(frame_response(lines))
    output.flush()


class LineChannel:
    """Read lines from a stream, waiting at most ``timeout`` seconds for each.

    ``readline`` returns the line (terminator included), ``""`` once the
    stream is closed, or ``None`` if the timeout expired first.

    Streams backed by a file descriptor are polled with ``selectors`` and read
    with ``os.read`` into a private buffer, so nothing sits unseen in the
    stream's own buffer while we wait. The wrapped stream must not be read
    through any other path. Streams without a descriptor (``io.StringIO``)
    always have their data at hand and are read directly.
    """

    def __init__(self, stream: IO[Any], encoding: str = "utf-8") -> None:
        self.stream = stream
        self.encoding = encoding
        self._fd = self._fileno(stream)
        self._buffer = b""
        self._eof = False
        self._selector: Optional[selectors.BaseSelector] = None
        if self._fd is not None:
            selector = selectors.DefaultSelector()
            try:
                selector.register(self._fd, selectors.EVENT_READ)
            except (OSError, ValueError):
                # regular files cannot be polled; they are always readable
                selector.close()
                self._fd = None
            else:
                self._selector = selector

    @staticmethod
    def _fileno(stream: IO[Any]) -> Optional[int]:
        try:
            return stream.fileno()
        except (AttributeError, OSError, io.UnsupportedOperation):
            return None

    @property
    def eof(self) -> bool:
        return self._eof and not self._buffer

    def readline(self, timeout: Optional[float] = None) -> Optional[str]:
        if self._selector is None:
            line = self.stream.readline()
            if not line:
                self._eof = True
            return line
        deadline = None if timeout is None else time.monotonic() + max(timeout, 0.0)
        while True:
            newline = self._buffer.find(b"\n")
            if newline >= 0:
                raw, self._buffer = self._buffer[:newline + 1], self._buffer[newline + 1:]
                return raw.decode(self.encoding, errors="replace")
            if self._eof:
                raw, self._buffer = self._buffer, b""
                return raw.decode(self.encoding, errors="replace")
            remaining = None
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return None
            if not self._selector.select(remaining):
                return None
            chunk = os.read(self._fd, _READ_CHUNK)  # type: ignore[arg-type]
            if chunk:
                self._buffer += chunk
            else:
                self._eof = True

    def close(self) -> None:
        if self._selector is not None:
            self._selector.close()
            self._selector = None
