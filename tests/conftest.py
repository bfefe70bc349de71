"""Shared fixtures for the passpersist tests."""

import io
import logging
import logging.handlers
import os
import sys
import warnings
from typing import Any, Generator, List, Optional

import pytest

# Ignore DeprecationWarnings raised inside pysnmp itself; they are not actionable here.
warnings.filterwarnings("ignore", category=DeprecationWarning, module=r"pysnmp.*")

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from passpersist.app_logger import AppLogger, ColoredFormatter  # noqa: E402
from passpersist.line_channel import LineChannel  # noqa: E402
from passpersist.oid_store import OidStore  # noqa: E402


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ScriptedChannel(LineChannel):
    """LineChannel fed from a script of lines, spending fake time while it "waits".

    Each script item is ``(delay, line)``: the line arrives ``delay`` seconds
    into the wait. ``line=""`` closes the channel. Once the script is
    exhausted the channel stays silent forever (every wait times out).
    """

    def __init__(self, clock: FakeClock, script: Optional[List[Any]] = None) -> None:
        super().__init__(io.StringIO())
        self.clock = clock
        self.script = list(script or [])
        self.waits: List[Optional[float]] = []

    def readline(self, timeout: Optional[float] = None) -> Optional[str]:
        self.waits.append(timeout)
        if self.script:
            delay, line = self.script[0]
            if timeout is None or delay <= timeout:
                self.script.pop(0)
                self.clock.advance(delay)
                return line
            self.script[0] = (delay - timeout, line)
        if timeout is None:
            return ""
        self.clock.advance(timeout)
        return None


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> OidStore:
    """Small tree used by several tests."""
    return OidStore({
        ".1.2.1": ("integer", "1"),
        ".1.2.3": ("string", "three"),
        ".1.2.10": ("counter", "10"),
    })


@pytest.fixture
def reset_app_logger() -> Generator[None, None, None]:
    """Let a test configure logging from scratch and restore the root logger afterwards."""
    root = logging.getLogger()
    saved_level = root.level
    AppLogger._configured = False
    yield
    AppLogger._configured = False
    for handler in list(root.handlers):
        if isinstance(handler, (logging.handlers.RotatingFileHandler, logging.NullHandler)) \
                or isinstance(handler.formatter, ColoredFormatter):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(saved_level)
