"""
Shared pytest fixtures for bufseek tests.

Provides a controllable clock and in-memory documents so tests never
depend on wall-clock time or an editor.
"""

import pytest

from bufseek.api import BufferSeeker
from bufseek.config import SeekConfig
from bufseek.host import FileSystemHost, TextDocument


class FakeClock:
    """Deterministic clock: each call returns the current time, then advances."""

    def __init__(self, start: int = 1_700_000_000, step: int = 1):
        self.now = start
        self.step = step

    def __call__(self) -> int:
        value = self.now
        self.now += self.step
        return value


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_doc():
    """Factory for TextDocument with sequential buffer numbers."""
    counter = {"n": 0}

    def _make(identity: str = "", lines=None, *, listed: bool = True, loaded: bool = True):
        counter["n"] += 1
        return TextDocument(
            number=counter["n"],
            identity=identity,
            lines=list(lines or []),
            listed=listed,
            loaded=loaded,
        )

    return _make


@pytest.fixture
def host():
    return FileSystemHost()


@pytest.fixture
def config(tmp_path) -> SeekConfig:
    return SeekConfig(path=tmp_path / "data")


@pytest.fixture
def seeker(host, config, clock) -> BufferSeeker:
    return BufferSeeker(host, config, clock=clock)

