from __future__ import annotations

import os
from typing import List

import pytest

from ptyedit.runtime.keysource import PipeKeySource
from ptyedit.runtime.multiplexer import InputMultiplexer
from ptyedit.workspace import Workspace


class RecordingKeySource(PipeKeySource):
    def __init__(self, log: List[str]) -> None:
        super().__init__()
        self.log = log

    def read_key(self):
        self.log.append("key")
        return super().read_key()


class FakeSession:
    """A readable pipe standing in for a pty master."""

    def __init__(self, log: List[str]) -> None:
        self.log = log
        self.read_fd, self.write_fd = os.pipe()
        self.alive = True
        self.received = b""

    def fileno(self) -> int:
        return self.read_fd

    def drain(self) -> int:
        self.log.append("drain")
        data = os.read(self.read_fd, 4096)
        self.received += data
        return len(data)

    def close(self) -> None:
        os.close(self.read_fd)
        os.close(self.write_fd)


@pytest.fixture
def keyboard():
    with PipeKeySource() as source:
        yield source


def test_returns_pushed_key(keyboard: PipeKeySource) -> None:
    multiplexer = InputMultiplexer(Workspace(), keyboard)
    keyboard.push(ord("a"))

    assert multiplexer.poll(1.0) == ord("a")
    assert keyboard.pending() == 0


def test_timeout_yields_none(keyboard: PipeKeySource) -> None:
    multiplexer = InputMultiplexer(Workspace(), keyboard)

    assert multiplexer.poll(0.01) is None


def test_keys_come_out_in_order(keyboard: PipeKeySource) -> None:
    multiplexer = InputMultiplexer(Workspace(), keyboard)
    keyboard.extend([1, 2, 3])

    assert [multiplexer.poll(1.0) for _ in range(3)] == [1, 2, 3]
    assert multiplexer.poll(0) is None


def test_ready_sessions_drain_before_key() -> None:
    log: List[str] = []
    workspace = Workspace()
    session = FakeSession(log)
    workspace.current.session = session
    try:
        with RecordingKeySource(log) as keyboard:
            multiplexer = InputMultiplexer(workspace, keyboard)
            os.write(session.write_fd, b"output")
            keyboard.push(ord("q"))

            assert multiplexer.poll(1.0) == ord("q")
    finally:
        session.close()

    assert log == ["drain", "key"]
    assert session.received == b"output"


def test_session_output_alone_returns_none(keyboard: PipeKeySource) -> None:
    log: List[str] = []
    workspace = Workspace()
    session = FakeSession(log)
    workspace.current.session = session
    try:
        multiplexer = InputMultiplexer(workspace, keyboard)
        os.write(session.write_fd, b"x")

        assert multiplexer.poll(1.0) is None
    finally:
        session.close()

    assert log == ["drain"]


def test_dead_sessions_are_not_watched(keyboard: PipeKeySource) -> None:
    log: List[str] = []
    workspace = Workspace()
    session = FakeSession(log)
    session.alive = False
    workspace.current.session = session
    try:
        os.write(session.write_fd, b"x")

        assert InputMultiplexer(workspace, keyboard).poll(0.01) is None
    finally:
        session.close()

    assert log == []
