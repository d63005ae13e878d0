from __future__ import annotations

import fcntl
import os
import select
import shutil
import struct
import termios
import time
from typing import Callable

import pytest

from ptyedit.config import EditorConfig
from ptyedit.errors import ChannelFailure, SpawnFailure, WorkspaceFullError
from ptyedit.session import EXIT_NOTICE, SubprocessSession
from ptyedit.workspace import Workspace

CAT = shutil.which("cat") or "/bin/cat"
TRUE = shutil.which("true") or "/bin/true"

pytestmark = pytest.mark.skipif(os.name != "posix", reason="requires a pty")


@pytest.fixture
def workspace():
    workspace = Workspace(EditorConfig(max_buffers=4))
    yield workspace
    workspace.shutdown()


def pump_until(
    session: SubprocessSession, predicate: Callable[[], bool], timeout: float = 5.0
) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate() or not session.alive:
            break
        select.select([session.fileno()], [], [], 0.05)
        session.drain()
    return predicate()


def test_create_focuses_new_shell_buffer(workspace: Workspace) -> None:
    session = SubprocessSession.create(workspace, CAT, 24, 80)

    assert session.alive
    assert session.pid is not None
    assert workspace.current is session.buffer
    assert session.buffer.name == "*shell-1*"
    assert session.buffer.is_subprocess
    assert workspace.live_sessions() == [session]


def test_written_input_comes_back_into_buffer(workspace: Workspace) -> None:
    session = SubprocessSession.create(workspace, CAT, 24, 80)

    assert session.write(b"hello\n") == 6
    assert pump_until(session, lambda: b"hello" in session.buffer.lines)
    assert session.buffer.modified is True


def test_child_exit_appends_notice(workspace: Workspace) -> None:
    session = SubprocessSession.create(workspace, TRUE, 24, 80)

    pump_until(session, lambda: not session.alive)

    assert not session.alive
    assert EXIT_NOTICE.strip() in session.buffer.lines
    assert session.write(b"ignored") == 0
    assert workspace.live_sessions() == []
    with pytest.raises(ValueError):
        session.fileno()


def test_spawn_failure_leaves_workspace_untouched(workspace: Workspace) -> None:
    before = [buffer.name for buffer in workspace]

    with pytest.raises(SpawnFailure) as excinfo:
        SubprocessSession.create(workspace, "/nonexistent/ptyedit-shell", 24, 80)

    assert str(excinfo.value).startswith("Cannot start /nonexistent/ptyedit-shell")
    assert [buffer.name for buffer in workspace] == before
    assert workspace.current_index == 0


def test_full_workspace_refuses_session(workspace: Workspace) -> None:
    for name in ("a", "b", "c"):
        workspace.new_buffer(name)

    with pytest.raises(WorkspaceFullError):
        SubprocessSession.create(workspace, CAT, 24, 80)

    assert len(workspace) == 4


def test_resize_updates_live_pty_window(workspace: Workspace) -> None:
    session = SubprocessSession.create(workspace, CAT, 24, 80)

    session.resize(30, 100)

    winsize = fcntl.ioctl(session.fileno(), termios.TIOCGWINSZ, b"\0" * 8)
    rows, cols, _, _ = struct.unpack("HHHH", winsize)
    assert (rows, cols) == (30, 100)
    assert session.alive


def test_closed_channel_read_raises(workspace: Workspace) -> None:
    session = SubprocessSession.create(workspace, CAT, 24, 80)
    session.terminate()

    with pytest.raises(ChannelFailure):
        session._read_chunk()
    assert session.drain() == 0


def test_terminate_closes_channel(workspace: Workspace) -> None:
    session = SubprocessSession.create(workspace, CAT, 24, 80)

    session.terminate()

    assert not session.alive
    assert session.pid is None
    session.resize(30, 100)


def test_kill_buffer_terminates_child(workspace: Workspace) -> None:
    session = SubprocessSession.create(workspace, CAT, 24, 80)

    workspace.kill_buffer()

    assert not session.alive
    assert workspace.find_buffer("*shell-1*") is None
