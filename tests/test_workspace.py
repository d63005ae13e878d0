from __future__ import annotations

import pytest

from ptyedit.config import EditorConfig
from ptyedit.errors import WorkspaceFullError
from ptyedit.workspace import BUFFER_LIST_NAME, SCRATCH_NAME, Workspace


@pytest.fixture
def workspace() -> Workspace:
    return Workspace(EditorConfig(max_buffers=3))


def test_starts_with_welcome_scratch(workspace: Workspace) -> None:
    scratch = workspace.current

    assert len(workspace) == 1
    assert scratch.name == SCRATCH_NAME
    assert scratch.modified is False
    assert scratch.cursor == (0, 0)
    assert scratch.lines[0].startswith(b";; Welcome to ptyedit")
    assert scratch.lines[-1] == b""


def test_new_buffer_respects_capacity(workspace: Workspace) -> None:
    workspace.new_buffer("a")
    workspace.new_buffer("b")

    with pytest.raises(WorkspaceFullError) as excinfo:
        workspace.new_buffer("c")

    assert excinfo.value.limit == 3
    assert len(workspace) == 3


def test_switch_creates_then_reuses(workspace: Workspace) -> None:
    created = workspace.switch_to_buffer("notes")
    assert workspace.message == "Created new buffer: notes"
    assert workspace.current is created

    workspace.switch_to_buffer(SCRATCH_NAME)
    assert workspace.current_index == 0

    again = workspace.switch_to_buffer("notes")
    assert again is created
    assert workspace.message == "Switched to buffer: notes"
    assert len(workspace) == 2


def test_switch_reports_full_workspace(workspace: Workspace) -> None:
    workspace.new_buffer("a")
    workspace.new_buffer("b")

    assert workspace.switch_to_buffer("c") is None
    assert workspace.message == "Too many buffers open"


def test_killing_last_buffer_recreates_scratch(workspace: Workspace) -> None:
    workspace.current.insert_bytes(b"edited")

    workspace.kill_buffer()

    assert len(workspace) == 1
    assert workspace.current.name == SCRATCH_NAME
    assert workspace.current.lines == (b"",)
    assert workspace.message == f"Killed buffer: {SCRATCH_NAME}"


def test_kill_keeps_current_index_on_same_buffer(workspace: Workspace) -> None:
    workspace.new_buffer("a")
    b = workspace.new_buffer("b")
    workspace.focus(b)

    workspace.kill_buffer(0)

    assert workspace.current is b
    assert workspace.current_index == 1


def test_kill_by_name(workspace: Workspace) -> None:
    workspace.new_buffer("gone")

    assert workspace.kill_buffer_named("missing") is None
    assert workspace.message == "No buffer named: missing"

    workspace.kill_buffer_named("gone")
    assert workspace.find_buffer("gone") is None


def test_kill_terminates_session(workspace: Workspace) -> None:
    class FakeSession:
        alive = True
        terminated = False

        def terminate(self) -> None:
            self.terminated = True

    buffer = workspace.new_buffer("*shell-1*")
    session = FakeSession()
    buffer.session = session

    workspace.kill_buffer(workspace.index_of(buffer))

    assert session.terminated is True


def test_open_existing_file(workspace: Workspace, tmp_path) -> None:
    path = tmp_path / "hello.txt"
    path.write_bytes(b"hi\nthere\n")

    buffer = workspace.open_file(str(path))

    assert buffer is workspace.current
    assert buffer.name == "hello.txt"
    assert buffer.lines == (b"hi", b"there")
    assert workspace.message == f"Opened {path}"


def test_open_missing_file_starts_new_buffer(workspace: Workspace, tmp_path) -> None:
    path = tmp_path / "fresh.txt"

    buffer = workspace.open_file(str(path))

    assert buffer is not None
    assert buffer.filename == str(path)
    assert buffer.lines == (b"",)
    assert workspace.message == f"New file: {path}"


def test_open_same_path_reuses_buffer(workspace: Workspace, tmp_path) -> None:
    path = tmp_path / "once.txt"
    path.write_bytes(b"x\n")

    first = workspace.open_file(str(path))
    workspace.focus(workspace.buffers[0])
    second = workspace.open_file(str(path))

    assert first is second
    assert len(workspace) == 2


def test_open_unreadable_path_discards_buffer(workspace: Workspace, tmp_path) -> None:
    assert workspace.open_file(str(tmp_path)) is None
    assert len(workspace) == 1
    assert workspace.message.startswith(f"Cannot open {tmp_path}")


def test_save_requires_filename(workspace: Workspace) -> None:
    assert workspace.save_current() is False
    assert workspace.message == "No filename -- use C-x C-w to write to file"


def test_save_refuses_shell_buffer(workspace: Workspace) -> None:
    workspace.current.session = object()

    assert workspace.save_current() is False
    assert workspace.message == "Cannot save shell buffer"


def test_write_then_save(workspace: Workspace, tmp_path) -> None:
    path = tmp_path / "saved.txt"
    workspace.current.set_text(b"body")

    assert workspace.write_current(str(path)) is True
    assert workspace.message == f"Wrote {path}"
    assert path.read_bytes() == b"body\n"

    workspace.current.insert_bytes(b"!")
    assert workspace.save_current() is True
    assert path.read_bytes() == b"body!\n"


def test_list_buffers(workspace: Workspace, tmp_path) -> None:
    notes = workspace.new_buffer("notes")
    notes.filename = str(tmp_path / "notes.txt")
    notes.modified = True

    listing = workspace.list_buffers()

    assert listing is workspace.current
    assert listing.name == BUFFER_LIST_NAME
    assert listing.modified is False
    assert listing.lines[0] == b"Buffer List:"
    assert listing.lines[1] == b"  [1] *scratch*"
    assert listing.lines[2] == f"  [2] notes (modified) -- {notes.filename}".encode()
    assert len(listing.lines) == 3


def test_viewport_snapshot(workspace: Workspace) -> None:
    workspace.set_message("hello")

    view = workspace.viewport(3, mode="prefix_a")

    assert view.buffer_name == SCRATCH_NAME
    assert len(view.lines) == 3
    assert view.status == "hello"
    assert view.mode == "prefix_a"
    assert view.buffer_count == 1
