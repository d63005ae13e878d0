from __future__ import annotations

from typing import List

from ptyedit import keys
from ptyedit.buffer import ViewportMirror
from ptyedit.config import EditorConfig
from ptyedit.editor import Editor
from ptyedit.modes.dispatcher import DispatchMode


def make_editor() -> Editor:
    return Editor(EditorConfig(poll_timeout_ms=10), rows=12, cols=60)


def test_step_dispatches_one_key() -> None:
    editor = make_editor()
    editor.keyboard.extend([keys.ctrl("x"), ord("b")])

    assert editor.step(1.0) == keys.ctrl("x")
    assert editor.mode is DispatchMode.PREFIX_A
    assert editor.step(1.0) == ord("b")
    assert editor.mode is DispatchMode.MINIBUFFER
    assert editor.step(0.01) is None
    editor.shutdown()


def test_pump_processes_everything_pending() -> None:
    editor = make_editor()
    editor.workspace.current.set_text(b"")
    editor.keyboard.extend(ord(char) for char in "abc")

    assert editor.pump() == 3
    assert editor.workspace.current.lines == (b"abc",)
    editor.shutdown()


def test_pump_stops_after_quit() -> None:
    editor = make_editor()
    editor.keyboard.extend([keys.ctrl("x"), keys.ctrl("c"), ord("z")])

    assert editor.pump() == 2
    assert editor.running is False
    editor.shutdown()


def test_run_renders_until_quit() -> None:
    editor = make_editor()
    frames: List[ViewportMirror] = []

    class Sink:
        def render(self, mirror: ViewportMirror) -> None:
            if not frames:
                editor.keyboard.extend([keys.ctrl("x"), keys.ctrl("c")])
            frames.append(mirror)

    editor.run(Sink())

    assert len(frames) >= 2
    assert frames[1].status == "C-x-"
    assert editor.running is False


def test_open_files_at_startup(tmp_path) -> None:
    first = tmp_path / "one.txt"
    first.write_bytes(b"1\n")
    editor = make_editor()

    editor.open_files([str(first), str(tmp_path / "two.txt")])

    assert [buffer.name for buffer in editor.workspace] == ["*scratch*", "one.txt", "two.txt"]
    assert editor.snapshot().buffer_name == "two.txt"
    editor.shutdown()


def test_shutdown_is_idempotent() -> None:
    editor = make_editor()

    editor.shutdown()
    editor.shutdown()

    assert editor.running is False
    assert editor.keyboard.closed is True
