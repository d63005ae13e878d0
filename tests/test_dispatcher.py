from __future__ import annotations

from typing import List

import pytest

from ptyedit import keys
from ptyedit.config import EditorConfig
from ptyedit.modes.dispatcher import DispatchMode, KeyDispatcher
from ptyedit.workspace import BUFFER_LIST_NAME, Workspace


class RecordingSession:
    alive = True

    def __init__(self) -> None:
        self.sent: List[bytes] = []

    def write(self, data: bytes) -> int:
        self.sent.append(data)
        return len(data)

    def resize(self, rows: int, cols: int) -> None:
        pass


@pytest.fixture
def dispatcher() -> KeyDispatcher:
    return KeyDispatcher(Workspace(EditorConfig(max_buffers=8)))


def press(dispatcher: KeyDispatcher, *codes: int):
    result = None
    for code in codes:
        result = dispatcher.handle_key(code)
    return result


def type_text(dispatcher: KeyDispatcher, text: str):
    return press(dispatcher, *(ord(char) for char in text))


def run_command(dispatcher: KeyDispatcher, line: str):
    press(dispatcher, keys.ESC, ord("x"))
    type_text(dispatcher, line)
    return press(dispatcher, keys.CR)


def test_self_insert_clears_status(dispatcher: KeyDispatcher) -> None:
    dispatcher.workspace.set_message("stale")
    dispatcher.workspace.current.set_text(b"")

    result = type_text(dispatcher, "hi")

    assert result.status == "insert"
    assert dispatcher.workspace.current.lines == (b"hi",)
    assert dispatcher.workspace.message == ""


def test_unbound_control_key_is_ignored(dispatcher: KeyDispatcher) -> None:
    before = dispatcher.workspace.current.lines

    result = press(dispatcher, keys.ctrl("t"))

    assert result.consumed is False
    assert dispatcher.workspace.current.lines == before


def test_prefix_a_entry_and_undefined_key(dispatcher: KeyDispatcher) -> None:
    press(dispatcher, keys.ctrl("x"))

    assert dispatcher.mode is DispatchMode.PREFIX_A
    assert dispatcher.workspace.message == "C-x-"

    press(dispatcher, ord("q"))

    assert dispatcher.mode is DispatchMode.NORMAL
    assert dispatcher.workspace.message == "C-x q is undefined"


def test_prefix_b_undefined_key(dispatcher: KeyDispatcher) -> None:
    press(dispatcher, keys.ESC)
    assert dispatcher.mode is DispatchMode.PREFIX_B
    assert dispatcher.workspace.message == "ESC-"

    press(dispatcher, ord("z"))

    assert dispatcher.mode is DispatchMode.NORMAL
    assert dispatcher.workspace.message == "M-z is undefined"


def test_prefix_cancel(dispatcher: KeyDispatcher) -> None:
    press(dispatcher, keys.ctrl("x"), keys.ctrl("g"))

    assert dispatcher.mode is DispatchMode.NORMAL
    assert dispatcher.workspace.message == "Quit"


def test_split_window_is_reported(dispatcher: KeyDispatcher) -> None:
    press(dispatcher, keys.ctrl("x"), ord("2"))

    assert dispatcher.workspace.message == "Window splitting not supported"
    assert dispatcher.mode is DispatchMode.NORMAL


def test_minibuffer_editing(dispatcher: KeyDispatcher) -> None:
    press(dispatcher, keys.ESC, ord("x"))
    assert dispatcher.mode is DispatchMode.MINIBUFFER
    assert dispatcher.minibuffer_text == "M-x "

    type_text(dispatcher, "evak")
    press(dispatcher, keys.DEL)
    type_text(dispatcher, "l")
    press(dispatcher, 0xE9)

    assert dispatcher.minibuffer_text == "M-x eval"
    assert dispatcher.snapshot().minibuffer == "M-x eval"


def test_minibuffer_cancel_keys(dispatcher: KeyDispatcher) -> None:
    for cancel_key in (keys.ctrl("g"), keys.ESC):
        press(dispatcher, keys.ctrl("x"), ord("b"))
        type_text(dispatcher, "abc")
        press(dispatcher, cancel_key)

        assert dispatcher.mode is DispatchMode.NORMAL
        assert dispatcher.minibuffer_text is None
        assert dispatcher.context.minibuffer is None
        assert dispatcher.workspace.message == "Quit"
    assert dispatcher.workspace.find_buffer("abc") is None


def test_minibuffer_input_is_bounded() -> None:
    dispatcher = KeyDispatcher(Workspace(EditorConfig(minibuffer_max_length=3)))
    press(dispatcher, keys.ESC, ord("x"))

    type_text(dispatcher, "abc")
    result = type_text(dispatcher, "d")

    assert result.status == "full"
    assert dispatcher.minibuffer_text == "M-x abc"


def test_eval_command(dispatcher: KeyDispatcher) -> None:
    run_command(dispatcher, "eval 1+2")

    assert dispatcher.workspace.message == "=> 3"
    assert dispatcher.mode is DispatchMode.NORMAL


def test_eval_usage_and_errors(dispatcher: KeyDispatcher) -> None:
    run_command(dispatcher, "eval")
    assert dispatcher.workspace.message.startswith("Usage: M-x eval")

    run_command(dispatcher, "eval 1/0")
    assert dispatcher.workspace.message == "Error: division by zero"


def test_eval_buffer(dispatcher: KeyDispatcher) -> None:
    dispatcher.workspace.current.set_text(b"6*7")

    run_command(dispatcher, "eval-buffer")

    assert dispatcher.workspace.message == "=> 42"


def test_unknown_command(dispatcher: KeyDispatcher) -> None:
    run_command(dispatcher, "frobnicate now")

    assert dispatcher.workspace.message == "Unknown command: frobnicate now"


def test_list_buffers_command(dispatcher: KeyDispatcher) -> None:
    run_command(dispatcher, "list-buffers")

    assert dispatcher.workspace.current.name == BUFFER_LIST_NAME
    assert dispatcher.workspace.current.lines[1] == b"  [1] *scratch*"


def test_switch_buffer_prompt(dispatcher: KeyDispatcher) -> None:
    press(dispatcher, keys.ctrl("x"), ord("b"))
    assert dispatcher.minibuffer_text == "Switch to buffer: "

    type_text(dispatcher, "notes")
    press(dispatcher, keys.CR)

    assert dispatcher.workspace.current.name == "notes"
    assert dispatcher.workspace.message == "Created new buffer: notes"


def test_kill_buffer_prompt(dispatcher: KeyDispatcher) -> None:
    dispatcher.workspace.new_buffer("doomed")

    press(dispatcher, keys.ctrl("x"), ord("k"))
    type_text(dispatcher, "doomed")
    press(dispatcher, keys.CR)

    assert dispatcher.workspace.find_buffer("doomed") is None
    assert dispatcher.workspace.message == "Killed buffer: doomed"


def test_find_then_save_file(dispatcher: KeyDispatcher, tmp_path) -> None:
    path = tmp_path / "draft.txt"

    press(dispatcher, keys.ctrl("x"), keys.ctrl("f"))
    type_text(dispatcher, str(path))
    press(dispatcher, keys.CR)

    assert dispatcher.workspace.message == f"New file: {path}"

    type_text(dispatcher, "text")
    press(dispatcher, keys.ctrl("x"), keys.ctrl("s"))

    assert dispatcher.workspace.message == f"Wrote {path}"
    assert path.read_bytes() == b"text\n"


def test_empty_find_file_name(dispatcher: KeyDispatcher) -> None:
    press(dispatcher, keys.ctrl("x"), keys.ctrl("f"), keys.CR)

    assert dispatcher.workspace.message == "No file name given"
    assert len(dispatcher.workspace) == 1


def test_search_prompt(dispatcher: KeyDispatcher) -> None:
    dispatcher.workspace.current.set_text(b"alpha beta")

    press(dispatcher, keys.ctrl("s"))
    type_text(dispatcher, "alpha")
    press(dispatcher, keys.CR)

    assert dispatcher.workspace.message == "Found: alpha"
    assert dispatcher.workspace.current.cursor == (0, 0)

    press(dispatcher, keys.ctrl("s"))
    type_text(dispatcher, "gamma")
    press(dispatcher, keys.CR)

    assert dispatcher.workspace.message == "Search failed: gamma"


def test_replace_is_two_stage(dispatcher: KeyDispatcher) -> None:
    dispatcher.workspace.current.set_text(b"cat cat dog")

    press(dispatcher, keys.ESC, ord("%"))
    assert dispatcher.minibuffer_text == "Replace: "
    type_text(dispatcher, "cat")
    press(dispatcher, keys.CR)

    assert dispatcher.mode is DispatchMode.MINIBUFFER
    assert dispatcher.minibuffer_text == "Replace cat with: "

    type_text(dispatcher, "cow")
    press(dispatcher, keys.CR)

    assert dispatcher.mode is DispatchMode.NORMAL
    assert dispatcher.workspace.current.lines == (b"cow cow dog",)
    assert dispatcher.workspace.message == "Replaced 2 occurrences"


def test_kill_and_yank_keys(dispatcher: KeyDispatcher) -> None:
    buffer = dispatcher.workspace.current
    buffer.set_text(b"hello world")
    buffer.state.set_cursor(0, 5)

    press(dispatcher, keys.ctrl("k"), keys.ctrl("a"), keys.ctrl("y"))

    assert buffer.lines == (b" worldhello",)


def test_mark_region_keys(dispatcher: KeyDispatcher) -> None:
    buffer = dispatcher.workspace.current
    buffer.set_text(b"one two")

    press(dispatcher, keys.ctrl("w"))
    assert dispatcher.workspace.message == "The mark is not set now"

    press(dispatcher, keys.ctrl("a"), 0)
    assert dispatcher.workspace.message == "Mark set"
    press(dispatcher, keys.ESC, ord("f"), keys.ESC, ord("w"))

    assert dispatcher.workspace.message == "Region copied"
    assert dispatcher.workspace.kill_ring.text == b"one"


def test_help_toggle(dispatcher: KeyDispatcher) -> None:
    press(dispatcher, keys.KEY_F1)
    assert dispatcher.snapshot().show_help is True

    press(dispatcher, keys.KEY_F1)
    assert dispatcher.snapshot().show_help is False


def test_quit_sets_flag(dispatcher: KeyDispatcher) -> None:
    press(dispatcher, keys.ctrl("x"), keys.ctrl("c"))

    assert dispatcher.quit_requested is True
    assert dispatcher.mode is DispatchMode.NORMAL


def test_passthrough_forwards_keys(dispatcher: KeyDispatcher) -> None:
    buffer = dispatcher.workspace.current
    before = buffer.lines
    session = RecordingSession()
    buffer.session = session

    press(dispatcher, ord("l"), ord("s"), keys.CR, keys.ctrl("g"), keys.KEY_UP, keys.ESC)

    assert session.sent == [b"l", b"s", b"\r", b"\x07", b"\x1b[A", b"\x1b"]
    assert buffer.lines == before
    assert dispatcher.mode is DispatchMode.NORMAL


def test_passthrough_keeps_prefix_a(dispatcher: KeyDispatcher) -> None:
    session = RecordingSession()
    dispatcher.workspace.current.session = session

    press(dispatcher, keys.ctrl("x"))

    assert dispatcher.mode is DispatchMode.PREFIX_A
    assert session.sent == []


def test_passthrough_drops_untranslatable_keys(dispatcher: KeyDispatcher) -> None:
    session = RecordingSession()
    dispatcher.workspace.current.session = session

    result = press(dispatcher, keys.KEY_F1)

    assert result.consumed is False
    assert session.sent == []


def test_out_of_memory_returns_to_normal(dispatcher: KeyDispatcher, monkeypatch) -> None:
    def exhaust(code: int) -> None:
        raise MemoryError

    monkeypatch.setattr(dispatcher.workspace.current, "insert_char", exhaust)

    result = press(dispatcher, ord("a"))

    assert result.status == "oom"
    assert dispatcher.workspace.message == "Out of memory"
    assert dispatcher.mode is DispatchMode.NORMAL


def test_cancel_from_prompt(dispatcher: KeyDispatcher) -> None:
    press(dispatcher, keys.ESC, ord("x"))

    result = press(dispatcher, keys.ctrl("g"))

    assert result.status == "cancel"
    assert dispatcher.mode is DispatchMode.NORMAL
    assert dispatcher.context.minibuffer is None
    assert dispatcher.workspace.message == "Quit"
