"""Cursor motion and editing verbs bound in normal mode."""

from __future__ import annotations

from ptyedit.keymaps import ResolutionMatch
from ptyedit.keys import LF, TAB
from ptyedit.modes.base_mode import ModeContext, ModeResult


def _done(status: str = "ok") -> ModeResult:
    return ModeResult(consumed=True, status=status)


def move_up(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.move_cursor(-1, 0)
    return _done()


def move_down(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.move_cursor(1, 0)
    return _done()


def move_left(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.move_left()
    return _done()


def move_right(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.move_right()
    return _done()


def line_start(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.move_line_start()
    return _done()


def line_end(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.move_line_end()
    return _done()


def page_up(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.page_up(context.view_rows)
    return _done()


def page_down(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.page_down(context.view_rows)
    return _done()


def delete_backward(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.delete_backward()
    return _done("edit")


def delete_forward(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.delete_forward()
    return _done("edit")


def kill_line(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.kill_to_end_of_line(context.kill_ring)
    return _done("edit")


def yank(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.yank(context.kill_ring.text)
    return _done("edit")


def insert_tab(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.insert_char(TAB)
    return _done("edit")


def newline(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.insert_char(LF)
    return _done("edit")


def set_mark(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.set_mark()
    context.report("Mark set")
    return _done()


def kill_region(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    if not context.buffer.kill_region(context.kill_ring):
        context.report("The mark is not set now")
        return _done("noop")
    return _done("edit")


def clear_status(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.workspace.clear_message()
    return _done()


def toggle_help(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.workspace.show_help = not context.workspace.show_help
    return _done()


def resize(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.workspace.resize_sessions(context.view_rows, context.view_cols)
    return _done("resize")


__all__ = [
    "move_up",
    "move_down",
    "move_left",
    "move_right",
    "line_start",
    "line_end",
    "page_up",
    "page_down",
    "delete_backward",
    "delete_forward",
    "kill_line",
    "yank",
    "insert_tab",
    "newline",
    "set_mark",
    "kill_region",
    "clear_status",
    "toggle_help",
    "resize",
]
