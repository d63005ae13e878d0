"""The bounded buffer collection shared by every editor component."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, List, Optional

from ptyedit.buffer import KillRing, TextBuffer, ViewportMirror
from ptyedit.config import EditorConfig
from ptyedit.errors import FileIOFailure, WorkspaceFullError
from ptyedit.runtime import telemetry

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from ptyedit.session import SubprocessSession

SCRATCH_NAME = "*scratch*"
BUFFER_LIST_NAME = "*Buffer List*"

SCRATCH_BANNER = (
    b";; Welcome to ptyedit\n"
    b";; C-x C-f: open file  C-x C-s: save  C-x b: switch buffer\n"
    b";; C-x C-c: quit       C-x s: shell   M-x: execute command\n"
    b";; M-x eval-buffer: run buffer as Python\n"
    b";; F1: help\n"
)

HELP_LINES = (
    " ptyedit key bindings ",
    " C-f/C-b/C-n/C-p  : move cursor      ",
    " C-a / C-e        : line start/end   ",
    " C-k              : kill line        ",
    " C-y              : yank             ",
    " C-d              : delete forward   ",
    " C-@ / C-w / M-w  : mark, kill, copy ",
    " C-s / M-%        : search, replace  ",
    " C-x C-s          : save file        ",
    " C-x C-f          : find file        ",
    " C-x C-c          : quit             ",
    " C-x b            : switch buffer    ",
    " C-x k            : kill buffer      ",
    " C-x s            : open shell       ",
    " M-x              : execute command  ",
    " C-g              : cancel           ",
    " C-l              : redraw           ",
    " F1               : toggle help      ",
)


class Workspace:
    """Ordered buffers, the current index, the kill-ring and the status line.

    The collection is never empty: removing the last buffer immediately
    creates a fresh ``*scratch*`` buffer in its place.
    """

    def __init__(self, config: Optional[EditorConfig] = None) -> None:
        self.config = config or EditorConfig()
        self.buffers: List[TextBuffer] = []
        self.current_index = 0
        self.kill_ring = KillRing()
        self.message = ""
        self.show_help = False
        self._session_counter = 0
        self.logger = telemetry.get_logger("ptyedit.workspace")

        scratch = self._make_buffer(SCRATCH_NAME)
        scratch.append_from_byte_stream(SCRATCH_BANNER)
        scratch.move_buffer_start()
        scratch.modified = False
        self.buffers.append(scratch)

    # -- collection ---------------------------------------------------------

    @property
    def current(self) -> TextBuffer:
        return self.buffers[self.current_index]

    @property
    def buffer_count(self) -> int:
        return len(self.buffers)

    def __iter__(self):
        return iter(self.buffers)

    def __len__(self) -> int:
        return len(self.buffers)

    def _make_buffer(self, name: str) -> TextBuffer:
        return TextBuffer(name, max_line_length=self.config.max_line_length)

    def find_buffer(self, name: str) -> Optional[TextBuffer]:
        for buffer in self.buffers:
            if buffer.name == name:
                return buffer
        return None

    def index_of(self, buffer: TextBuffer) -> int:
        for index, candidate in enumerate(self.buffers):
            if candidate is buffer:
                return index
        raise ValueError(f"{buffer.name!r} is not in the workspace")

    def new_buffer(self, name: str) -> TextBuffer:
        """Append an empty buffer named ``name`` without focusing it."""

        if len(self.buffers) >= self.config.max_buffers:
            raise WorkspaceFullError(self.config.max_buffers)
        buffer = self._make_buffer(name)
        self.buffers.append(buffer)
        return buffer

    def focus(self, buffer: TextBuffer) -> TextBuffer:
        self.current_index = self.index_of(buffer)
        return buffer

    def discard_buffer(self, buffer: TextBuffer) -> None:
        """Drop ``buffer`` without touching any session it might own."""

        self._remove_at(self.index_of(buffer))

    def _remove_at(self, index: int) -> TextBuffer:
        removed = self.buffers.pop(index)
        if not self.buffers:
            self.buffers.append(self._make_buffer(SCRATCH_NAME))
        if self.current_index > index:
            self.current_index -= 1
        self.current_index = min(self.current_index, len(self.buffers) - 1)
        return removed

    def next_session_name(self) -> str:
        self._session_counter += 1
        return f"*shell-{self._session_counter}*"

    # -- buffer commands ----------------------------------------------------

    def kill_buffer(self, index: Optional[int] = None) -> TextBuffer:
        """Remove a buffer, terminating its session first if it owns one."""

        if index is None:
            index = self.current_index
        if not 0 <= index < len(self.buffers):
            raise IndexError(f"no buffer at index {index}")
        buffer = self.buffers[index]
        if buffer.session is not None:
            buffer.session.terminate()
        self._remove_at(index)
        self.set_message(f"Killed buffer: {buffer.name}")
        telemetry.record_event("workspace.buffer_killed", data={"buffer": buffer.name})
        return buffer

    def kill_buffer_named(self, name: str) -> Optional[TextBuffer]:
        buffer = self.find_buffer(name)
        if buffer is None:
            self.set_message(f"No buffer named: {name}")
            return None
        return self.kill_buffer(self.index_of(buffer))

    def switch_to_buffer(self, name: str) -> Optional[TextBuffer]:
        """Focus the buffer called ``name``, creating it when absent."""

        buffer = self.find_buffer(name)
        if buffer is not None:
            self.focus(buffer)
            self.set_message(f"Switched to buffer: {name}")
            return buffer
        try:
            buffer = self.new_buffer(name)
        except WorkspaceFullError:
            self.set_message("Too many buffers open")
            return None
        self.focus(buffer)
        self.set_message(f"Created new buffer: {name}")
        return buffer

    def open_file(self, path: str) -> Optional[TextBuffer]:
        """Visit ``path``, reusing a buffer that already holds it."""

        for buffer in self.buffers:
            if buffer.filename == path:
                self.focus(buffer)
                self.set_message(f"Switched to buffer: {buffer.name}")
                return buffer

        try:
            buffer = self.new_buffer(os.path.basename(path) or path)
        except WorkspaceFullError:
            self.set_message("Too many buffers open")
            return None

        try:
            buffer.load_from_file(path)
        except FileIOFailure as exc:
            if not exc.missing:
                self.discard_buffer(buffer)
                self.set_message(f"Cannot open {path}: {exc}")
                return None
            buffer.filename = path
            self.focus(buffer)
            self.set_message(f"New file: {path}")
            return buffer

        self.focus(buffer)
        self.set_message(f"Opened {path}")
        telemetry.record_event(
            "file.loaded", data={"path": path, "lines": buffer.line_count}
        )
        return buffer

    def save_current(self) -> bool:
        buffer = self.current
        if buffer.is_subprocess:
            self.set_message("Cannot save shell buffer")
            return False
        if not buffer.filename:
            self.set_message("No filename -- use C-x C-w to write to file")
            return False
        return self._save(buffer, buffer.filename)

    def write_current(self, path: str) -> bool:
        buffer = self.current
        if buffer.is_subprocess:
            self.set_message("Cannot save shell buffer")
            return False
        return self._save(buffer, path)

    def _save(self, buffer: TextBuffer, path: str) -> bool:
        try:
            written = buffer.save_to_file(path)
        except FileIOFailure as exc:
            self.logger.warning(f"saving {path} failed: {exc}")
            self.set_message(f"Error saving {path}")
            return False
        self.set_message(f"Wrote {path}")
        telemetry.record_event("file.saved", data={"path": path, "bytes": written})
        return True

    def buffer_listing(self) -> List[bytes]:
        listing = [b"Buffer List:"]
        for index, buffer in enumerate(self.buffers):
            entry = f"  [{index + 1}] {buffer.name}"
            if buffer.modified:
                entry += " (modified)"
            if buffer.filename:
                entry += f" -- {buffer.filename}"
            listing.append(entry.encode("latin-1", errors="replace"))
        return listing

    def list_buffers(self) -> Optional[TextBuffer]:
        """Rebuild ``*Buffer List*`` from the current collection and show it."""

        listing = self.buffer_listing()
        target = self.find_buffer(BUFFER_LIST_NAME)
        if target is None:
            try:
                target = self.new_buffer(BUFFER_LIST_NAME)
            except WorkspaceFullError:
                self.set_message("Too many buffers open")
                return None
        target.set_lines(listing)
        target.modified = False
        self.focus(target)
        return target

    # -- sessions -----------------------------------------------------------

    def live_sessions(self) -> List["SubprocessSession"]:
        return [
            buffer.session
            for buffer in self.buffers
            if buffer.session is not None and buffer.session.alive
        ]

    def resize_sessions(self, rows: int, cols: int) -> None:
        for session in self.live_sessions():
            session.resize(rows, cols)

    def shutdown(self) -> None:
        """Signal every live child; nothing is waited on."""

        for session in self.live_sessions():
            session.terminate()

    # -- status and rendering -----------------------------------------------

    def set_message(self, text: str) -> None:
        self.message = text

    def clear_message(self) -> None:
        self.message = ""

    def viewport(
        self, rows: int, *, mode: str = "normal", minibuffer: Optional[str] = None
    ) -> ViewportMirror:
        buffer = self.current
        top = buffer.scroll_to_cursor(rows)
        lines = buffer.lines
        return ViewportMirror(
            buffer_name=buffer.name,
            lines=tuple(lines[top : top + max(1, rows)]),
            top_line=top,
            cursor=buffer.cursor,
            status=self.message,
            mode=mode,
            is_subprocess=buffer.is_subprocess,
            modified=buffer.modified,
            filename=buffer.filename,
            buffer_index=self.current_index,
            buffer_count=len(self.buffers),
            minibuffer=minibuffer,
            show_help=self.show_help,
        )


__all__ = [
    "Workspace",
    "SCRATCH_NAME",
    "SCRATCH_BANNER",
    "BUFFER_LIST_NAME",
    "HELP_LINES",
]
