"""Text buffer façade combining document storage, cursor state, and edits."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Optional, Sequence

from ptyedit.errors import FileIOFailure
from ptyedit.keys import LF

from .document import BufferDocument
from .files import DEFAULT_MAX_LINE_LENGTH, read_lines, write_lines
from .registers import KillRing
from .state import BufferState, Cursor, Region

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from ptyedit.session import SubprocessSession

_CR = 0x0D
_BS = 0x08
_DEL = 0x7F
_SPACE = 0x20


class TextBuffer:
    """An editable sequence of byte lines with a cursor and an optional mark.

    Every operation clamps the cursor before acting, so callers may move the
    cursor freely (page motion, scripted edits) without breaking the line and
    column invariants.
    """

    def __init__(
        self,
        name: str = "*scratch*",
        *,
        document: Optional[BufferDocument] = None,
        max_line_length: int = DEFAULT_MAX_LINE_LENGTH,
    ) -> None:
        self.name = name
        self.document = document or BufferDocument()
        self.state = BufferState()
        self.filename: Optional[str] = None
        self.session: Optional["SubprocessSession"] = None
        self.modified = False
        self.max_line_length = max_line_length

    @classmethod
    def from_bytes(cls, data: bytes, *, name: str = "*scratch*") -> "TextBuffer":
        return cls(name=name, document=BufferDocument.from_bytes(data))

    def __repr__(self) -> str:
        return f"TextBuffer(name={self.name!r}, lines={self.line_count})"

    # -- inspection ---------------------------------------------------------

    @property
    def lines(self) -> Sequence[bytes]:
        return self.document.snapshot()

    @property
    def line_count(self) -> int:
        return self.document.line_count

    @property
    def cursor(self) -> Cursor:
        return self.state.cursor

    @property
    def top_line(self) -> int:
        return self.state.top_line

    @property
    def text(self) -> bytes:
        return self.document.join()

    @property
    def is_subprocess(self) -> bool:
        return self.session is not None

    @property
    def has_live_session(self) -> bool:
        return self.session is not None and self.session.alive

    def current_line(self) -> bytes:
        line, _ = self.clamp_cursor()
        return self.document.get_line(line)

    def clamp_cursor(self) -> Cursor:
        line, col = self.state.cursor
        line = max(0, min(line, self.document.line_count - 1))
        col = max(0, min(col, len(self.document.get_line(line))))
        self.state.set_cursor(line, col)
        return self.state.cursor

    def _clamp_position(self, position: Cursor) -> Cursor:
        line, col = position
        line = max(0, min(line, self.document.line_count - 1))
        col = max(0, min(col, len(self.document.get_line(line))))
        return (line, col)

    # -- editing ------------------------------------------------------------

    def insert_char(self, char: int) -> None:
        line, col = self.clamp_cursor()
        current = self.document.get_line(line)
        if char == LF:
            self.document.splice(line, line + 1, (current[:col], current[col:]))
            self.state.set_cursor(line + 1, 0)
        else:
            updated = current[:col] + bytes((char,)) + current[col:]
            self.document.set_line(line, updated)
            self.state.set_cursor(line, col + 1)
        self.modified = True

    def insert_bytes(self, data: bytes) -> None:
        for char in data:
            self.insert_char(char)

    def delete_backward(self) -> None:
        line, col = self.clamp_cursor()
        if col > 0:
            current = self.document.get_line(line)
            self.document.set_line(line, current[: col - 1] + current[col:])
            self.state.set_cursor(line, col - 1)
            self.modified = True
        elif line > 0:
            boundary = len(self.document.get_line(line - 1))
            self._merge_with_next(line - 1)
            self.state.set_cursor(line - 1, boundary)

    def delete_forward(self) -> None:
        line, col = self.clamp_cursor()
        current = self.document.get_line(line)
        if col < len(current):
            self.document.set_line(line, current[:col] + current[col + 1 :])
            self.modified = True
        elif line < self.document.line_count - 1:
            self._merge_with_next(line)

    def _merge_with_next(self, line: int) -> None:
        merged = self.document.get_line(line) + self.document.get_line(line + 1)
        self.document.splice(line, line + 2, (merged,))
        self.modified = True

    def kill_to_end_of_line(self, sink: KillRing) -> None:
        line, col = self.clamp_cursor()
        current = self.document.get_line(line)
        if col < len(current):
            sink.store(current[col:])
            self.document.set_line(line, current[:col])
            self.modified = True
        elif line < self.document.line_count - 1:
            sink.store(b"\n")
            self._merge_with_next(line)

    def yank(self, source: Optional[bytes]) -> None:
        if not source:
            return
        self.insert_bytes(source)

    # -- mark and region ----------------------------------------------------

    def set_mark(self) -> None:
        self.state.set_mark(self.clamp_cursor())

    def region(self) -> Optional[Region]:
        """Ordered (start, end) span between mark and cursor, or ``None``.

        The mark is not adjusted by later edits; it is clamped to the current
        buffer extent when the region is computed.
        """

        mark = self.state.mark
        if mark is None or not self.state.mark_active:
            return None
        cursor = self.clamp_cursor()
        anchor = self._clamp_position(mark.position)
        if anchor <= cursor:
            return anchor, cursor
        return cursor, anchor

    def get_region_text(self) -> Optional[bytes]:
        span = self.region()
        if span is None:
            return None
        (start_line, start_col), (end_line, end_col) = span
        if start_line == end_line:
            return self.document.get_line(start_line)[start_col:end_col]
        parts = [self.document.get_line(start_line)[start_col:]]
        parts.extend(
            self.document.get_line(index) for index in range(start_line + 1, end_line)
        )
        parts.append(self.document.get_line(end_line)[:end_col])
        return b"\n".join(parts)

    def copy_region(self, sink: KillRing) -> bool:
        text = self.get_region_text()
        if text is None:
            return False
        sink.store(text)
        self.state.deactivate_mark()
        return True

    def kill_region(self, sink: KillRing) -> bool:
        text = self.get_region_text()
        span = self.region()
        if text is None or span is None:
            return False
        (start_line, start_col), (end_line, end_col) = span
        joined = (
            self.document.get_line(start_line)[:start_col]
            + self.document.get_line(end_line)[end_col:]
        )
        sink.store(text)
        self.document.splice(start_line, end_line + 1, (joined,))
        self.state.set_cursor(start_line, start_col)
        self.state.deactivate_mark()
        self.modified = True
        return True

    # -- search and replace -------------------------------------------------

    def search_forward(self, query: bytes) -> bool:
        """Move to the next literal match of ``query``, wrapping around.

        The scan starts one column past the cursor, continues through the
        following lines, wraps to the top, and finally rescans the cursor
        line from column 0.
        """

        if not query:
            return False
        line, col = self.clamp_cursor()
        count = self.document.line_count

        found = self.document.get_line(line).find(query, col + 1)
        if found >= 0:
            self.state.set_cursor(line, found)
            return True
        for offset in range(1, count):
            index = (line + offset) % count
            found = self.document.get_line(index).find(query)
            if found >= 0:
                self.state.set_cursor(index, found)
                return True
        found = self.document.get_line(line).find(query)
        if found >= 0:
            self.state.set_cursor(line, found)
            return True
        return False

    def replace_all(self, search: bytes, replacement: bytes) -> int:
        if not search:
            return 0
        total = 0
        for index, current in enumerate(self.document.snapshot()):
            occurrences = current.count(search)
            if occurrences:
                self.document.set_line(index, current.replace(search, replacement))
                total += occurrences
        if total:
            self.modified = True
            self.clamp_cursor()
        return total

    # -- whole-buffer content -------------------------------------------------

    def set_text(self, data: bytes) -> None:
        """Replace the content, leaving the cursor at the end like typing would."""

        self.document.replace(data.split(b"\n"))
        last = self.document.line_count - 1
        self.state.set_cursor(last, len(self.document.get_line(last)))
        self.state.top_line = 0
        self.modified = True

    def set_lines(self, lines: Iterable[bytes]) -> None:
        self.document.replace(lines)
        self.state.set_cursor(0, 0)
        self.state.top_line = 0
        self.state.mark = None

    def load_from_file(self, path: str) -> None:
        lines = read_lines(path, max_line_length=self.max_line_length)
        self.set_lines(lines)
        self.filename = path
        self.modified = False

    def save_to_file(self, path: Optional[str] = None) -> int:
        target = path or self.filename
        if not target:
            raise FileIOFailure("Buffer has no file name")
        written = write_lines(target, self.document.snapshot())
        self.filename = target
        self.modified = False
        return written

    # -- subprocess output ----------------------------------------------------

    def append_from_byte_stream(self, data: bytes) -> None:
        """Fold raw terminal output into the last line of the buffer."""

        if not data:
            return
        last = self.document.line_count - 1
        tail = bytearray(self.document.get_line(last))
        finished: list[bytes] = []
        for byte in data:
            if byte == _CR:
                continue
            if byte == LF:
                finished.append(bytes(tail))
                tail = bytearray()
            elif byte in (_BS, _DEL):
                if tail:
                    del tail[-1]
            else:
                tail.append(byte)
        finished.append(bytes(tail))
        self.document.splice(last, last + 1, finished)
        self.move_buffer_end()
        self.modified = True

    # -- motion ---------------------------------------------------------------

    def move_cursor(self, dline: int, dcol: int) -> None:
        line, col = self.state.cursor
        self.state.set_cursor(line + dline, col + dcol)
        self.clamp_cursor()

    def move_left(self) -> None:
        line, col = self.clamp_cursor()
        if col > 0:
            self.state.set_cursor(line, col - 1)
        elif line > 0:
            self.state.set_cursor(line - 1, len(self.document.get_line(line - 1)))

    def move_right(self) -> None:
        line, col = self.clamp_cursor()
        if col < len(self.document.get_line(line)):
            self.state.set_cursor(line, col + 1)
        elif line < self.document.line_count - 1:
            self.state.set_cursor(line + 1, 0)

    def move_line_start(self) -> None:
        line, _ = self.clamp_cursor()
        self.state.set_cursor(line, 0)

    def move_line_end(self) -> None:
        line, _ = self.clamp_cursor()
        self.state.set_cursor(line, len(self.document.get_line(line)))

    def move_buffer_start(self) -> None:
        self.state.set_cursor(0, 0)
        self.state.top_line = 0

    def move_buffer_end(self) -> None:
        last = self.document.line_count - 1
        self.state.set_cursor(last, len(self.document.get_line(last)))

    def page_up(self, rows: int) -> None:
        line, col = self.state.cursor
        self.state.set_cursor(line - rows, col)
        self.state.top_line = max(0, self.state.top_line - rows)
        self.clamp_cursor()

    def page_down(self, rows: int) -> None:
        line, col = self.state.cursor
        self.state.set_cursor(line + rows, col)
        self.state.top_line = min(
            self.state.top_line + rows, self.document.line_count - 1
        )
        self.clamp_cursor()

    def _word_end(self, line: bytes, col: int) -> int:
        while col < len(line) and line[col] == _SPACE:
            col += 1
        while col < len(line) and line[col] != _SPACE:
            col += 1
        return col

    def forward_word(self) -> None:
        line, col = self.clamp_cursor()
        self.state.set_cursor(line, self._word_end(self.document.get_line(line), col))

    def backward_word(self) -> None:
        line, col = self.clamp_cursor()
        current = self.document.get_line(line)
        if col > 0:
            col -= 1
        while col > 0 and current[col] == _SPACE:
            col -= 1
        while col > 0 and current[col - 1] != _SPACE:
            col -= 1
        self.state.set_cursor(line, col)

    def kill_word_forward(self, sink: Optional[KillRing] = None) -> None:
        line, col = self.clamp_cursor()
        current = self.document.get_line(line)
        end = self._word_end(current, col)
        if end == col:
            return
        if sink is not None:
            sink.store(current[col:end])
        self.document.set_line(line, current[:col] + current[end:])
        self.modified = True

    def scroll_to_cursor(self, rows: int) -> int:
        """Adjust ``top_line`` so the cursor row is inside a ``rows``-high view."""

        line, _ = self.clamp_cursor()
        rows = max(1, rows)
        if line < self.state.top_line:
            self.state.top_line = line
        if line >= self.state.top_line + rows:
            self.state.top_line = line - rows + 1
        return self.state.top_line


__all__ = ["TextBuffer"]
