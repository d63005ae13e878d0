"""Cursor, mark, and viewport state for buffers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

Cursor = Tuple[int, int]  # (line, column)
Region = Tuple[Cursor, Cursor]


@dataclass(slots=True)
class Mark:
    position: Cursor
    active: bool = True


@dataclass(slots=True)
class BufferState:
    """Mutable cursor + mark info tied to a BufferDocument."""

    cursor: Cursor = (0, 0)
    mark: Optional[Mark] = None
    top_line: int = 0

    def set_cursor(self, line: int, col: int) -> None:
        self.cursor = (line, col)

    def set_mark(self, position: Cursor) -> None:
        self.mark = Mark(position=position)

    def deactivate_mark(self) -> None:
        if self.mark is not None:
            self.mark.active = False

    @property
    def mark_active(self) -> bool:
        return self.mark is not None and self.mark.active
