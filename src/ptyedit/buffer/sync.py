"""Read-only snapshots handed to rendering frontends."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from .state import Cursor


@dataclass(frozen=True, slots=True)
class ViewportMirror:
    """Everything a frontend needs to paint one frame.

    ``lines`` is the visible slice starting at ``top_line``; ``cursor`` is in
    buffer coordinates. ``minibuffer`` is the prompt plus typed input while a
    prompt is open, otherwise ``None``.
    """

    buffer_name: str
    lines: Sequence[bytes]
    top_line: int
    cursor: Cursor
    status: str
    mode: str
    is_subprocess: bool
    modified: bool
    filename: Optional[str]
    buffer_index: int
    buffer_count: int
    minibuffer: Optional[str] = None
    show_help: bool = False

    @property
    def cursor_row(self) -> int:
        """Cursor row relative to the top of the viewport."""

        return self.cursor[0] - self.top_line

    def modeline(self) -> str:
        flag = "**" if self.modified else "--"
        kind = "[shell] " if self.is_subprocess else ""
        line, col = self.cursor
        return (
            f"  {kind}{self.buffer_name:<20}  {flag}  {self.filename or 'no file'}"
            f"  L{line + 1} C{col + 1}  [{self.buffer_index + 1}/{self.buffer_count}]"
        )


class RenderSink(Protocol):
    """Protocol describing how frontends receive frames."""

    def render(self, mirror: ViewportMirror) -> None:
        """Paint ``mirror``; called once per loop iteration."""
        ...
