"""Line-oriented text buffers, the kill-ring, and viewport snapshots."""

from .buffer import TextBuffer
from .document import BufferDocument
from .files import DEFAULT_MAX_LINE_LENGTH, read_lines, write_lines
from .registers import KillRing
from .state import BufferState, Cursor, Mark, Region
from .sync import RenderSink, ViewportMirror

__all__ = [
    "BufferDocument",
    "BufferState",
    "Cursor",
    "Mark",
    "Region",
    "KillRing",
    "TextBuffer",
    "ViewportMirror",
    "RenderSink",
    "read_lines",
    "write_lines",
    "DEFAULT_MAX_LINE_LENGTH",
]
