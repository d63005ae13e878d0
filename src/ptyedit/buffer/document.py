"""Line storage for text buffers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence


@dataclass(slots=True)
class BufferDocument:
    """Mutable list-of-lines storage that is never empty.

    Each line is a ``bytes`` value without its terminator.
    """

    _lines: List[bytes] = field(default_factory=lambda: [b""])

    def __post_init__(self) -> None:
        if not self._lines:
            self._lines.append(b"")

    @classmethod
    def from_bytes(cls, data: bytes) -> "BufferDocument":
        return cls(_lines=data.split(b"\n"))

    def snapshot(self) -> Sequence[bytes]:
        """Return the current lines without exposing internal mutability."""

        return tuple(self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def get_line(self, index: int) -> bytes:
        return self._lines[index]

    def set_line(self, index: int, value: bytes) -> None:
        self._lines[index] = value

    def splice(self, start: int, end: int, new_lines: Iterable[bytes]) -> None:
        """Replace ``[start:end]`` with ``new_lines``, keeping at least one line."""

        replacement = list(new_lines)
        self._lines[start:end] = replacement
        if not self._lines:
            self._lines.append(b"")

    def replace(self, lines: Iterable[bytes]) -> None:
        self._lines = list(lines) or [b""]

    def join(self) -> bytes:
        return b"\n".join(self._lines)
