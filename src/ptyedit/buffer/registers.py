"""The workspace-wide kill-ring."""

from __future__ import annotations

from typing import Optional


class KillRing:
    """Holds the most recent cut or copied text.

    Only one entry is kept; every store overwrites the previous one.
    """

    def __init__(self, text: Optional[bytes] = None) -> None:
        self._text = text

    @property
    def text(self) -> Optional[bytes]:
        return self._text

    def store(self, text: bytes) -> None:
        self._text = bytes(text)

    def __repr__(self) -> str:
        return f"KillRing({self._text!r})"
