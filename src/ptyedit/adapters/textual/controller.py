"""Textual-facing glue: key translation, byte rendering and frame hooks.

Nothing here imports textual, so the translation tables can be exercised
without a running app.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from ptyedit import keys
from ptyedit.buffer import ViewportMirror
from ptyedit.editor import Editor
from ptyedit.runtime.keysource import PipeKeySource

TAB_WIDTH = 8

_NAMED_KEYS: Dict[str, int] = {
    "up": keys.KEY_UP,
    "down": keys.KEY_DOWN,
    "left": keys.KEY_LEFT,
    "right": keys.KEY_RIGHT,
    "home": keys.KEY_HOME,
    "end": keys.KEY_END,
    "pageup": keys.KEY_PPAGE,
    "pagedown": keys.KEY_NPAGE,
    "delete": keys.KEY_DC,
    "backspace": keys.KEY_BACKSPACE,
    "enter": keys.CR,
    "tab": keys.TAB,
    "escape": keys.ESC,
    "f1": keys.KEY_F1,
    "space": 32,
    "ctrl+@": 0,
    "ctrl+space": 0,
    "ctrl+backslash": 28,
    "ctrl+right_square_bracket": 29,
    "ctrl+circumflex_accent": 30,
    "ctrl+underscore": 31,
}


def translate_key(key: str, character: Optional[str] = None) -> Tuple[int, ...]:
    """Map a Textual key event to the editor's key codes.

    ``alt+<key>`` becomes ``ESC`` followed by the key, the way a terminal
    sends meta. Unknown keys translate to an empty tuple.
    """

    if character is None and len(key) == 1:
        character = key
    if key.startswith("alt+"):
        rest = translate_key(key[4:], character)
        return (keys.ESC, *rest) if rest else ()
    named = _NAMED_KEYS.get(key)
    if named is not None:
        return (named,)
    if key.startswith("ctrl+") and len(key) == 6:
        letter = key[5]
        if "a" <= letter <= "z":
            return (keys.ctrl(letter),)
    if character and len(character) == 1 and ord(character) < 256:
        return (ord(character),)
    return ()


def display_line(line: bytes) -> str:
    """Render one buffer line as text: tabs expanded, controls as ``^X``."""

    parts = []
    column = 0
    for byte in line:
        if byte == keys.TAB:
            pad = TAB_WIDTH - (column % TAB_WIDTH)
            parts.append(" " * pad)
            column += pad
        elif byte < 32 or byte == keys.DEL:
            parts.append("^" + chr(byte ^ 0x40))
            column += 2
        else:
            parts.append(chr(byte))
            column += 1
    return "".join(parts)


def display_column(line: bytes, col: int) -> int:
    """Screen column of byte offset ``col`` once ``line`` is rendered."""

    return len(display_line(line[:col]))


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    render: Callable[[ViewportMirror], None]
    handle_event: Callable[[str, object | None], None] = _noop
    request_exit: Callable[[], None] = _noop


class TextualEditorAdapter:
    """Feeds Textual key events into the editor and publishes frames."""

    def __init__(self, editor: Editor, hooks: TextualUIHooks) -> None:
        if not isinstance(editor.keyboard, PipeKeySource):
            raise TypeError("the Textual adapter needs a PipeKeySource keyboard")
        self.editor = editor
        self.hooks = hooks
        self.keyboard: PipeKeySource = editor.keyboard
        self._subscribe_events()
        self.refresh()

    def handle_textual_key(self, key: str, character: Optional[str] = None) -> bool:
        """Queue one Textual key; return whether it mapped to any code."""

        codes = translate_key(key, character)
        if not codes:
            return False
        self.keyboard.extend(codes)
        self.pump()
        return True

    def handle_resize(self, rows: int, cols: int) -> None:
        self.editor.resize(rows, cols)
        self.keyboard.push(keys.KEY_RESIZE)
        self.pump()

    def pump(self) -> None:
        """Drain pending session output and queued keys, then render."""

        self.editor.pump()
        self.refresh()
        if not self.editor.running:
            self.editor.shutdown()
            self.hooks.request_exit()

    def refresh(self) -> None:
        self.hooks.render(self.editor.snapshot())

    def _subscribe_events(self) -> None:
        bus = self.editor.dispatcher.bus
        for event in ("command.submit", "command.error", "editor.quit"):
            bus.subscribe(
                event, lambda payload, name=event: self.hooks.handle_event(name, payload)
            )


__all__ = [
    "TextualEditorAdapter",
    "TextualUIHooks",
    "translate_key",
    "display_line",
    "display_column",
]
