"""Integer key codes and their keymap tokens.

Codes 0..255 are raw bytes exactly as a terminal delivers them. Keys that
have no single-byte form use curses-compatible codes above 255, so a curses
frontend can pass ``getch()`` results straight through.
"""

from __future__ import annotations

from typing import Dict

KEY_DOWN = 258
KEY_UP = 259
KEY_LEFT = 260
KEY_RIGHT = 261
KEY_HOME = 262
KEY_BACKSPACE = 263
KEY_F1 = 265
KEY_DC = 330
KEY_NPAGE = 338
KEY_PPAGE = 339
KEY_ENTER = 343
KEY_END = 360
KEY_RESIZE = 410

ESC = 27
DEL = 127
TAB = 9
LF = 10
CR = 13


def ctrl(char: str) -> int:
    """Return the control code for ``char`` (``ctrl("x") == 0x18``)."""

    return ord(char) & 0x1F


_SPECIAL_TOKENS: Dict[int, str] = {
    KEY_DOWN: "DOWN",
    KEY_UP: "UP",
    KEY_LEFT: "LEFT",
    KEY_RIGHT: "RIGHT",
    KEY_HOME: "HOME",
    KEY_END: "END",
    KEY_BACKSPACE: "BACKSPACE",
    KEY_F1: "F1",
    KEY_DC: "DELETE",
    KEY_NPAGE: "PAGEDOWN",
    KEY_PPAGE: "PAGEUP",
    KEY_ENTER: "RET",
    KEY_RESIZE: "RESIZE",
    ESC: "ESC",
    DEL: "DEL",
    TAB: "TAB",
    LF: "RET",
    CR: "RET",
    0: "C-@",
    32: "SPC",
    28: "C-\\",
    29: "C-]",
    30: "C-^",
    31: "C-_",
}


def key_token(code: int) -> str:
    """Render ``code`` as the token used in keymap bindings."""

    special = _SPECIAL_TOKENS.get(code)
    if special is not None:
        return special
    if 1 <= code <= 26:
        return f"C-{chr(code + 96)}"
    if 32 < code < 127:
        return chr(code)
    if 128 <= code <= 255:
        return f"\\x{code:02x}"
    return f"<{code}>"


def is_printable(code: int) -> bool:
    """True for bytes that self-insert into a buffer."""

    return 32 <= code < 256 and code != DEL


def is_enter(code: int) -> bool:
    return code in (LF, CR, KEY_ENTER)


_ARROW_SEQUENCES: Dict[int, bytes] = {
    KEY_UP: b"\x1b[A",
    KEY_DOWN: b"\x1b[B",
    KEY_RIGHT: b"\x1b[C",
    KEY_LEFT: b"\x1b[D",
}


def passthrough_bytes(code: int) -> bytes:
    """Translate a key code into the bytes a terminal program expects.

    Returns ``b""`` for keys that have no byte representation.
    """

    sequence = _ARROW_SEQUENCES.get(code)
    if sequence is not None:
        return sequence
    if code == KEY_BACKSPACE:
        return bytes([DEL])
    if is_enter(code):
        return b"\r"
    if 0 <= code < 256:
        return bytes([code])
    return b""


__all__ = [
    "KEY_DOWN",
    "KEY_UP",
    "KEY_LEFT",
    "KEY_RIGHT",
    "KEY_HOME",
    "KEY_END",
    "KEY_BACKSPACE",
    "KEY_F1",
    "KEY_DC",
    "KEY_NPAGE",
    "KEY_PPAGE",
    "KEY_ENTER",
    "KEY_RESIZE",
    "ESC",
    "DEL",
    "TAB",
    "LF",
    "CR",
    "ctrl",
    "key_token",
    "is_printable",
    "is_enter",
    "passthrough_bytes",
]
