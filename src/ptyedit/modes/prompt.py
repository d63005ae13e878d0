"""Minibuffer prompt state and the continuations that consume its input."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .base_mode import ModeContext, ModeResult


class PromptCommand(str, Enum):
    """What to do with the text typed into the minibuffer."""

    FIND_FILE = "find_file"
    WRITE_FILE = "write_file"
    SWITCH_BUFFER = "switch_buffer"
    KILL_BUFFER = "kill_buffer"
    EXECUTE_COMMAND = "execute_command"
    SEARCH_FORWARD = "search_forward"
    REPLACE_SEARCH = "replace_search"
    REPLACE_WITH = "replace_with"


@dataclass(frozen=True, slots=True)
class Continuation:
    """Pending prompt action; ``payload`` carries earlier stage input."""

    command: PromptCommand
    payload: Optional[bytes] = None


@dataclass(slots=True)
class MinibufferState:
    prompt: str
    continuation: Continuation
    limit: int = 510
    text: bytearray = field(default_factory=bytearray)

    def append(self, byte: int) -> bool:
        if len(self.text) >= self.limit:
            return False
        self.text.append(byte)
        return True

    def backspace(self) -> None:
        if self.text:
            del self.text[-1]

    @property
    def input(self) -> bytes:
        return bytes(self.text)

    def render(self) -> str:
        return self.prompt + self.input.decode("latin-1")


def request_prompt(
    context: ModeContext,
    prompt: str,
    command: PromptCommand,
    payload: Optional[bytes] = None,
) -> ModeResult:
    """Open the minibuffer with ``prompt``; Enter resolves ``command``."""

    context.minibuffer = MinibufferState(
        prompt=prompt,
        continuation=Continuation(command, payload),
        limit=context.config.minibuffer_max_length,
    )
    return ModeResult(consumed=True, switch_to="minibuffer", status="prompt")


__all__ = ["PromptCommand", "Continuation", "MinibufferState", "request_prompt"]
