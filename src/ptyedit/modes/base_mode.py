"""Base classes and shared utilities for dispatch modes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Dict, Optional

from ptyedit.buffer import KillRing, TextBuffer
from ptyedit.config import EditorConfig
from ptyedit.keys import key_token
from ptyedit.workspace import Workspace

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from ptyedit.scripting import ScriptHost

    from .prompt import MinibufferState


@dataclass(slots=True)
class KeyInput:
    """One key code as delivered by the multiplexer."""

    code: int

    @property
    def token(self) -> str:
        return key_token(self.code)


@dataclass(slots=True)
class ModeResult:
    """Result returned from ``Mode.handle_key``."""

    consumed: bool
    switch_to: Optional[str] = None
    status: str = "ok"
    message: Optional[str] = None


@dataclass(slots=True)
class ModeContext:
    """Shared services every mode and action can reach."""

    workspace: Workspace
    bus: "ModeBus"
    config: EditorConfig = field(default_factory=EditorConfig)
    script_host: Optional["ScriptHost"] = None
    minibuffer: Optional["MinibufferState"] = None
    view_rows: int = 24
    view_cols: int = 80
    extras: Dict[str, object] = field(default_factory=dict)

    @property
    def buffer(self) -> TextBuffer:
        return self.workspace.current

    @property
    def kill_ring(self) -> KillRing:
        return self.workspace.kill_ring

    def report(self, message: str) -> None:
        self.workspace.set_message(message)


class ModeBus:
    """Minimal event bus letting modes exchange structured signals."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in self._subscribers.get(event, []):
            callback(payload)


class Mode:
    """Base class all dispatch modes inherit from."""

    name: str = "mode"

    def __init__(self, context: ModeContext) -> None:
        self.context = context

    def on_enter(
        self, previous: Optional[str]
    ) -> None:  # pragma: no cover - default no-op
        del previous

    def on_exit(
        self, next_mode: Optional[str]
    ) -> None:  # pragma: no cover - default no-op
        del next_mode

    def handle_key(
        self, key: KeyInput
    ) -> ModeResult:  # pragma: no cover - abstract override
        raise NotImplementedError


__all__ = ["KeyInput", "ModeResult", "ModeContext", "ModeBus", "Mode"]
