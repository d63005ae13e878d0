"""Single-threaded wait over the keyboard and every live session."""

from __future__ import annotations

import selectors
from typing import TYPE_CHECKING, Optional

from . import telemetry
from .keysource import KeySource

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from ptyedit.workspace import Workspace

_KEYBOARD = "keyboard"


class InputMultiplexer:
    """One ``poll`` call is one step of the editor loop.

    Every session that is ready is drained before a key is returned, so a
    key never overtakes output the child produced at the same instant.
    """

    def __init__(
        self,
        workspace: "Workspace",
        keyboard: KeySource,
        *,
        timeout: Optional[float] = None,
    ) -> None:
        self.workspace = workspace
        self.keyboard = keyboard
        self.timeout = workspace.config.poll_timeout if timeout is None else timeout
        self.logger = telemetry.get_logger("ptyedit.multiplexer")

    def poll(self, timeout: Optional[float] = None) -> Optional[int]:
        wait = self.timeout if timeout is None else timeout
        with selectors.DefaultSelector() as selector:
            selector.register(self.keyboard.fileno(), selectors.EVENT_READ, _KEYBOARD)
            for session in self.workspace.live_sessions():
                selector.register(session.fileno(), selectors.EVENT_READ, session)
            try:
                events = selector.select(wait)
            except InterruptedError:
                return None

        keyboard_ready = False
        for key, _ in events:
            if key.data is _KEYBOARD:
                keyboard_ready = True
                continue
            key.data.drain()

        if not keyboard_ready:
            return None
        return self.keyboard.read_key()


__all__ = ["InputMultiplexer"]
