"""Prompt input with a bounded line and a pending continuation."""

from __future__ import annotations

from ptyedit.runtime import telemetry

from .base_mode import KeyInput, Mode, ModeContext, ModeResult
from .keymap_helpers import execute_match, keymap_flag_context, require_keymap_resolver

_FIRST_PRINTABLE = 32
_LAST_PRINTABLE = 126


class MinibufferMode(Mode):
    name = "minibuffer"

    def __init__(self, context: ModeContext) -> None:
        super().__init__(context)
        self.logger = telemetry.get_logger("ptyedit.modes.minibuffer")
        self._resolver = require_keymap_resolver(context)
        self._flags = keymap_flag_context(context)

    def on_exit(self, next_mode: str | None) -> None:
        del next_mode
        self.context.minibuffer = None

    def handle_key(self, key: KeyInput) -> ModeResult:
        result = self._resolver.resolve(self.name, key.token, context=self._flags)
        if result.status == "match" and result.match:
            outcome = execute_match(self.context, result.match)
            if outcome.switch_to == self.name:
                # a continuation opened a follow-up prompt
                outcome.switch_to = None
            return outcome

        state = self.context.minibuffer
        if state is None:
            return ModeResult(consumed=True, switch_to="normal", status="noop")
        if _FIRST_PRINTABLE <= key.code <= _LAST_PRINTABLE:
            if not state.append(key.code):
                return ModeResult(consumed=True, status="full")
            return ModeResult(consumed=True, status="editing")
        return ModeResult(consumed=True, status="ignored")


__all__ = ["MinibufferMode"]
