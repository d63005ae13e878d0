"""The two one-key prefix states entered by ``C-x`` and ``ESC``."""

from __future__ import annotations

from ptyedit.runtime import telemetry

from .base_mode import KeyInput, Mode, ModeContext, ModeResult
from .keymap_helpers import execute_match, keymap_flag_context, require_keymap_resolver


class PrefixMode(Mode):
    """Waits for exactly one key, runs its binding, then leaves.

    Any key without a binding reports ``undefined_message`` and returns to
    normal mode; nothing is inserted.
    """

    name = "prefix"
    undefined_message = "{key} is undefined"

    def __init__(self, context: ModeContext) -> None:
        super().__init__(context)
        self.logger = telemetry.get_logger(f"ptyedit.modes.{self.name}")
        self._resolver = require_keymap_resolver(context)
        self._flags = keymap_flag_context(context)

    def handle_key(self, key: KeyInput) -> ModeResult:
        result = self._resolver.resolve(self.name, key.token, context=self._flags)
        if result.status == "match" and result.match:
            outcome = execute_match(self.context, result.match)
            if outcome.switch_to is None:
                outcome.switch_to = "normal"
            return outcome

        self.context.report(self.undefined_message.format(key=key.token))
        return ModeResult(
            consumed=True, switch_to="normal", status="miss", message="undefined"
        )


class PrefixAMode(PrefixMode):
    name = "prefix_a"
    undefined_message = "C-x {key} is undefined"


class PrefixBMode(PrefixMode):
    name = "prefix_b"
    undefined_message = "M-{key} is undefined"


__all__ = ["PrefixMode", "PrefixAMode", "PrefixBMode"]
