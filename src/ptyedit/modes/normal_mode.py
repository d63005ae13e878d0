"""Normal mode: editing keys, self-insert, and session passthrough."""

from __future__ import annotations

from ptyedit.keys import is_printable, passthrough_bytes
from ptyedit.runtime import telemetry

from .base_mode import KeyInput, Mode, ModeContext, ModeResult
from .keymap_helpers import execute_match, keymap_flag_context, require_keymap_resolver


class NormalMode(Mode):
    name = "normal"

    def __init__(self, context: ModeContext) -> None:
        super().__init__(context)
        self.logger = telemetry.get_logger("ptyedit.modes.normal")
        self._resolver = require_keymap_resolver(context)
        self._flags = keymap_flag_context(context)

    def handle_key(self, key: KeyInput) -> ModeResult:
        result = self._resolver.resolve(self.name, key.token, context=self._flags)
        if result.status == "match" and result.match:
            return execute_match(self.context, result.match)

        if self._flags.get("subprocess_focus"):
            return self._forward(key)

        if is_printable(key.code):
            self.context.buffer.insert_char(key.code)
            self.context.workspace.clear_message()
            return ModeResult(consumed=True, status="insert")

        return ModeResult(consumed=False, status="miss", message="unhandled")

    def _forward(self, key: KeyInput) -> ModeResult:
        session = self.context.buffer.session
        data = passthrough_bytes(key.code)
        if session is None or not data:
            return ModeResult(consumed=False, status="miss", message="untranslatable")
        session.write(data)
        return ModeResult(consumed=True, status="passthrough")
