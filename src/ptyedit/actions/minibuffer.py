"""Line editing inside the minibuffer."""

from __future__ import annotations

from ptyedit.keymaps import ResolutionMatch
from ptyedit.modes.base_mode import ModeContext, ModeResult

from .prompts import resolve_continuation


def submit(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """Close the prompt and hand its input to the pending continuation."""

    del match
    state = context.minibuffer
    context.minibuffer = None
    if state is None:
        return ModeResult(consumed=True, switch_to="normal", status="noop")
    context.workspace.clear_message()
    return resolve_continuation(context, state.continuation, state.input)


def backspace(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    if context.minibuffer is not None:
        context.minibuffer.backspace()
    return ModeResult(consumed=True, status="editing")


__all__ = ["submit", "backspace"]
