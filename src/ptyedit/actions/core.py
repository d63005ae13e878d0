"""Mode transitions shared by every keymap."""

from __future__ import annotations

from ptyedit.keymaps import ResolutionMatch
from ptyedit.modes.base_mode import ModeContext, ModeResult


def enter_prefix_a(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.report("C-x-")
    return ModeResult(consumed=True, switch_to="prefix_a", message="enter_prefix_a")


def enter_prefix_b(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.report("ESC-")
    return ModeResult(consumed=True, switch_to="prefix_b", message="enter_prefix_b")


def cancel(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """Drop any prefix or prompt without running its continuation."""

    del match
    context.minibuffer = None
    context.report("Quit")
    return ModeResult(consumed=True, switch_to="normal", status="cancel")


def quit_editor(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.bus.emit("editor.quit", None)
    return ModeResult(consumed=True, switch_to="normal", status="quit")


__all__ = ["enter_prefix_a", "enter_prefix_b", "cancel", "quit_editor"]
