"""Editor commands invoked through keymap bindings."""

from . import command, core, editing, minibuffer, prefix, prompts
from .command import execute_command
from .prompts import resolve_continuation

__all__ = [
    "command",
    "core",
    "editing",
    "minibuffer",
    "prefix",
    "prompts",
    "execute_command",
    "resolve_continuation",
]
