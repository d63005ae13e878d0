"""Dispatch modes and the shared mode plumbing.

:class:`~ptyedit.modes.dispatcher.KeyDispatcher` lives in its own module
because it loads the default keymaps, which import the action modules.
"""

from .base_mode import KeyInput, Mode, ModeBus, ModeContext, ModeResult
from .prompt import Continuation, MinibufferState, PromptCommand, request_prompt
from .normal_mode import NormalMode
from .prefix_mode import PrefixAMode, PrefixBMode, PrefixMode
from .minibuffer_mode import MinibufferMode

__all__ = [
    "KeyInput",
    "Mode",
    "ModeBus",
    "ModeContext",
    "ModeResult",
    "Continuation",
    "MinibufferState",
    "PromptCommand",
    "request_prompt",
    "NormalMode",
    "PrefixMode",
    "PrefixAMode",
    "PrefixBMode",
    "MinibufferMode",
]
