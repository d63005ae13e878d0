"""Commands reached through the ``C-x`` and ``ESC`` prefixes."""

from __future__ import annotations

from ptyedit.errors import SpawnFailure, WorkspaceFullError
from ptyedit.keymaps import ResolutionMatch
from ptyedit.modes.base_mode import ModeContext, ModeResult
from ptyedit.modes.prompt import PromptCommand, request_prompt
from ptyedit.session import SubprocessSession


def _back_to_normal(status: str = "ok") -> ModeResult:
    return ModeResult(consumed=True, switch_to="normal", status=status)


def spawn_shell(context: ModeContext) -> bool:
    """Open a session running the configured shell and focus it."""

    try:
        SubprocessSession.create(
            context.workspace,
            context.config.shell,
            context.view_rows,
            context.view_cols,
        )
    except WorkspaceFullError:
        context.report("Too many buffers open")
        return False
    except SpawnFailure as exc:
        context.report(str(exc))
        return False
    context.report("Opened shell buffer")
    return True


# -- C-x ---------------------------------------------------------------------


def save_buffer(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.workspace.save_current()
    return _back_to_normal()


def prompt_write_file(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return request_prompt(context, "Write file: ", PromptCommand.WRITE_FILE)


def prompt_find_file(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return request_prompt(context, "Find file: ", PromptCommand.FIND_FILE)


def prompt_switch_buffer(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return request_prompt(context, "Switch to buffer: ", PromptCommand.SWITCH_BUFFER)


def prompt_kill_buffer(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return request_prompt(context, "Kill buffer: ", PromptCommand.KILL_BUFFER)


def open_shell(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    spawn_shell(context)
    return _back_to_normal()


def split_window(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.report("Window splitting not supported")
    return _back_to_normal("unsupported")


# -- ESC ---------------------------------------------------------------------


def prompt_execute_command(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return request_prompt(context, "M-x ", PromptCommand.EXECUTE_COMMAND)


def forward_word(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.forward_word()
    return _back_to_normal()


def backward_word(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.backward_word()
    return _back_to_normal()


def buffer_start(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.move_buffer_start()
    return _back_to_normal()


def buffer_end(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.move_buffer_end()
    return _back_to_normal()


def kill_word(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.kill_word_forward(context.kill_ring)
    return _back_to_normal("edit")


def copy_region(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    if context.buffer.copy_region(context.kill_ring):
        context.report("Region copied")
    else:
        context.report("The mark is not set now")
    return _back_to_normal()


def prompt_replace(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return request_prompt(context, "Replace: ", PromptCommand.REPLACE_SEARCH)


def prompt_search(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return request_prompt(context, "Search: ", PromptCommand.SEARCH_FORWARD)


__all__ = [
    "spawn_shell",
    "save_buffer",
    "prompt_write_file",
    "prompt_find_file",
    "prompt_switch_buffer",
    "prompt_kill_buffer",
    "open_shell",
    "split_window",
    "prompt_execute_command",
    "forward_word",
    "backward_word",
    "buffer_start",
    "buffer_end",
    "kill_word",
    "copy_region",
    "prompt_replace",
    "prompt_search",
]
