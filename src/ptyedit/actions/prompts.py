"""Continuations run when the minibuffer is submitted."""

from __future__ import annotations

import os
from typing import Callable, Dict

from ptyedit.modes.base_mode import ModeContext, ModeResult
from ptyedit.modes.prompt import Continuation, PromptCommand, request_prompt

from .command import execute_command

ContinuationHandler = Callable[[ModeContext, bytes, Continuation], ModeResult]


def _finished(status: str = "ok") -> ModeResult:
    return ModeResult(consumed=True, switch_to="normal", status=status)


def _text(data: bytes) -> str:
    return data.decode("latin-1")


def _find_file(context: ModeContext, data: bytes, _: Continuation) -> ModeResult:
    if not data:
        context.report("No file name given")
        return _finished("noop")
    context.workspace.open_file(os.path.expanduser(os.fsdecode(data)))
    return _finished()


def _write_file(context: ModeContext, data: bytes, _: Continuation) -> ModeResult:
    if not data:
        context.report("No file name given")
        return _finished("noop")
    context.workspace.write_current(os.path.expanduser(os.fsdecode(data)))
    return _finished()


def _switch_buffer(context: ModeContext, data: bytes, _: Continuation) -> ModeResult:
    if not data:
        return _finished("noop")
    context.workspace.switch_to_buffer(_text(data))
    return _finished()


def _kill_buffer(context: ModeContext, data: bytes, _: Continuation) -> ModeResult:
    context.workspace.kill_buffer_named(_text(data))
    return _finished()


def _execute(context: ModeContext, data: bytes, _: Continuation) -> ModeResult:
    return execute_command(context, _text(data))


def _search(context: ModeContext, data: bytes, _: Continuation) -> ModeResult:
    if context.buffer.search_forward(data):
        context.report(f"Found: {_text(data)}")
    else:
        context.report(f"Search failed: {_text(data)}")
    return _finished()


def _replace_search(context: ModeContext, data: bytes, _: Continuation) -> ModeResult:
    if not data:
        context.report("Nothing to replace")
        return _finished("noop")
    return request_prompt(
        context,
        f"Replace {_text(data)} with: ",
        PromptCommand.REPLACE_WITH,
        payload=data,
    )


def _replace_with(
    context: ModeContext, data: bytes, continuation: Continuation
) -> ModeResult:
    count = context.buffer.replace_all(continuation.payload or b"", data)
    context.report(f"Replaced {count} occurrence{'s' if count != 1 else ''}")
    return _finished()


_CONTINUATIONS: Dict[PromptCommand, ContinuationHandler] = {
    PromptCommand.FIND_FILE: _find_file,
    PromptCommand.WRITE_FILE: _write_file,
    PromptCommand.SWITCH_BUFFER: _switch_buffer,
    PromptCommand.KILL_BUFFER: _kill_buffer,
    PromptCommand.EXECUTE_COMMAND: _execute,
    PromptCommand.SEARCH_FORWARD: _search,
    PromptCommand.REPLACE_SEARCH: _replace_search,
    PromptCommand.REPLACE_WITH: _replace_with,
}


def resolve_continuation(
    context: ModeContext, continuation: Continuation, data: bytes
) -> ModeResult:
    handler = _CONTINUATIONS[continuation.command]
    return handler(context, data, continuation)


__all__ = ["resolve_continuation"]
