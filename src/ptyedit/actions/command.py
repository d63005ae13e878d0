"""The ``M-x`` command table."""

from __future__ import annotations

from typing import Callable, Dict

from ptyedit.modes.base_mode import ModeContext, ModeResult
from ptyedit.scripting import ScriptHost

from .prefix import spawn_shell

CommandHandler = Callable[[ModeContext, str], ModeResult]

EVAL_USAGE = "Usage: M-x eval <python-expr>  e.g.: eval 1+2"


def _finished(status: str) -> ModeResult:
    return ModeResult(consumed=True, switch_to="normal", status=status)


def _script_host(context: ModeContext) -> ScriptHost:
    if context.script_host is None:
        context.script_host = ScriptHost(context.workspace)
    return context.script_host


def _report_script(context: ModeContext, source: str) -> ModeResult:
    result = _script_host(context).evaluate(source)
    if result.success:
        context.report(f"=> {result.text}")
        return _finished("command_eval")
    context.report(result.text)
    return _finished("command_error")


def _handle_open_shell(context: ModeContext, argument: str) -> ModeResult:
    del argument
    spawn_shell(context)
    return _finished("command_open_shell")


def _handle_list_buffers(context: ModeContext, argument: str) -> ModeResult:
    del argument
    context.workspace.list_buffers()
    return _finished("command_list_buffers")


def _handle_eval(context: ModeContext, argument: str) -> ModeResult:
    if not argument.strip():
        context.report(EVAL_USAGE)
        return _finished("command_usage")
    return _report_script(context, argument)


def _handle_eval_buffer(context: ModeContext, argument: str) -> ModeResult:
    del argument
    return _report_script(context, context.buffer.text.decode("latin-1"))


_COMMAND_HANDLERS: Dict[str, CommandHandler] = {
    "open-shell": _handle_open_shell,
    "list-buffers": _handle_list_buffers,
    "eval": _handle_eval,
    "eval-buffer": _handle_eval_buffer,
}


def execute_command(context: ModeContext, line: str) -> ModeResult:
    """Run ``line`` (``name [argument...]``) against the command table."""

    name, _, argument = line.strip().partition(" ")
    handler = _COMMAND_HANDLERS.get(name)
    if handler is None:
        context.report(f"Unknown command: {line.strip()}")
        context.bus.emit("command.error", name)
        return _finished("command_error")
    context.bus.emit("command.submit", name)
    return handler(context, argument)


__all__ = ["execute_command", "EVAL_USAGE"]
