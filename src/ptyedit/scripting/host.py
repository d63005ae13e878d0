"""Evaluates Python source against the editor's host-function surface."""

from __future__ import annotations

import builtins
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ptyedit.runtime import telemetry
from ptyedit.workspace import Workspace

from .functions import load_default_host_functions
from .registry import HostFunctionRegistry

DEFAULT_RESULT_LIMIT = 511


@dataclass(frozen=True, slots=True)
class ScriptResult:
    success: bool
    text: str


class ScriptHost:
    """Runs scripts in one persistent namespace holding ``editor``.

    Source that parses as an expression is evaluated and its value rendered
    with ``str``; anything else is executed as statements and yields ``""``.
    Failures never propagate: they come back as ``Error: <message>``.
    """

    def __init__(
        self,
        workspace: Workspace,
        *,
        registry: Optional[HostFunctionRegistry] = None,
        result_limit: int = DEFAULT_RESULT_LIMIT,
    ) -> None:
        self.workspace = workspace
        self.registry = registry or load_default_host_functions(HostFunctionRegistry())
        self.result_limit = result_limit
        self.namespace: Dict[str, Any] = {
            "__builtins__": builtins,
            "__name__": "__ptyedit__",
            "editor": self.registry.bind(workspace),
        }
        self.logger = telemetry.get_logger("ptyedit.scripting")

    def evaluate(self, source: str) -> ScriptResult:
        with telemetry.span(
            "scripting::evaluate",
            component="scripting",
            metadata={"length": len(source)},
        ):
            try:
                text = self._run(source)
            except (Exception, SystemExit) as exc:
                message = str(exc) or type(exc).__name__
                telemetry.record_event(
                    "script.error",
                    level="warning",
                    data={"error": type(exc).__name__, "message": message},
                )
                return ScriptResult(False, self._clip(f"Error: {message}"))
        return ScriptResult(True, self._clip(text))

    def _run(self, source: str) -> str:
        try:
            code = compile(source, "<eval>", "eval")
        except SyntaxError:
            exec(compile(source, "<eval>", "exec"), self.namespace)
            return ""
        value = eval(code, self.namespace)
        return "" if value is None else str(value)

    def _clip(self, text: str) -> str:
        return text[: self.result_limit]


__all__ = ["ScriptHost", "ScriptResult"]
