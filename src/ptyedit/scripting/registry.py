"""Host functions exposed to scripts through the ``editor`` object."""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from types import SimpleNamespace
from typing import Any, Callable, Dict, Iterator, Optional, Tuple

from ptyedit.errors import ScriptError
from ptyedit.workspace import Workspace


@dataclass(frozen=True, slots=True)
class HostFunction:
    """A named callable taking the workspace plus typed positional arguments."""

    name: str
    handler: Callable[..., Any]
    params: Tuple[type, ...] = ()
    description: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("host function name cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")

    def __call__(self, workspace: Workspace, *args: Any) -> Any:
        if len(args) != len(self.params):
            raise ScriptError(
                f"{self.name}() takes {len(self.params)} argument(s), got {len(args)}"
            )
        for position, (value, expected) in enumerate(zip(args, self.params), 1):
            if not isinstance(value, expected):
                raise ScriptError(
                    f"{self.name}() argument {position} must be {expected.__name__}, "
                    f"not {type(value).__name__}"
                )
        return self.handler(workspace, *args)


class HostFunctionRegistry:
    """Name to ``HostFunction`` table, filled once before scripts run."""

    def __init__(self) -> None:
        self._functions: Dict[str, HostFunction] = {}

    def register(self, function: HostFunction, *, replace: bool = False) -> HostFunction:
        if not replace and function.name in self._functions:
            raise ValueError(f"Host function '{function.name}' already registered")
        self._functions[function.name] = function
        return function

    def get(self, name: str) -> Optional[HostFunction]:
        return self._functions.get(name)

    def names(self) -> Tuple[str, ...]:
        return tuple(sorted(self._functions))

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __iter__(self) -> Iterator[HostFunction]:
        return iter(self._functions.values())

    def __len__(self) -> int:
        return len(self._functions)

    def bind(self, workspace: Workspace) -> SimpleNamespace:
        """Build the ``editor`` object scripts see, bound to ``workspace``."""

        return SimpleNamespace(
            **{
                function.name: partial(function, workspace)
                for function in self._functions.values()
            }
        )


__all__ = ["HostFunction", "HostFunctionRegistry"]
