"""Python scripting with a fixed ``editor`` host-function surface."""

from .functions import DEFAULT_HOST_FUNCTIONS, load_default_host_functions
from .host import ScriptHost, ScriptResult
from .registry import HostFunction, HostFunctionRegistry

__all__ = [
    "HostFunction",
    "HostFunctionRegistry",
    "ScriptHost",
    "ScriptResult",
    "DEFAULT_HOST_FUNCTIONS",
    "load_default_host_functions",
]
