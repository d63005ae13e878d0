"""The fixed ``editor`` surface: buffer queries, edits and kill-ring access."""

from __future__ import annotations

import os
from typing import List

from ptyedit.errors import WorkspaceFullError
from ptyedit.workspace import Workspace

from .registry import HostFunction, HostFunctionRegistry


def _to_bytes(text: str) -> bytes:
    return text.encode("latin-1", errors="replace")


def _to_text(data: bytes) -> str:
    return data.decode("latin-1")


def report_message(workspace: Workspace, text: str) -> None:
    workspace.set_message(text)


def get_current_buffer_name(workspace: Workspace) -> str:
    return workspace.current.name


def list_buffer_names(workspace: Workspace) -> List[str]:
    return [buffer.name for buffer in workspace]


def switch_to_buffer(workspace: Workspace, name: str) -> bool:
    return workspace.switch_to_buffer(name) is not None


def create_buffer(workspace: Workspace, name: str) -> bool:
    try:
        workspace.new_buffer(name)
    except WorkspaceFullError as exc:
        workspace.set_message(str(exc))
        return False
    return True


def insert_text(workspace: Workspace, text: str) -> None:
    workspace.current.insert_bytes(_to_bytes(text))


def get_buffer_content(workspace: Workspace) -> str:
    return _to_text(workspace.current.text)


def set_buffer_content(workspace: Workspace, text: str) -> None:
    workspace.current.set_text(_to_bytes(text))


def open_file(workspace: Workspace, path: str) -> bool:
    return workspace.open_file(os.path.expanduser(path)) is not None


def save_current_buffer(workspace: Workspace) -> bool:
    return workspace.save_current()


def get_cursor_line(workspace: Workspace) -> int:
    line, _ = workspace.current.clamp_cursor()
    return line + 1


def get_cursor_column(workspace: Workspace) -> int:
    _, col = workspace.current.clamp_cursor()
    return col + 1


def set_mark(workspace: Workspace) -> None:
    workspace.current.set_mark()


def copy_region_to_kill_ring(workspace: Workspace) -> bool:
    return workspace.current.copy_region(workspace.kill_ring)


def kill_region_to_kill_ring(workspace: Workspace) -> bool:
    return workspace.current.kill_region(workspace.kill_ring)


def yank_from_kill_ring(workspace: Workspace) -> None:
    workspace.current.yank(workspace.kill_ring.text)


def search_forward(workspace: Workspace, query: str) -> bool:
    return workspace.current.search_forward(_to_bytes(query))


def replace_all(workspace: Workspace, search: str, replacement: str) -> int:
    return workspace.current.replace_all(_to_bytes(search), _to_bytes(replacement))


DEFAULT_HOST_FUNCTIONS: tuple[HostFunction, ...] = (
    HostFunction("report_message", report_message, (str,), "Show text in the status line"),
    HostFunction("get_current_buffer_name", get_current_buffer_name),
    HostFunction("list_buffer_names", list_buffer_names),
    HostFunction("switch_to_buffer", switch_to_buffer, (str,)),
    HostFunction("create_buffer", create_buffer, (str,)),
    HostFunction("insert_text", insert_text, (str,), "Insert at the cursor"),
    HostFunction("get_buffer_content", get_buffer_content),
    HostFunction("set_buffer_content", set_buffer_content, (str,)),
    HostFunction("open_file", open_file, (str,)),
    HostFunction("save_current_buffer", save_current_buffer),
    HostFunction("get_cursor_line", get_cursor_line, (), "1-based cursor line"),
    HostFunction("get_cursor_column", get_cursor_column, (), "1-based cursor column"),
    HostFunction("set_mark", set_mark),
    HostFunction("copy_region_to_kill_ring", copy_region_to_kill_ring),
    HostFunction("kill_region_to_kill_ring", kill_region_to_kill_ring),
    HostFunction("yank_from_kill_ring", yank_from_kill_ring),
    HostFunction("search_forward", search_forward, (str,)),
    HostFunction("replace_all", replace_all, (str, str)),
)


def load_default_host_functions(
    registry: HostFunctionRegistry, *, replace: bool = False
) -> HostFunctionRegistry:
    for function in DEFAULT_HOST_FUNCTIONS:
        registry.register(function, replace=replace)
    return registry


__all__ = ["DEFAULT_HOST_FUNCTIONS", "load_default_host_functions"]
