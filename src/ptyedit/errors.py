"""Exception taxonomy shared by buffers, sessions, and the dispatcher."""

from __future__ import annotations


class EditorError(RuntimeError):
    """Base class for recoverable editor failures."""


class FileIOFailure(EditorError):
    """Raised when a buffer cannot be loaded from or saved to disk.

    ``missing`` is set when the path does not exist, which callers opening a
    file treat as "new file" rather than as an error.
    """

    def __init__(
        self, message: str, *, path: str | None = None, missing: bool = False
    ) -> None:
        super().__init__(message)
        self.path = path
        self.missing = missing


class SpawnFailure(EditorError):
    """Raised when a subprocess session cannot be started."""

    def __init__(self, message: str, *, shell_path: str | None = None) -> None:
        super().__init__(message)
        self.shell_path = shell_path


class ChannelFailure(EditorError):
    """Raised when a live session's pty channel reports an unrecoverable error."""


class ScriptError(EditorError):
    """Raised by host functions when a script passes invalid arguments."""


class WorkspaceFullError(EditorError):
    """Raised when the workspace already holds its maximum number of buffers."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"Too many buffers open (limit {limit})")
        self.limit = limit


__all__ = [
    "EditorError",
    "FileIOFailure",
    "SpawnFailure",
    "ChannelFailure",
    "ScriptError",
    "WorkspaceFullError",
]
