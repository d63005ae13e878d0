"""Subprocess-backed buffers and pty helpers."""

from .pty import set_window_size, spawn_on_pty
from .subprocess_session import EXIT_NOTICE, SubprocessSession

__all__ = ["SubprocessSession", "EXIT_NOTICE", "spawn_on_pty", "set_window_size"]
