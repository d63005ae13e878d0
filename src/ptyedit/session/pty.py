"""Pseudo-terminal plumbing: spawn a child on a fresh pty and size it."""

from __future__ import annotations

import fcntl
import os
import pty
import struct
import subprocess
import termios
from typing import Mapping, Optional, Sequence, Tuple


def set_window_size(fd: int, rows: int, cols: int) -> None:
    """Apply ``rows`` x ``cols`` to the terminal behind ``fd``."""

    winsize = struct.pack("HHHH", max(1, rows), max(1, cols), 0, 0)
    fcntl.ioctl(fd, termios.TIOCSWINSZ, winsize)


def _acquire_controlling_tty() -> None:
    # Runs in the child after setsid(); stdin is already the pty slave.
    fcntl.ioctl(0, termios.TIOCSCTTY, 0)


def spawn_on_pty(
    argv: Sequence[str],
    rows: int,
    cols: int,
    *,
    env: Optional[Mapping[str, str]] = None,
) -> Tuple[subprocess.Popen, int]:
    """Start ``argv`` as a session leader attached to a new pty.

    Returns the process handle and the non-blocking master fd. Any
    ``OSError`` from opening the pty or executing ``argv`` propagates with
    both pty ends closed.
    """

    master_fd, slave_fd = pty.openpty()
    try:
        set_window_size(slave_fd, rows, cols)
        child_env = dict(os.environ if env is None else env)
        child_env["TERM"] = "dumb"
        child_env["LINES"] = str(rows)
        child_env["COLUMNS"] = str(cols)
        process = subprocess.Popen(
            list(argv),
            stdin=slave_fd,
            stdout=slave_fd,
            stderr=slave_fd,
            start_new_session=True,
            preexec_fn=_acquire_controlling_tty,
            env=child_env,
            close_fds=True,
        )
    except BaseException:
        os.close(master_fd)
        raise
    finally:
        os.close(slave_fd)
    os.set_blocking(master_fd, False)
    return process, master_fd


__all__ = ["spawn_on_pty", "set_window_size"]
