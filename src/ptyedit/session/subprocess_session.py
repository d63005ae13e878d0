"""Buffers backed by an interactive child process on a pseudo-terminal."""

from __future__ import annotations

import os
import signal
import subprocess
from contextlib import suppress
from typing import TYPE_CHECKING, Optional

from ptyedit.buffer import TextBuffer
from ptyedit.errors import ChannelFailure, SpawnFailure
from ptyedit.runtime import telemetry

from .pty import set_window_size, spawn_on_pty

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from ptyedit.workspace import Workspace

READ_CHUNK_SIZE = 4096
MAX_WRITE_RETRIES = 64
EXIT_NOTICE = b"\n[Process exited]\n"


class SubprocessSession:
    """Owns a child process, its pty master fd, and the buffer it writes to.

    The session is alive while the master fd is open. Death is only noticed
    by ``drain`` (end-of-stream or a read error), never asynchronously.
    """

    def __init__(
        self,
        buffer: TextBuffer,
        process: subprocess.Popen,
        master_fd: int,
        *,
        shell_path: str,
    ) -> None:
        self.buffer = buffer
        self.shell_path = shell_path
        self._process: Optional[subprocess.Popen] = process
        self._fd: Optional[int] = master_fd
        self.logger = telemetry.get_logger("ptyedit.session")
        buffer.session = self

    @classmethod
    def create(
        cls,
        workspace: "Workspace",
        shell_path: str,
        rows: int,
        cols: int,
    ) -> "SubprocessSession":
        """Spawn ``shell_path`` into a new workspace buffer and focus it.

        Raises ``WorkspaceFullError`` when no buffer slot is free and
        ``SpawnFailure`` when the child cannot be started; in both cases the
        workspace is left exactly as it was.
        """

        buffer = workspace.new_buffer(workspace.next_session_name())
        with telemetry.span(
            "session::spawn",
            component="session",
            metadata={"shell": shell_path, "buffer": buffer.name},
        ):
            try:
                process, master_fd = spawn_on_pty([shell_path], rows, cols)
            except (OSError, subprocess.SubprocessError) as exc:
                workspace.discard_buffer(buffer)
                reason = getattr(exc, "strerror", None) or str(exc)
                telemetry.record_event(
                    "session.spawn_failed",
                    level="warning",
                    data={"shell": shell_path, "reason": reason},
                )
                raise SpawnFailure(
                    f"Cannot start {shell_path}: {reason}", shell_path=shell_path
                ) from exc

        session = cls(buffer, process, master_fd, shell_path=shell_path)
        workspace.focus(buffer)
        telemetry.record_event(
            "session.spawned",
            data={"buffer": buffer.name, "pid": process.pid, "shell": shell_path},
        )
        return session

    @property
    def alive(self) -> bool:
        return self._fd is not None

    @property
    def pid(self) -> Optional[int]:
        if self._process is None:
            return None
        return self._process.pid

    def fileno(self) -> int:
        if self._fd is None:
            raise ValueError(f"session for {self.buffer.name} is closed")
        return self._fd

    def write(self, data: bytes) -> int:
        """Send ``data`` to the child; return how many bytes were accepted.

        Transient conditions are retried a bounded number of times, after
        which the remainder is dropped without telling the caller.
        """

        if self._fd is None or not data:
            return 0
        view = memoryview(data)
        written = 0
        retries = 0
        while written < len(data):
            try:
                written += os.write(self._fd, view[written:])
            except (BlockingIOError, InterruptedError):
                retries += 1
                if retries > MAX_WRITE_RETRIES:
                    break
            except OSError as exc:
                self.logger.debug(f"session write failed: {exc}")
                break
        if written < len(data):
            self.logger.debug(
                f"session {self.buffer.name} dropped {len(data) - written} bytes"
            )
        return written

    def _read_chunk(self) -> Optional[bytes]:
        if self._fd is None:
            raise ChannelFailure("channel closed")
        try:
            return os.read(self._fd, READ_CHUNK_SIZE)
        except BlockingIOError:
            return None
        except OSError as exc:
            raise ChannelFailure(str(exc)) from exc

    def drain(self) -> int:
        """Move all pending child output into the buffer; return bytes read."""

        total = 0
        while self._fd is not None:
            try:
                chunk = self._read_chunk()
            except ChannelFailure as exc:
                self._mark_dead(f"read error: {exc}")
                break
            if chunk is None:
                break
            if not chunk:
                self._mark_dead("end of stream")
                break
            total += len(chunk)
            self.buffer.append_from_byte_stream(chunk)
        return total

    def _mark_dead(self, reason: str) -> None:
        self.buffer.append_from_byte_stream(EXIT_NOTICE)
        self._close_channel()
        status = self._reap()
        telemetry.record_event(
            "session.exited",
            data={"buffer": self.buffer.name, "reason": reason, "status": status},
        )

    def _close_channel(self) -> None:
        if self._fd is None:
            return
        with suppress(OSError):
            os.close(self._fd)
        self._fd = None

    def _reap(self) -> Optional[int]:
        process, self._process = self._process, None
        if process is None:
            return None
        return process.poll()

    def resize(self, rows: int, cols: int) -> None:
        if self._fd is None:
            return
        with suppress(OSError):
            set_window_size(self._fd, rows, cols)
        pid = self.pid
        if pid is not None:
            with suppress(ProcessLookupError):
                os.kill(pid, signal.SIGWINCH)

    def terminate(self) -> None:
        """Send SIGTERM and close the channel without waiting for exit."""

        pid = self.pid
        if pid is not None:
            with suppress(ProcessLookupError):
                os.kill(pid, signal.SIGTERM)
        self._close_channel()
        self._reap()

    def __repr__(self) -> str:
        state = "alive" if self.alive else "dead"
        return f"SubprocessSession({self.buffer.name!r}, pid={self.pid}, {state})"


__all__ = ["SubprocessSession", "EXIT_NOTICE", "READ_CHUNK_SIZE"]
