"""Key sources the multiplexer can wait on."""

from __future__ import annotations

import os
from collections import deque
from contextlib import suppress
from typing import Deque, Iterable, Optional, Protocol


class KeySource(Protocol):
    """A readable descriptor plus a way to take one pending key from it."""

    def fileno(self) -> int:
        ...

    def read_key(self) -> Optional[int]:
        ...


class PipeKeySource:
    """Queue of key codes whose readiness is signalled through a self-pipe.

    Frontends that receive keys on another event loop push them here; the
    pipe's read end becomes readable whenever at least one key is queued.
    """

    def __init__(self) -> None:
        self._queue: Deque[int] = deque()
        self._read_fd, self._write_fd = os.pipe()
        os.set_blocking(self._read_fd, False)
        os.set_blocking(self._write_fd, False)
        self.closed = False

    def fileno(self) -> int:
        return self._read_fd

    def push(self, code: int) -> None:
        if self.closed:
            raise ValueError("key source is closed")
        self._queue.append(int(code))
        with suppress(BlockingIOError):
            os.write(self._write_fd, b"\0")

    def extend(self, codes: Iterable[int]) -> None:
        for code in codes:
            self.push(code)

    def pending(self) -> int:
        return len(self._queue)

    def read_key(self) -> Optional[int]:
        """Pop the oldest key, or ``None`` when nothing is queued."""

        self._drain_pipe()
        if not self._queue:
            return None
        code = self._queue.popleft()
        if self._queue:
            # keep the pipe readable while keys remain
            with suppress(BlockingIOError):
                os.write(self._write_fd, b"\0")
        return code

    def _drain_pipe(self) -> None:
        while True:
            try:
                chunk = os.read(self._read_fd, 4096)
            except BlockingIOError:
                return
            if not chunk:
                return

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        for fd in (self._read_fd, self._write_fd):
            with suppress(OSError):
                os.close(fd)

    def __enter__(self) -> "PipeKeySource":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = ["KeySource", "PipeKeySource"]
