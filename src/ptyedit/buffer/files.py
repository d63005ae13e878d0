"""Line-oriented file loading and saving."""

from __future__ import annotations

from typing import Iterable, Iterator, List

from ptyedit.errors import FileIOFailure
from ptyedit.runtime import telemetry

DEFAULT_MAX_LINE_LENGTH = 4096


def _split_long_line(content: bytes, limit: int) -> Iterator[bytes]:
    if len(content) <= limit:
        yield content
        return
    for offset in range(0, len(content), limit):
        yield content[offset : offset + limit]


def read_lines(path: str, *, max_line_length: int = DEFAULT_MAX_LINE_LENGTH) -> List[bytes]:
    """Read ``path`` into a list of terminator-stripped lines.

    Lines longer than ``max_line_length`` are split into consecutive chunks.
    An empty file yields a single empty line.
    """

    with telemetry.span(
        "files::read",
        component="files",
        metadata={"path": path},
    ) as handle:
        lines: List[bytes] = []
        try:
            with open(path, "rb") as stream:
                for raw in stream:
                    if raw.endswith(b"\n"):
                        raw = raw[:-1]
                    lines.extend(_split_long_line(raw, max_line_length))
        except FileNotFoundError as exc:
            raise FileIOFailure(
                f"No such file: {path}", path=path, missing=True
            ) from exc
        except OSError as exc:
            raise FileIOFailure(
                f"Cannot read {path}: {exc.strerror or exc}", path=path
            ) from exc
        handle.add_metadata("lines", len(lines))

    return lines or [b""]


def write_lines(path: str, lines: Iterable[bytes]) -> int:
    """Write every line followed by one terminator; return bytes written."""

    with telemetry.span(
        "files::write",
        component="files",
        metadata={"path": path},
    ):
        payload = b"".join(line + b"\n" for line in lines)
        try:
            with open(path, "wb") as stream:
                stream.write(payload)
        except OSError as exc:
            raise FileIOFailure(
                f"Cannot write {path}: {exc.strerror or exc}", path=path
            ) from exc
    return len(payload)


__all__ = ["read_lines", "write_lines", "DEFAULT_MAX_LINE_LENGTH"]
