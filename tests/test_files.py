from __future__ import annotations

import os

import pytest

from ptyedit.buffer import TextBuffer, read_lines, write_lines
from ptyedit.errors import FileIOFailure


def test_load_strips_terminators(tmp_path) -> None:
    path = tmp_path / "notes.txt"
    path.write_bytes(b"first\nsecond\n")
    buffer = TextBuffer("notes.txt")
    buffer.modified = True

    buffer.load_from_file(str(path))

    assert buffer.lines == (b"first", b"second")
    assert buffer.filename == str(path)
    assert buffer.modified is False
    assert buffer.cursor == (0, 0)


def test_load_keeps_last_line_without_newline(tmp_path) -> None:
    path = tmp_path / "tail.txt"
    path.write_bytes(b"a\nb")

    assert read_lines(str(path)) == [b"a", b"b"]


def test_empty_file_yields_single_empty_line(tmp_path) -> None:
    path = tmp_path / "empty.txt"
    path.write_bytes(b"")

    assert read_lines(str(path)) == [b""]


def test_long_lines_are_chunked(tmp_path) -> None:
    path = tmp_path / "wide.txt"
    path.write_bytes(b"x" * 10 + b"\n")

    assert read_lines(str(path), max_line_length=4) == [b"xxxx", b"xxxx", b"xx"]


def test_missing_file_is_flagged(tmp_path) -> None:
    with pytest.raises(FileIOFailure) as excinfo:
        read_lines(str(tmp_path / "absent.txt"))

    assert excinfo.value.missing is True


def test_failed_load_leaves_buffer_unchanged(tmp_path) -> None:
    buffer = TextBuffer.from_bytes(b"keep")

    with pytest.raises(FileIOFailure):
        buffer.load_from_file(str(tmp_path))

    assert buffer.lines == (b"keep",)
    assert buffer.filename is None


def test_save_writes_one_terminator_per_line(tmp_path) -> None:
    path = tmp_path / "out.txt"
    buffer = TextBuffer.from_bytes(b"one\ntwo")
    buffer.modified = True

    written = buffer.save_to_file(str(path))

    assert path.read_bytes() == b"one\ntwo\n"
    assert written == 8
    assert buffer.filename == str(path)
    assert buffer.modified is False


def test_save_round_trips_raw_bytes(tmp_path) -> None:
    path = tmp_path / "raw.bin"
    write_lines(str(path), [b"\xff\x00\xe9", b""])

    assert read_lines(str(path)) == [b"\xff\x00\xe9", b""]


def test_save_without_name_fails() -> None:
    buffer = TextBuffer()

    with pytest.raises(FileIOFailure):
        buffer.save_to_file()


def test_save_into_missing_directory_fails(tmp_path) -> None:
    buffer = TextBuffer.from_bytes(b"x")
    buffer.modified = True

    with pytest.raises(FileIOFailure):
        buffer.save_to_file(os.path.join(str(tmp_path), "nope", "file.txt"))

    assert buffer.modified is True
