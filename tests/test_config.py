from __future__ import annotations

import pytest

from ptyedit.config import DEFAULT_SHELL, EditorConfig


def test_defaults() -> None:
    config = EditorConfig()

    assert config.max_buffers == 32
    assert config.poll_timeout == pytest.approx(0.02)
    assert config.minibuffer_max_length == 510
    assert config.max_line_length == 4096


def test_from_env_reads_prefixed_values() -> None:
    config = EditorConfig.from_env(
        {
            "PTYEDIT_SHELL": "/bin/sh",
            "PTYEDIT_MAX_BUFFERS": "4",
            "PTYEDIT_POLL_TIMEOUT_MS": "50",
            "PTYEDIT_ROWS": "30",
        }
    )

    assert config.shell == "/bin/sh"
    assert config.max_buffers == 4
    assert config.poll_timeout_ms == 50
    assert config.default_rows == 30


def test_from_env_falls_back_to_login_shell_then_default() -> None:
    assert EditorConfig.from_env({"SHELL": "/bin/zsh"}).shell == "/bin/zsh"
    assert EditorConfig.from_env({}).shell == DEFAULT_SHELL


def test_from_env_ignores_bad_numbers() -> None:
    config = EditorConfig.from_env(
        {"PTYEDIT_MAX_BUFFERS": "many", "PTYEDIT_MAX_LINE_LENGTH": "-3"}
    )

    assert config.max_buffers == 32
    assert config.max_line_length == 4096


def test_from_env_uses_process_environment(monkeypatch) -> None:
    monkeypatch.setenv("PTYEDIT_MINIBUFFER_MAX_LENGTH", "12")

    assert EditorConfig.from_env().minibuffer_max_length == 12


def test_invalid_limits_rejected() -> None:
    with pytest.raises(ValueError):
        EditorConfig(max_buffers=0)
