"""Editor configuration resolved from ``PTYEDIT_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

ENV_PREFIX = "PTYEDIT_"
DEFAULT_SHELL = "/bin/bash"


def _env(environ: Mapping[str, str], name: str) -> Optional[str]:
    return environ.get(f"{ENV_PREFIX}{name}")


def _env_int(environ: Mapping[str, str], name: str, fallback: int) -> int:
    raw = _env(environ, name)
    if raw is None:
        return fallback
    try:
        value = int(raw)
    except ValueError:
        return fallback
    return value if value > 0 else fallback


@dataclass(frozen=True)
class EditorConfig:
    """Limits and defaults consulted by the workspace, sessions, and modes."""

    shell: str = DEFAULT_SHELL
    max_buffers: int = 32
    poll_timeout_ms: int = 20
    minibuffer_max_length: int = 510
    max_line_length: int = 4096
    default_rows: int = 24
    default_cols: int = 80

    def __post_init__(self) -> None:
        if self.max_buffers < 1:
            raise ValueError("max_buffers must be positive")
        if self.poll_timeout_ms < 0:
            raise ValueError("poll_timeout_ms cannot be negative")

    @property
    def poll_timeout(self) -> float:
        return self.poll_timeout_ms / 1000.0

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EditorConfig":
        env = os.environ if environ is None else environ
        shell = _env(env, "SHELL") or env.get("SHELL") or DEFAULT_SHELL
        return cls(
            shell=shell,
            max_buffers=_env_int(env, "MAX_BUFFERS", cls.max_buffers),
            poll_timeout_ms=_env_int(env, "POLL_TIMEOUT_MS", cls.poll_timeout_ms),
            minibuffer_max_length=_env_int(
                env, "MINIBUFFER_MAX_LENGTH", cls.minibuffer_max_length
            ),
            max_line_length=_env_int(env, "MAX_LINE_LENGTH", cls.max_line_length),
            default_rows=_env_int(env, "ROWS", cls.default_rows),
            default_cols=_env_int(env, "COLS", cls.default_cols),
        )


__all__ = ["EditorConfig", "ENV_PREFIX", "DEFAULT_SHELL"]
