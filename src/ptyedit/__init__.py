"""A multi-buffer terminal text editor that hosts shells inside buffers."""

__all__ = [
    "adapters",
    "actions",
    "buffer",
    "keymaps",
    "modes",
    "runtime",
    "scripting",
    "session",
    "config",
    "editor",
    "errors",
    "keys",
    "workspace",
]

__version__ = "0.1.0"
