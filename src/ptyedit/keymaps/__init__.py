"""Declarative keymap registry and resolver.

Default bindings live in :mod:`ptyedit.keymaps.defaults`, which pulls in the
action modules and is therefore imported explicitly by the dispatcher.
"""

from .models import ActionRef, Binding, WhenClause
from .registry import KeymapConflictError, KeymapRegistry, RegistryStats
from .resolver import KeymapResolver, KeymapTable, ResolutionMatch, ResolutionResult

__all__ = [
    "ActionRef",
    "Binding",
    "WhenClause",
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
    "KeymapResolver",
    "KeymapTable",
    "ResolutionResult",
    "ResolutionMatch",
]
