"""Resolves one key token in one dispatch mode to an action."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Literal, Mapping, Optional

from ptyedit.runtime.telemetry import span

from .models import ActionRef, Binding
from .registry import KeymapRegistry


@dataclass(slots=True)
class KeymapTable:
    """Key token to binding ids for a single mode, built at one revision."""

    mode: str
    revision: int
    entries: Dict[str, list[str]] = field(default_factory=dict)

    @classmethod
    def build(cls, registry: KeymapRegistry, mode: str) -> "KeymapTable":
        table = cls(mode=mode, revision=registry.revision())
        for binding in registry.iter_bindings(mode):
            table.entries.setdefault(binding.key, []).append(binding.id)
        return table

    def keys(self) -> tuple[str, ...]:
        return tuple(sorted(self.entries))


@dataclass(frozen=True, slots=True)
class ResolutionMatch:
    binding: Binding
    action: ActionRef


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    status: Literal["match", "miss"]
    match: Optional[ResolutionMatch] = None


_MISS = ResolutionResult(status="miss")


class KeymapResolver:
    """Looks keys up in per-mode tables cached against the registry revision.

    When several bindings for a key pass their gates, the highest
    ``priority`` wins and ties go to the smallest binding id.
    """

    def __init__(
        self, registry: KeymapRegistry, *, logger_name: str | None = None
    ) -> None:
        self._registry = registry
        self._logger_name = logger_name
        self._tables: Dict[str, KeymapTable] = {}

    @property
    def registry(self) -> KeymapRegistry:
        return self._registry

    def resolve(
        self,
        mode: str,
        token: str,
        *,
        context: Optional[Mapping[str, bool]] = None,
    ) -> ResolutionResult:
        with span(
            "keymaps::resolve",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"mode": mode, "key": token},
        ) as handle:
            candidates = self._table(mode).entries.get(token, ())
            match = self._best_match(candidates, context or {})
            handle.add_metadata("status", "match" if match else "miss")
            if match is None:
                return _MISS
            handle.add_metadata("binding_id", match.binding.id)
            return ResolutionResult(status="match", match=match)

    def bound_keys(self, mode: str) -> tuple[str, ...]:
        return self._table(mode).keys()

    def _table(self, mode: str) -> KeymapTable:
        table = self._tables.get(mode)
        if table is None or table.revision != self._registry.revision():
            table = self._tables[mode] = KeymapTable.build(self._registry, mode)
        return table

    def _best_match(
        self, binding_ids: Iterable[str], flags: Mapping[str, bool]
    ) -> Optional[ResolutionMatch]:
        allowed = [
            binding
            for binding in map(self._registry.get_binding, binding_ids)
            if binding.allows(flags)
        ]
        if not allowed:
            return None
        best = min(allowed, key=lambda binding: (-binding.priority, binding.id))
        return ResolutionMatch(best, self._registry.get_action(best.action_id))


__all__ = [
    "KeymapResolver",
    "KeymapTable",
    "ResolutionResult",
    "ResolutionMatch",
]
