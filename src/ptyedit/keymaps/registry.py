"""Action and binding storage indexed by (mode, key token)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional, Sequence, Tuple

from ptyedit.runtime.telemetry import span

from .models import ActionRef, Binding

Slot = Tuple[str, str]  # (mode, key token)


@dataclass(slots=True)
class RegistryStats:
    action_count: int
    binding_count: int
    modes: tuple[str, ...]


class KeymapConflictError(RuntimeError):
    """A binding would shadow another one for the same mode, key and gate."""

    def __init__(self, binding: Binding, conflicts: Iterable[Binding]):
        self.binding = binding
        self.conflicts = tuple(conflicts)
        others = ", ".join(conflict.id for conflict in self.conflicts)
        super().__init__(
            f"{binding.mode} {binding.key}: '{binding.id}' conflicts with {others}"
        )


def gates_overlap(left: Binding, right: Binding) -> bool:
    """Whether one flag state could activate both bindings ambiguously.

    Two ungated bindings always overlap. A flag required true by one and
    false by the other separates them, and so does gating only one side (the
    gated binding wins while its gate holds). Otherwise only identical gates
    overlap.
    """

    left_gate, right_gate = left.when_map, right.when_map
    if not left_gate and not right_gate:
        return True
    if any(
        right_gate.get(flag, expected) != expected for flag, expected in left_gate.items()
    ):
        return False
    if not left_gate or not right_gate:
        return False
    return dict(left_gate) == dict(right_gate)


class KeymapRegistry:
    """Holds every action and binding the dispatch modes can resolve.

    ``revision`` increases on each binding change so resolvers know when to
    rebuild their per-mode tables.
    """

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._actions: Dict[str, ActionRef] = {}
        self._bindings: Dict[str, Binding] = {}
        self._slots: Dict[Slot, set[str]] = {}
        self._logger_name = logger_name
        self._revision = 0

    def revision(self) -> int:
        return self._revision

    def has_action(self, action_id: str) -> bool:
        return action_id in self._actions

    def get_action(self, action_id: str) -> ActionRef:
        action = self._actions.get(action_id)
        if action is None:
            raise KeyError(f"Action '{action_id}' is not registered")
        return action

    def get_binding(self, binding_id: str) -> Binding:
        binding = self._bindings.get(binding_id)
        if binding is None:
            raise KeyError(f"Binding '{binding_id}' is not registered")
        return binding

    def register_action(self, action: ActionRef, *, replace: bool = False) -> ActionRef:
        with span(
            "keymaps::register_action",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"action_id": action.id},
        ):
            if action.id in self._actions and not replace:
                raise ValueError(f"Action '{action.id}' already registered")
            self._actions[action.id] = action
        return action

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        """Add ``binding``; with ``replace`` it evicts whatever it collides with."""

        with span(
            "keymaps::register_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding.id, "mode": binding.mode, "key": binding.key},
        ) as handle:
            if binding.action_id not in self._actions:
                handle.add_metadata("missing_action", binding.action_id)
                raise KeyError(
                    f"Binding '{binding.id}' references unknown action '{binding.action_id}'"
                )

            conflicts = self.detect_conflicts(binding, ignore=(binding.id,))
            if not replace:
                if conflicts:
                    handle.add_metadata("conflicts", ",".join(c.id for c in conflicts))
                    raise KeymapConflictError(binding, conflicts)
                if binding.id in self._bindings:
                    raise ValueError(f"Binding id '{binding.id}' already registered")

            evicted = list(conflicts)
            previous = self._bindings.get(binding.id)
            if previous is not None:
                evicted.append(previous)
            for stale in evicted:
                self._drop(stale)

            self._bindings[binding.id] = binding
            self._slots.setdefault((binding.mode, binding.key), set()).add(binding.id)
            self._revision += 1
        return binding

    def unregister_binding(self, binding_id: str) -> Optional[Binding]:
        binding = self._bindings.get(binding_id)
        if binding is None:
            return None
        with span(
            "keymaps::unregister_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding_id},
        ):
            self._drop(binding)
            self._revision += 1
        return binding

    def iter_bindings(self, mode: Optional[str] = None) -> Iterator[Binding]:
        for binding_id in sorted(self._bindings):
            binding = self._bindings[binding_id]
            if mode is None or binding.mode == mode:
                yield binding

    def bindings_for(self, mode: str, key: str) -> list[Binding]:
        ids = self._slots.get((mode, key), ())
        return [self._bindings[binding_id] for binding_id in sorted(ids)]

    def detect_conflicts(
        self, binding: Binding, *, ignore: Sequence[str] = ()
    ) -> list[Binding]:
        return [
            existing
            for existing in self.bindings_for(binding.mode, binding.key)
            if existing.id not in ignore and gates_overlap(binding, existing)
        ]

    def stats(self) -> RegistryStats:
        return RegistryStats(
            action_count=len(self._actions),
            binding_count=len(self._bindings),
            modes=tuple(sorted({mode for mode, _ in self._slots})),
        )

    def _drop(self, binding: Binding) -> None:
        self._bindings.pop(binding.id, None)
        slot = (binding.mode, binding.key)
        ids = self._slots.get(slot)
        if ids is None:
            return
        ids.discard(binding.id)
        if not ids:
            del self._slots[slot]


__all__ = [
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
    "gates_overlap",
]
