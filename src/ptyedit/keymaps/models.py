"""Value types for keymaps: flag gates, named actions and key bindings."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Mapping


@dataclass(frozen=True, slots=True)
class WhenClause:
    """One flag a binding requires; ``WhenClause.parse("!flag")`` negates."""

    flag: str
    expected: bool = True

    def __post_init__(self) -> None:
        if not self.flag:
            raise ValueError("flag cannot be empty")

    @classmethod
    def parse(cls, expression: str) -> "WhenClause":
        text = expression.strip()
        negated = text.startswith("!")
        flag = text[1:].strip() if negated else text
        if not flag:
            raise ValueError(f"invalid when expression {expression!r}")
        return cls(flag, not negated)

    def evaluate(self, flags: Mapping[str, bool]) -> bool:
        return bool(flags.get(self.flag, False)) == self.expected

    def __str__(self) -> str:
        return self.flag if self.expected else f"!{self.flag}"


@dataclass(frozen=True, slots=True)
class ActionRef:
    """A named editor command: ``handler(context, match)`` returns a ModeResult."""

    id: str
    handler: Callable[..., object]
    description: str = ""
    metadata: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ActionRef id cannot be empty")
        if not callable(self.handler):
            raise TypeError(f"handler for {self.id!r} must be callable")
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def __call__(self, *args: object, **kwargs: object) -> object:
        return self.handler(*args, **kwargs)


@dataclass(frozen=True, slots=True)
class Binding:
    """One key token in one dispatch mode, pointing at an action id.

    ``when`` accepts ``WhenClause`` objects or their string form; ``tags``
    are stripped and de-duplicated in order.
    """

    id: str
    mode: str
    key: str
    action_id: str
    description: str = ""
    when: tuple[WhenClause, ...] = ()
    tags: tuple[str, ...] = ()
    priority: int = 0

    def __post_init__(self) -> None:
        for name in ("id", "mode", "key", "action_id"):
            if not getattr(self, name):
                raise ValueError(f"binding {name} cannot be empty")
        clauses = tuple(
            clause if isinstance(clause, WhenClause) else WhenClause.parse(str(clause))
            for clause in self.when
        )
        tags = tuple(dict.fromkeys(tag.strip() for tag in self.tags if tag.strip()))
        object.__setattr__(self, "when", clauses)
        object.__setattr__(self, "tags", tags)

    @property
    def when_map(self) -> Mapping[str, bool]:
        return MappingProxyType({clause.flag: clause.expected for clause in self.when})

    def allows(self, flags: Mapping[str, bool]) -> bool:
        return all(clause.evaluate(flags) for clause in self.when)


__all__ = ["WhenClause", "ActionRef", "Binding"]
