# shadowlight/bindings.py
"""
Binding recorder: per-scope histories of ``let`` bindings.

A ``Scope`` maps each identifier to a ``BindingHistory`` in first-seen
order.  The first ``Occurrence`` of a name in a scope is its original
binding; every later one shadows it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Tuple

from shadowlight.syntax import FnKind

__all__ = ["BindingHistory", "Occurrence", "Scope", "record_binding"]


@dataclass(frozen=True)
class Occurrence:
    """One binding of a name: where it happened and whether it was first."""
    line: int
    is_original: bool

    def to_dict(self) -> Dict[str, Any]:
        return {"line": self.line, "is_original": self.is_original}


@dataclass
class BindingHistory:
    """Every binding of one identifier within one scope, in discovery order.

    Never empty: a history is only created together with its original
    occurrence.
    """
    occurrences: List[Occurrence] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.occurrences)

    @property
    def lines(self) -> List[int]:
        return [occ.line for occ in self.occurrences]

    @property
    def original(self) -> Occurrence:
        return self.occurrences[0]

    @property
    def shadows(self) -> List[Occurrence]:
        return self.occurrences[1:]

    @property
    def is_shadowed(self) -> bool:
        return len(self.occurrences) > 1


def record_binding(bindings: Dict[str, BindingHistory], identifier: str, line: int) -> bool:
    """Record *identifier* bound at *line*; return ``True`` if it shadows.

    An unseen name starts a new history with an original occurrence; a
    known name gets a shadow occurrence appended.
    """
    history = bindings.get(identifier)
    if history is None:
        bindings[identifier] = BindingHistory([Occurrence(line, True)])
        return False
    history.occurrences.append(Occurrence(line, False))
    return True


@dataclass
class Scope:
    """A function or method body: the unit within which shadowing is tracked."""
    name: str
    declared_at: int
    kind: FnKind = FnKind.FUNCTION
    bindings: Dict[str, BindingHistory] = field(default_factory=dict)

    def record(self, identifier: str, line: int) -> bool:
        return record_binding(self.bindings, identifier, line)

    @property
    def has_shadow(self) -> bool:
        return any(h.is_shadowed for h in self.bindings.values())

    def shadowed(self) -> Iterator[Tuple[str, BindingHistory]]:
        """``(identifier, history)`` pairs bound more than once, in order."""
        for ident, history in self.bindings.items():
            if history.is_shadowed:
                yield ident, history

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "line": self.declared_at,
            "kind": self.kind.value,
            "has_shadow": self.has_shadow,
            "bindings": {
                ident: [occ.to_dict() for occ in history.occurrences]
                for ident, history in self.bindings.items()
            },
        }
