# shadowlight/patterns.py
"""
Binding extraction from ``let`` patterns.

Two strategies, selected by :class:`shadowlight.config.PatternMode`:

``flatten_pattern``
    Walks an arbitrarily nested pattern and returns every bound
    identifier in source order: ``let (a, Point { x, y: b }) = ...``
    binds ``a``, ``x`` and ``b``.

``flat_bindings``
    Only looks at the top level of the pattern: the pattern itself when it
    is an identifier pattern, or each identifier alternative of an
    or-pattern (so ``let x | x`` counts ``x`` twice).  Nested bindings and
    ``name @ sub`` subpatterns are not looked at.  This is what
    cargo-light reports.

In both modes ``ref`` / ``ref mut`` bindings count like plain ones.
"""

from __future__ import annotations

from typing import List, Tuple

from shadowlight.config import PatternMode
from shadowlight.syntax import IdentPat, OrPat, Pattern

__all__ = ["Binding", "extract_bindings", "flat_bindings", "flatten_pattern"]

#: ``(identifier, line)``
Binding = Tuple[str, int]


def flatten_pattern(pattern: Pattern) -> List[Binding]:
    """All identifiers bound by *pattern*, at any depth, in source order.

    Every alternative of an or-pattern binds the same names, so each name
    is taken once, from the first alternative that binds it.
    """
    if isinstance(pattern, OrPat):
        seen = set()
        found: List[Binding] = []
        for case in pattern.cases:
            for name, line in flatten_pattern(case):
                if name not in seen:
                    seen.add(name)
                    found.append((name, line))
        return found

    found = []
    if isinstance(pattern, IdentPat):
        found.append((pattern.name, pattern.loc.line))
    for sub in pattern.subpatterns():
        found.extend(flatten_pattern(sub))
    return found


def flat_bindings(pattern: Pattern) -> List[Binding]:
    """Identifiers bound at the top level of *pattern* only."""
    cases = pattern.cases if isinstance(pattern, OrPat) else [pattern]
    return [(p.name, p.loc.line) for p in cases if isinstance(p, IdentPat)]


def extract_bindings(pattern: Pattern, mode: PatternMode = PatternMode.NESTED) -> List[Binding]:
    if mode is PatternMode.FLAT:
        return flat_bindings(pattern)
    return flatten_pattern(pattern)
