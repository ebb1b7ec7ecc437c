"""shadowlight — find shadowed local bindings in Rust sources.

This package walks Rust source files, records every ``let`` binding of
every function and method body, and reports the names that are bound more
than once inside the same body.

Submodules
----------
grammar
    Parsimonious PEG grammar for the item / statement / pattern structure
    of Rust.

parser
    Parse tree → syntax tree lowering (``parse_source``).

syntax
    Syntax tree node dataclasses.

patterns
    Binding extraction from ``let`` patterns (nested and flat modes).

bindings
    ``Occurrence``, ``BindingHistory``, ``Scope`` and the binding recorder.

scopes
    ``ScopeTracker`` and the per-file ``AnalysisState``.

visitor
    Syntax tree visitors, including ``ShadowVisitor`` and
    ``analyze_source``.

report
    Text and JSON rendering of an ``AnalysisState``.

discovery
    Directory walking and file-list expansion.

driver
    Batch driver applying the printing policy.

main
    CLI entry-point (``shadowlight light`` / ``shadowlight parse``).

Usage
-----
Command-line::

    shadowlight light --files src/main.rs src/lib.rs
    shadowlight light --directory .
    python -m shadowlight light -d crates/ --format json

Programmatic::

    from shadowlight.visitor import analyze_source
    from shadowlight.report import render

    state = analyze_source(text, path="main.rs")
    if state.has_shadow:
        print(render(state))
"""

from __future__ import annotations

__version__: str = "0.2.0"
__all__: list[str] = [
    "__version__",
    "bindings",
    "config",
    "discovery",
    "driver",
    "errors",
    "grammar",
    "parser",
    "patterns",
    "report",
    "scopes",
    "syntax",
    "visitor",
]
