# shadowlight/report.py
"""
Rendering of a finished ``AnalysisState``.

Text layout, one block per file::

    src/main.rs contains shadowed variable(s):

      line:   3 main
        x                   3 @ [4, 6, 9]

Only scopes with shadowing are listed; within a scope only identifiers
bound more than once.  Colours come from termcolor and are applied after
padding, so plain and coloured output line up the same way.  With colour
on, the original line is cyan and the shadowing lines are yellow.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Optional, Sequence

from termcolor import colored

from shadowlight.bindings import BindingHistory, Scope
from shadowlight.scopes import AnalysisState

__all__ = [
    "render",
    "render_header",
    "render_json",
    "render_outline",
    "render_scope",
]


def _paint(text: str, color: Optional[str] = None, attrs: Sequence[str] = (), enabled: bool = False) -> str:
    if not enabled:
        return text
    return colored(text, color, attrs=list(attrs) or None, force_color=True)


def _lines(history: BindingHistory, color: bool) -> str:
    parts = [
        _paint(str(occ.line), "cyan" if occ.is_original else "yellow", enabled=color)
        for occ in history.occurrences
    ]
    return "[" + ", ".join(parts) + "]"


def render_header(path: Optional[str]) -> str:
    """``<path> contains shadowed variable(s):`` followed by a blank line."""
    return f"{path or '<source>'} contains shadowed variable(s):\n\n"


def render_scope(scope: Scope, color: bool = False) -> str:
    """The block for one scope: its head line, shadowed names, blank line."""
    out = "  {} {} {}\n".format(
        _paint("line:", "light_magenta", enabled=color),
        _paint(f"{scope.declared_at:>3}", "light_magenta", enabled=color),
        _paint(f"{scope.name:<15}", "light_green", enabled=color),
    )
    for ident, history in scope.shadowed():
        out += "    {} {} {} {}\n".format(
            _paint(f"{ident:<15.15}", "white", ["bold"], enabled=color),
            _paint(f"{history.count:>5}", "light_cyan", ["bold"], enabled=color),
            _paint("@", attrs=["dark"], enabled=color),
            _lines(history, color),
        )
    return out + "\n"


def render(state: AnalysisState, color: bool = False) -> str:
    """Full text report for one file.

    The header is always present; scopes without shadowing are left out.
    """
    out = render_header(state.path)
    for scope in state.shadowed_scopes():
        out += render_scope(scope, color)
    return out


def render_json(states: Iterable[AnalysisState], errors: Iterable[Dict[str, Any]] = (), indent: int = 2) -> str:
    """JSON document with one entry per analysed file."""
    doc = {
        "files": [state.to_dict() for state in states],
        "errors": list(errors),
    }
    return json.dumps(doc, indent=indent)


def render_outline(entry: Dict[str, Any], depth: int = 0) -> str:
    """Indented text form of an ``OutlineVisitor`` tree."""
    lines: List[str] = []
    kind = entry["kind"]
    if kind == "file":
        lines.append(entry.get("path") or "<source>")
    else:
        label = entry.get("pattern") if kind == "let" else entry.get("name", "")
        text = f"{'  ' * depth}{kind} {label}".rstrip()
        text += f" (line {entry['line']})"
        if entry.get("declaration"):
            text += " [no body]"
        lines.append(text)
    for child in entry.get("children", []):
        lines.append(render_outline(child, depth + 1))
    return "\n".join(lines)
