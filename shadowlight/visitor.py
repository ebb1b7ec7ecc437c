# shadowlight/visitor.py
"""
Visitor infrastructure for syntax tree traversal, and the shadow analysis.

Provides:
- ``SyntaxVisitor`` — abstract base with default implementations
- ``DepthFirstVisitor`` — generic traversal that visits all children
- ``ShadowVisitor`` — opens a scope per function / method and records
  every ``let`` binding
- ``OutlineVisitor`` — builds the nested outline printed by
  ``shadowlight parse``
- ``analyze_tree`` / ``analyze_source`` — one-call entry points
"""

from __future__ import annotations

import abc
import logging
from typing import Any, Dict, List, Optional

from shadowlight import syntax as S
from shadowlight.config import AnalysisConfig
from shadowlight.parser import parse_source
from shadowlight.patterns import extract_bindings
from shadowlight.scopes import AnalysisState, ScopeTracker

logger = logging.getLogger(__name__)

__all__ = [
    "DepthFirstVisitor",
    "OutlineVisitor",
    "ShadowVisitor",
    "SyntaxVisitor",
    "analyze_source",
    "analyze_tree",
]


class SyntaxVisitor(abc.ABC):
    """Abstract base class for syntax tree visitors.

    Each ``visit_X`` method corresponds to a node type.  The default
    implementations call ``generic_visit``, which does nothing.  Subclasses
    override the methods they care about.
    """

    def visit(self, node: S.SyntaxNode) -> Any:
        """Dispatch to the appropriate visit method."""
        return node.accept(self)

    def generic_visit(self, node: S.SyntaxNode) -> Any:
        """Called when no specific visitor method exists."""
        return None

    # --- Items ---

    def visit_source_file(self, node: S.SourceFile) -> Any:
        return self.generic_visit(node)

    def visit_fn_item(self, node: S.FnItem) -> Any:
        return self.generic_visit(node)

    def visit_impl_block(self, node: S.ImplBlock) -> Any:
        return self.generic_visit(node)

    def visit_trait_block(self, node: S.TraitBlock) -> Any:
        return self.generic_visit(node)

    def visit_mod_block(self, node: S.ModBlock) -> Any:
        return self.generic_visit(node)

    def visit_const_item(self, node: S.ConstItem) -> Any:
        return self.generic_visit(node)

    # --- Statements & expressions ---

    def visit_block(self, node: S.Block) -> Any:
        return self.generic_visit(node)

    def visit_let_stmt(self, node: S.LetStmt) -> Any:
        return self.generic_visit(node)

    def visit_expr_stmt(self, node: S.ExprStmt) -> Any:
        return self.generic_visit(node)

    def visit_expr(self, node: S.Expr) -> Any:
        return self.generic_visit(node)


class DepthFirstVisitor(SyntaxVisitor):
    """Visitor that traverses all children in depth-first pre-order."""

    def generic_visit(self, node: S.SyntaxNode) -> Any:
        """Visit all children."""
        for child in node.children():
            self.visit(child)
        return None


class ShadowVisitor(DepthFirstVisitor):
    """Collects the ``let`` bindings of every function and method body.

    A function or method with a body opens a scope for the duration of
    that body.  Each ``let`` records its bound names in the current scope
    before its initializer is visited, so ``let x = { let x = 1; x };``
    records the outer ``x`` first.

    Raises:
        BindingOutsideScopeError: a ``let`` with no enclosing function.
    """

    def __init__(self, path: Optional[str] = None, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()
        self.state = AnalysisState(path=path)
        self.tracker = ScopeTracker(self.state, self.config.scope_mode)

    def visit_fn_item(self, node: S.FnItem) -> Any:
        if node.body is None:
            return None
        self.tracker.open_scope(node.name, node.loc.line, node.kind)
        self.generic_visit(node)
        self.tracker.close_scope()
        return None

    def visit_let_stmt(self, node: S.LetStmt) -> Any:
        bindings = extract_bindings(node.pattern, self.config.pattern_mode)
        # A ``let`` that binds nothing (``let _ = ...``) still needs a scope.
        ident, line = bindings[0] if bindings else ("_", node.loc.line)
        self.tracker.current_scope(ident, line)
        for ident, line in bindings:
            self.tracker.record(ident, line)
        return self.generic_visit(node)


class OutlineVisitor(DepthFirstVisitor):
    """Builds a nested outline of scopes, items and ``let`` statements.

    Blocks and expressions are transparent: a ``let`` inside a closure or
    an ``if`` body is listed under its function (or under the ``let``
    whose initializer holds it).
    """

    def __init__(self) -> None:
        self.root: Dict[str, Any] = {"kind": "file", "children": []}
        self._stack: List[Dict[str, Any]] = [self.root]

    def _nest(self, entry: Dict[str, Any], node: S.SyntaxNode) -> None:
        entry["children"] = []
        self._stack[-1]["children"].append(entry)
        self._stack.append(entry)
        self.generic_visit(node)
        self._stack.pop()

    def visit_source_file(self, node: S.SourceFile) -> Any:
        self.root["path"] = node.path
        self.generic_visit(node)
        return self.root

    def visit_fn_item(self, node: S.FnItem) -> Any:
        entry = {"kind": node.kind.value, "name": node.name, "line": node.loc.line}
        if node.body is None:
            entry["declaration"] = True
        self._nest(entry, node)

    def visit_impl_block(self, node: S.ImplBlock) -> Any:
        self._nest({"kind": "impl", "line": node.loc.line}, node)

    def visit_trait_block(self, node: S.TraitBlock) -> Any:
        self._nest({"kind": "trait", "name": node.name, "line": node.loc.line}, node)

    def visit_mod_block(self, node: S.ModBlock) -> Any:
        self._nest({"kind": "mod", "name": node.name, "line": node.loc.line}, node)

    def visit_const_item(self, node: S.ConstItem) -> Any:
        self._nest({"kind": "const", "name": node.name, "line": node.loc.line}, node)

    def visit_let_stmt(self, node: S.LetStmt) -> Any:
        entry = {
            "kind": "let",
            "pattern": str(node.pattern),
            "line": node.loc.line,
            "bindings": [name for name, _ in extract_bindings(node.pattern)],
        }
        self._nest(entry, node)


def analyze_tree(source: S.SourceFile, config: Optional[AnalysisConfig] = None) -> AnalysisState:
    """Run the shadow analysis over an already parsed file."""
    visitor = ShadowVisitor(source.path, config)
    visitor.visit(source)
    logger.debug(
        "%s: %d scope(s), shadowing=%s",
        source.path or "<source>", len(visitor.state.scopes), visitor.state.has_shadow,
    )
    return visitor.state


def analyze_source(
    text: str,
    path: Optional[str] = None,
    config: Optional[AnalysisConfig] = None,
) -> AnalysisState:
    """Parse Rust *text* and run the shadow analysis over it.

    Raises:
        SourceParseError: the text could not be parsed.
        BindingOutsideScopeError: a ``let`` outside any function.
    """
    return analyze_tree(parse_source(text, path), config)
