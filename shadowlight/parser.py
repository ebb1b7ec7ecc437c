# shadowlight/parser.py
"""
Parse tree → syntax tree lowering.

``RustTreeBuilder`` is a Parsimonious ``NodeVisitor``.  Rules that matter
to the analysis (items, blocks, ``let`` statements, patterns and the names
inside them) have their own ``visit_*`` method and return a node from
:mod:`shadowlight.syntax`.  Every other rule is flattened by
``generic_visit`` into the list of nodes found below it, so opaque token
soup disappears and only structure survives.
"""

from __future__ import annotations

import bisect
import logging
import re
from dataclasses import replace
from typing import Any, List, Optional

from parsimonious.exceptions import IncompleteParseError, ParseError
from parsimonious.nodes import Node, NodeVisitor

from shadowlight.errors import ShadowlightError, SourceParseError
from shadowlight.grammar import RUST_GRAMMAR
from shadowlight.syntax import (
    Block, ConstItem, Expr, ExprStmt, FieldPat, FnItem, FnKind, IdentPat,
    ImplBlock, LetStmt, LitPat, Loc, ModBlock, Name, OrPat, PathPat,
    Pattern, RangePat, RefPat, RestPat, SlicePat, SourceFile, StructPat,
    SyntaxNode, TraitBlock, TuplePat, TupleStructPat, WildPat,
)

logger = logging.getLogger(__name__)

__all__ = ["RustTreeBuilder", "parse_source"]

_WORD_RE = re.compile(r"(?:r#)?[^\W\d]\w*")
_SPACE_RE = re.compile(r"\s+")

# Objects that survive flattening.
_KEEP = (SyntaxNode, Name, FieldPat)


def _word(node: Node) -> str:
    """First identifier in *node*'s text (trailing trivia excluded)."""
    m = _WORD_RE.search(node.text)
    return m.group(0) if m else node.text.strip()


def _compact(text: str) -> str:
    return _SPACE_RE.sub("", text)


class RustTreeBuilder(NodeVisitor):
    """Transforms a Parsimonious parse tree into a ``SourceFile``."""

    unwrapped_exceptions = (ShadowlightError,)

    def __init__(self, text: str, path: Optional[str] = None):
        self.path = path
        self._line_starts = [0]
        self._line_starts.extend(
            m.end() for m in re.finditer(r"\n", text)
        )

    # ─────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────

    def _loc(self, node: Node) -> Loc:
        line = bisect.bisect_right(self._line_starts, node.start)
        return Loc(line, node.start - self._line_starts[line - 1] + 1)

    def _flatten(self, items: Any) -> List[Any]:
        out: List[Any] = []
        if isinstance(items, list):
            for item in items:
                out.extend(self._flatten(item))
        elif isinstance(items, _KEEP):
            out.append(items)
        return out

    def _nodes(self, items: Any, kind: Any) -> List[Any]:
        return [n for n in self._flatten(items) if isinstance(n, kind)]

    def _first(self, items: Any, kind: Any) -> Any:
        found = self._nodes(items, kind)
        return found[0] if found else None

    def _name(self, node: Node) -> Name:
        return Name(_word(node), self._loc(node))

    def generic_visit(self, node, visited_children):
        """Default: flatten children, keeping only syntax objects."""
        return self._flatten(visited_children)

    # ─────────────────────────────────────────────────────────────
    # Items
    # ─────────────────────────────────────────────────────────────

    def visit_file(self, node, visited_children):
        return SourceFile(
            items=self._nodes(visited_children, SyntaxNode),
            path=self.path,
            loc=Loc(1, 1),
        )

    def visit_fn_item(self, node, visited_children):
        _, _, name, _, body = visited_children
        return FnItem(
            name=name.text,
            body=self._first(body, Block),
            kind=FnKind.FUNCTION,
            loc=name.loc,
        )

    def visit_fn_name(self, node, visited_children):
        return self._name(node)

    visit_trait_name = visit_fn_name
    visit_mod_name = visit_fn_name
    visit_const_name = visit_fn_name
    visit_binding_name = visit_fn_name

    def _members(self, visited_children) -> List[SyntaxNode]:
        members = []
        for item in self._nodes(visited_children, SyntaxNode):
            if isinstance(item, FnItem):
                item = replace(item, kind=FnKind.METHOD)
            members.append(item)
        return members

    def visit_impl_item(self, node, visited_children):
        return ImplBlock(items=self._members(visited_children), loc=self._loc(node))

    def visit_trait_item(self, node, visited_children):
        name = self._first(visited_children, Name)
        return TraitBlock(
            name=name.text,
            items=self._members(visited_children),
            loc=name.loc,
        )

    def visit_mod_item(self, node, visited_children):
        _, _, name, body = visited_children
        return ModBlock(
            name=name.text,
            items=self._nodes(body, SyntaxNode),
            loc=name.loc,
        )

    def visit_const_item(self, node, visited_children):
        name = self._first(visited_children, Name)
        return ConstItem(
            name=name.text,
            value=self._first(visited_children, Expr),
            loc=name.loc,
        )

    # ─────────────────────────────────────────────────────────────
    # Statements & Expressions
    # ─────────────────────────────────────────────────────────────

    def visit_block(self, node, visited_children):
        return Block(
            stmts=self._nodes(visited_children, SyntaxNode),
            loc=self._loc(node),
        )

    def visit_let_stmt(self, node, visited_children):
        _, _, pattern, _, init, _ = visited_children
        return LetStmt(
            pattern=pattern,
            init=self._first(init, Expr),
            loc=self._loc(node.children[1]),
        )

    def visit_init_expr(self, node, visited_children):
        return Expr(blocks=self._nodes(visited_children, Block), loc=self._loc(node))

    def visit_expr_stmt(self, node, visited_children):
        blocks = self._nodes(visited_children, Block)
        if not blocks:
            # Nothing in it can bind a name.
            return []
        loc = self._loc(node)
        return ExprStmt(expr=Expr(blocks=blocks, loc=loc), loc=loc)

    # ─────────────────────────────────────────────────────────────
    # Patterns
    # ─────────────────────────────────────────────────────────────

    def visit_pattern(self, node, visited_children):
        cases = self._nodes(visited_children, Pattern)
        if len(cases) == 1:
            return cases[0]
        return OrPat(cases=cases, loc=self._loc(node))

    def visit_pat_ident(self, node, visited_children):
        _, _, name, sub = visited_children
        return IdentPat(
            name=name.text,
            by_ref=bool(node.children[0].text),
            mutable=bool(node.children[1].text),
            subpattern=self._first(sub, Pattern),
            loc=name.loc,
        )

    def visit_pat_ref(self, node, visited_children):
        return RefPat(
            pattern=self._first(visited_children, Pattern),
            mutable=bool(node.children[2].text),
            loc=self._loc(node),
        )

    def visit_pat_tuple(self, node, visited_children):
        return TuplePat(elems=self._nodes(visited_children, Pattern), loc=self._loc(node))

    def visit_pat_slice(self, node, visited_children):
        return SlicePat(elems=self._nodes(visited_children, Pattern), loc=self._loc(node))

    def visit_pat_tuple_struct(self, node, visited_children):
        return TupleStructPat(
            path=_compact(node.children[0].text),
            elems=self._nodes(visited_children, Pattern),
            loc=self._loc(node),
        )

    def visit_pat_struct(self, node, visited_children):
        items = self._flatten(visited_children)
        return StructPat(
            path=_compact(node.children[0].text),
            fields=[f for f in items if isinstance(f, FieldPat)],
            has_rest=any(isinstance(f, RestPat) for f in items),
            loc=self._loc(node),
        )

    def visit_field_rest(self, node, visited_children):
        return RestPat(loc=self._loc(node))

    def visit_field_named(self, node, visited_children):
        return FieldPat(
            member=_compact(node.children[0].text),
            pattern=self._first(visited_children, Pattern),
        )

    def visit_field_shorthand(self, node, visited_children):
        name = self._first(visited_children, Name)
        pattern = IdentPat(
            name=name.text,
            by_ref=bool(node.children[0].text),
            mutable=bool(node.children[1].text),
            loc=name.loc,
        )
        return FieldPat(member=name.text, pattern=pattern, shorthand=True)

    def visit_pat_path(self, node, visited_children):
        return PathPat(path=_compact(node.text), loc=self._loc(node))

    def visit_pat_range(self, node, visited_children):
        return RangePat(text=_compact(node.text), loc=self._loc(node))

    def visit_pat_rest(self, node, visited_children):
        return RestPat(loc=self._loc(node))

    def visit_pat_wild(self, node, visited_children):
        return WildPat(loc=self._loc(node))

    def visit_pat_lit(self, node, visited_children):
        return LitPat(text=node.text.strip(), loc=self._loc(node))


def _strip_shebang(text: str) -> str:
    # ``#!`` on the first line is a shebang unless it opens ``#![attr]``.
    if text.startswith("#!") and not text[2:].lstrip().startswith("["):
        end = text.find("\n")
        end = len(text) if end < 0 else end
        return " " * end + text[end:]
    return text


def _furthest_failure(text: str, exc: IncompleteParseError) -> ParseError:
    """Where the item that stopped ``file`` actually broke.

    ``file`` only reports the offset of the first item it could not match;
    matching ``item`` again at that offset raises a ``ParseError`` carrying
    the furthest position reached and the rule that failed there.
    """
    try:
        RUST_GRAMMAR["item"].match(text, exc.pos)
    except ParseError as inner:
        return inner
    return exc


def parse_source(text: str, path: Optional[str] = None) -> SourceFile:
    """Parse Rust *text* into a ``SourceFile``.

    Raises:
        SourceParseError: the text is not accepted by the grammar.
    """
    text = _strip_shebang(text.lstrip("\ufeff"))
    try:
        tree = RUST_GRAMMAR.parse(text)
    except IncompleteParseError as exc:
        raise SourceParseError.from_parsimonious(_furthest_failure(text, exc), path) from exc
    except ParseError as exc:
        raise SourceParseError.from_parsimonious(exc, path) from exc
    source = RustTreeBuilder(text, path).visit(tree)
    logger.debug("%s: %d top-level item(s)", path or "<source>", len(source.items))
    return source
