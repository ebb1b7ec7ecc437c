# shadowlight/syntax.py
"""
Rust syntax tree node definitions.

Only the structure the shadow analysis needs is modelled: items that open
function scopes, blocks, ``let`` statements and their patterns.  Any other
expression is reduced to the blocks nested inside it, in source order.

Every node carries a ``Loc`` (1-based line / column).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Iterator, List, Optional


# ── Source Location ──────────────────────────────────────────────

@dataclass(frozen=True)
class Loc:
    """Source location for diagnostics."""
    line: int = 0
    col: int = 0

    def __str__(self):
        return f"{self.line}:{self.col}"


@dataclass(frozen=True)
class Name:
    """An identifier token together with its position."""
    text: str
    loc: Loc = field(default_factory=Loc)

    @property
    def line(self) -> int:
        return self.loc.line


# ── Base ─────────────────────────────────────────────────────────

class SyntaxNode:
    """Base class for all syntax tree nodes."""

    visit_name: ClassVar[str] = "node"

    def accept(self, visitor: Any) -> Any:
        method = getattr(visitor, f"visit_{self.visit_name}", visitor.generic_visit)
        return method(self)

    def children(self) -> Iterator["SyntaxNode"]:
        """Child nodes that may contain items, blocks or statements."""
        return iter(())


class FnKind(Enum):
    FUNCTION = "function"
    METHOD = "method"


# ── Items ────────────────────────────────────────────────────────

@dataclass
class SourceFile(SyntaxNode):
    items: List[SyntaxNode] = field(default_factory=list)
    path: Optional[str] = None
    loc: Loc = field(default_factory=Loc)

    visit_name: ClassVar[str] = "source_file"

    def children(self) -> Iterator[SyntaxNode]:
        return iter(self.items)


@dataclass
class FnItem(SyntaxNode):
    """A free function, or a method when it sits in an ``impl``/``trait``.

    ``loc`` is the position of the name token.  ``body`` is ``None`` for
    bodiless declarations (``fn f(&self);`` in a trait).
    """
    name: str
    body: Optional["Block"] = None
    kind: FnKind = FnKind.FUNCTION
    loc: Loc = field(default_factory=Loc)

    visit_name: ClassVar[str] = "fn_item"

    def children(self) -> Iterator[SyntaxNode]:
        if self.body is not None:
            yield self.body


@dataclass
class ImplBlock(SyntaxNode):
    items: List[SyntaxNode] = field(default_factory=list)
    loc: Loc = field(default_factory=Loc)

    visit_name: ClassVar[str] = "impl_block"

    def children(self) -> Iterator[SyntaxNode]:
        return iter(self.items)


@dataclass
class TraitBlock(SyntaxNode):
    name: str = ""
    items: List[SyntaxNode] = field(default_factory=list)
    loc: Loc = field(default_factory=Loc)

    visit_name: ClassVar[str] = "trait_block"

    def children(self) -> Iterator[SyntaxNode]:
        return iter(self.items)


@dataclass
class ModBlock(SyntaxNode):
    """``mod name { ... }``; ``items`` is empty for ``mod name;``."""
    name: str = ""
    items: List[SyntaxNode] = field(default_factory=list)
    loc: Loc = field(default_factory=Loc)

    visit_name: ClassVar[str] = "mod_block"

    def children(self) -> Iterator[SyntaxNode]:
        return iter(self.items)


@dataclass
class ConstItem(SyntaxNode):
    """``const`` / ``static`` item; its initializer may hold blocks."""
    name: str = ""
    value: Optional["Expr"] = None
    loc: Loc = field(default_factory=Loc)

    visit_name: ClassVar[str] = "const_item"

    def children(self) -> Iterator[SyntaxNode]:
        if self.value is not None:
            yield self.value


# ── Statements & Expressions ─────────────────────────────────────

@dataclass
class Block(SyntaxNode):
    stmts: List[SyntaxNode] = field(default_factory=list)
    loc: Loc = field(default_factory=Loc)

    visit_name: ClassVar[str] = "block"

    def children(self) -> Iterator[SyntaxNode]:
        return iter(self.stmts)


@dataclass
class Expr(SyntaxNode):
    """An expression, reduced to the blocks it contains."""
    blocks: List[Block] = field(default_factory=list)
    loc: Loc = field(default_factory=Loc)

    visit_name: ClassVar[str] = "expr"

    def children(self) -> Iterator[SyntaxNode]:
        return iter(self.blocks)


@dataclass
class LetStmt(SyntaxNode):
    """``let PATTERN (: TYPE)? (= INIT (else BLOCK)?)?;``

    A let-else diverging block is kept at the end of ``init``.
    """
    pattern: "Pattern"
    init: Optional[Expr] = None
    loc: Loc = field(default_factory=Loc)

    visit_name: ClassVar[str] = "let_stmt"

    def children(self) -> Iterator[SyntaxNode]:
        if self.init is not None:
            yield self.init


@dataclass
class ExprStmt(SyntaxNode):
    expr: Expr
    loc: Loc = field(default_factory=Loc)

    visit_name: ClassVar[str] = "expr_stmt"

    def children(self) -> Iterator[SyntaxNode]:
        yield self.expr


# ── Patterns ─────────────────────────────────────────────────────

class Pattern(SyntaxNode):
    """Base class for ``let`` patterns."""

    visit_name: ClassVar[str] = "pattern"

    def subpatterns(self) -> Iterator["Pattern"]:
        return iter(())


@dataclass
class IdentPat(Pattern):
    """``ref? mut? name (@ subpattern)?``"""
    name: str
    by_ref: bool = False
    mutable: bool = False
    subpattern: Optional[Pattern] = None
    loc: Loc = field(default_factory=Loc)

    def subpatterns(self) -> Iterator[Pattern]:
        if self.subpattern is not None:
            yield self.subpattern

    def __str__(self) -> str:
        text = ("ref " if self.by_ref else "") + ("mut " if self.mutable else "")
        text += self.name
        if self.subpattern is not None:
            text += f" @ {self.subpattern}"
        return text


@dataclass
class TuplePat(Pattern):
    """``(a, b, ..)``; a parenthesized pattern is a one-element tuple here."""
    elems: List[Pattern] = field(default_factory=list)
    loc: Loc = field(default_factory=Loc)

    def subpatterns(self) -> Iterator[Pattern]:
        return iter(self.elems)

    def __str__(self) -> str:
        return "(" + ", ".join(str(e) for e in self.elems) + ")"


@dataclass
class TupleStructPat(Pattern):
    path: str
    elems: List[Pattern] = field(default_factory=list)
    loc: Loc = field(default_factory=Loc)

    def subpatterns(self) -> Iterator[Pattern]:
        return iter(self.elems)

    def __str__(self) -> str:
        return self.path + "(" + ", ".join(str(e) for e in self.elems) + ")"


@dataclass
class FieldPat:
    """One field of a struct pattern; ``shorthand`` for ``Point { x, .. }``."""
    member: str
    pattern: Pattern
    shorthand: bool = False

    def __str__(self) -> str:
        if self.shorthand:
            return str(self.pattern)
        return f"{self.member}: {self.pattern}"


@dataclass
class StructPat(Pattern):
    path: str
    fields: List[FieldPat] = field(default_factory=list)
    has_rest: bool = False
    loc: Loc = field(default_factory=Loc)

    def subpatterns(self) -> Iterator[Pattern]:
        return (f.pattern for f in self.fields)

    def __str__(self) -> str:
        parts = [str(f) for f in self.fields]
        if self.has_rest:
            parts.append("..")
        return self.path + " { " + ", ".join(parts) + " }"


@dataclass
class SlicePat(Pattern):
    elems: List[Pattern] = field(default_factory=list)
    loc: Loc = field(default_factory=Loc)

    def subpatterns(self) -> Iterator[Pattern]:
        return iter(self.elems)

    def __str__(self) -> str:
        return "[" + ", ".join(str(e) for e in self.elems) + "]"


@dataclass
class RefPat(Pattern):
    """``&pat`` / ``&mut pat``"""
    pattern: Pattern
    mutable: bool = False
    loc: Loc = field(default_factory=Loc)

    def subpatterns(self) -> Iterator[Pattern]:
        yield self.pattern

    def __str__(self) -> str:
        return ("&mut " if self.mutable else "&") + str(self.pattern)


@dataclass
class OrPat(Pattern):
    cases: List[Pattern] = field(default_factory=list)
    loc: Loc = field(default_factory=Loc)

    def subpatterns(self) -> Iterator[Pattern]:
        return iter(self.cases)

    def __str__(self) -> str:
        return " | ".join(str(c) for c in self.cases)


@dataclass
class WildPat(Pattern):
    loc: Loc = field(default_factory=Loc)

    def __str__(self) -> str:
        return "_"


@dataclass
class RestPat(Pattern):
    loc: Loc = field(default_factory=Loc)

    def __str__(self) -> str:
        return ".."


@dataclass
class LitPat(Pattern):
    text: str = ""
    loc: Loc = field(default_factory=Loc)

    def __str__(self) -> str:
        return self.text


@dataclass
class PathPat(Pattern):
    """A multi-segment path such as ``Ordering::Less``."""
    path: str = ""
    loc: Loc = field(default_factory=Loc)

    def __str__(self) -> str:
        return self.path


@dataclass
class RangePat(Pattern):
    text: str = ""
    loc: Loc = field(default_factory=Loc)

    def __str__(self) -> str:
        return self.text
