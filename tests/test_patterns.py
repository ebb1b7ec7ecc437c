# tests/test_patterns.py
"""
Tests for binding extraction from patterns, independent of the visitor.
"""

from shadowlight.config import PatternMode
from shadowlight.patterns import extract_bindings, flat_bindings, flatten_pattern
from shadowlight.syntax import (
    FieldPat, IdentPat, LitPat, Loc, OrPat, RefPat, RestPat, SlicePat,
    StructPat, TuplePat, TupleStructPat, WildPat,
)


def ident(name, line=1, **kw):
    return IdentPat(name=name, loc=Loc(line, 1), **kw)


class TestFlattenPattern:

    def test_single_identifier(self):
        assert flatten_pattern(ident("x", 4)) == [("x", 4)]

    def test_wildcards_and_literals_bind_nothing(self):
        assert flatten_pattern(WildPat()) == []
        assert flatten_pattern(RestPat()) == []
        assert flatten_pattern(LitPat(text="3")) == []

    def test_tuple_in_source_order(self):
        pat = TuplePat(elems=[ident("a"), WildPat(), ident("b"), RestPat()])
        assert flatten_pattern(pat) == [("a", 1), ("b", 1)]

    def test_arbitrarily_nested(self):
        pat = TuplePat(elems=[
            ident("a", 1),
            StructPat(path="Point", fields=[
                FieldPat(member="x", pattern=ident("x", 2), shorthand=True),
                FieldPat(member="y", pattern=TupleStructPat(
                    path="Some", elems=[RefPat(pattern=ident("inner", 3))],
                )),
            ], has_rest=True),
            SlicePat(elems=[ident("head", 4), RestPat(), ident("last", 5)]),
        ])
        assert flatten_pattern(pat) == [
            ("a", 1), ("x", 2), ("inner", 3), ("head", 4), ("last", 5),
        ]

    def test_subpattern_binds_both(self):
        pat = ident("whole", 1, subpattern=TupleStructPat(path="Some", elems=[ident("part", 1)]))
        assert [name for name, _ in flatten_pattern(pat)] == ["whole", "part"]

    def test_ref_bindings_count(self):
        pat = TuplePat(elems=[ident("a", by_ref=True), ident("b", by_ref=True, mutable=True)])
        assert [name for name, _ in flatten_pattern(pat)] == ["a", "b"]

    def test_or_pattern_binds_each_name_once(self):
        pat = OrPat(cases=[
            TupleStructPat(path="A", elems=[ident("x", 1)]),
            TupleStructPat(path="B", elems=[ident("x", 1)]),
        ])
        assert flatten_pattern(pat) == [("x", 1)]


class TestFlatBindings:

    def test_top_level_identifier(self):
        assert flat_bindings(ident("x", 2)) == [("x", 2)]

    def test_nested_bindings_are_ignored(self):
        assert flat_bindings(TuplePat(elems=[ident("a"), ident("b")])) == []

    def test_subpattern_is_ignored(self):
        pat = ident("whole", subpattern=TupleStructPat(path="Some", elems=[ident("part")]))
        assert flat_bindings(pat) == [("whole", 1)]

    def test_or_alternatives_each_count(self):
        pat = OrPat(cases=[ident("x"), WildPat(), ident("x")])
        assert flat_bindings(pat) == [("x", 1), ("x", 1)]


class TestExtractBindings:

    def test_default_is_nested(self):
        pat = TuplePat(elems=[ident("a"), ident("b")])
        assert extract_bindings(pat) == [("a", 1), ("b", 1)]

    def test_flat_mode(self):
        pat = TuplePat(elems=[ident("a"), ident("b")])
        assert extract_bindings(pat, PatternMode.FLAT) == []
