# tests/test_scopes.py
"""
Tests for scope tracking in both attribution modes.
"""

import pytest

from shadowlight.config import ScopeMode
from shadowlight.errors import BindingOutsideScopeError
from shadowlight.scopes import AnalysisState, ScopeTracker
from shadowlight.syntax import FnKind


@pytest.fixture
def state():
    return AnalysisState(path="lib.rs")


class TestLexical:

    def test_binding_goes_to_innermost_open_scope(self, state):
        tracker = ScopeTracker(state)
        tracker.open_scope("outer", 1)
        tracker.record("a", 2)
        tracker.open_scope("inner", 3)
        tracker.record("b", 4)
        tracker.close_scope()
        tracker.record("a", 6)
        outer, inner = state.scopes
        assert outer.bindings["a"].lines == [2, 6]
        assert list(inner.bindings) == ["b"]

    def test_depth(self, state):
        tracker = ScopeTracker(state)
        assert tracker.depth == 0
        tracker.open_scope("f", 1)
        tracker.open_scope("g", 2)
        assert tracker.depth == 2
        tracker.close_scope()
        assert tracker.depth == 1

    def test_closed_scope_stays_in_state(self, state):
        tracker = ScopeTracker(state)
        tracker.open_scope("f", 1)
        tracker.close_scope()
        assert [s.name for s in state.scopes] == ["f"]

    def test_record_outside_scope_raises(self, state):
        tracker = ScopeTracker(state)
        with pytest.raises(BindingOutsideScopeError) as info:
            tracker.record("a", 7)
        assert info.value.identifier == "a"
        assert info.value.path == "lib.rs"
        assert info.value.line == 7

    def test_record_after_last_close_raises(self, state):
        tracker = ScopeTracker(state)
        tracker.open_scope("f", 1)
        tracker.close_scope()
        with pytest.raises(BindingOutsideScopeError):
            tracker.current_scope()


class TestLastOpened:

    def test_binding_goes_to_last_opened_scope(self, state):
        tracker = ScopeTracker(state, ScopeMode.LAST_OPENED)
        tracker.open_scope("outer", 1)
        tracker.record("a", 2)
        tracker.open_scope("inner", 3)
        tracker.record("b", 4)
        tracker.close_scope()
        tracker.record("a", 6)
        outer, inner = state.scopes
        assert outer.bindings["a"].lines == [2]
        assert list(inner.bindings) == ["b", "a"]
        assert not state.has_shadow

    def test_close_is_a_no_op(self, state):
        tracker = ScopeTracker(state, ScopeMode.LAST_OPENED)
        tracker.open_scope("f", 1)
        tracker.close_scope()
        assert tracker.current_scope().name == "f"
        assert tracker.depth == 1

    def test_no_scope_yet_raises(self, state):
        tracker = ScopeTracker(state, ScopeMode.LAST_OPENED)
        with pytest.raises(BindingOutsideScopeError):
            tracker.record("a", 1)


class TestAnalysisState:

    def test_shadowed_scopes(self, state):
        tracker = ScopeTracker(state)
        tracker.open_scope("clean", 1)
        tracker.record("x", 2)
        tracker.close_scope()
        tracker.open_scope("dirty", 4, FnKind.METHOD)
        tracker.record("y", 5)
        tracker.record("y", 6)
        tracker.close_scope()
        assert state.has_shadow
        assert [s.name for s in state.shadowed_scopes()] == ["dirty"]

    def test_to_dict(self, state):
        tracker = ScopeTracker(state)
        tracker.open_scope("f", 1)
        tracker.record("x", 2)
        doc = state.to_dict()
        assert doc["path"] == "lib.rs"
        assert doc["has_shadow"] is False
        assert doc["scopes"][0]["name"] == "f"
        assert doc["scopes"][0]["bindings"] == {"x": [{"line": 2, "is_original": True}]}
