# shadowlight/scopes.py
"""
Scope tracking for one file's analysis.

``AnalysisState`` owns the scopes discovered in a file, in discovery
order.  ``ScopeTracker`` decides which of them a new binding belongs to:

* ``ScopeMode.LEXICAL`` keeps a stack of open scopes, pushed when a
  function or method is entered and popped when it is left, so a binding
  goes to its innermost enclosing function.
* ``ScopeMode.LAST_OPENED`` never closes anything: a binding goes to
  whichever scope was opened last.  After a nested ``fn`` the rest of the
  outer body is attributed to the nested function, as cargo-light
  reports it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from shadowlight.bindings import Scope
from shadowlight.config import ScopeMode
from shadowlight.errors import BindingOutsideScopeError
from shadowlight.syntax import FnKind

logger = logging.getLogger(__name__)

__all__ = ["AnalysisState", "ScopeTracker"]


@dataclass
class AnalysisState:
    """Everything learned about one file."""
    path: Optional[str] = None
    scopes: List[Scope] = field(default_factory=list)

    @property
    def has_shadow(self) -> bool:
        return any(scope.has_shadow for scope in self.scopes)

    def shadowed_scopes(self) -> List[Scope]:
        return [scope for scope in self.scopes if scope.has_shadow]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "path": self.path,
            "has_shadow": self.has_shadow,
            "scopes": [scope.to_dict() for scope in self.scopes],
        }


class ScopeTracker:
    """Routes bindings to the scope that owns them."""

    def __init__(
        self,
        state: AnalysisState,
        mode: ScopeMode = ScopeMode.LEXICAL,
    ) -> None:
        self.state = state
        self.mode = mode
        self._stack: List[Scope] = []

    @property
    def depth(self) -> int:
        """Number of currently open scopes."""
        if self.mode is ScopeMode.LAST_OPENED:
            return len(self.state.scopes)
        return len(self._stack)

    def open_scope(self, name: str, line: int, kind: FnKind = FnKind.FUNCTION) -> Scope:
        scope = Scope(name=name, declared_at=line, kind=kind)
        self.state.scopes.append(scope)
        self._stack.append(scope)
        logger.debug("open %s %s (line %d)", kind.value, name, line)
        return scope

    def close_scope(self) -> None:
        """Leave the innermost open scope (a no-op in LAST_OPENED mode)."""
        if self.mode is ScopeMode.LEXICAL:
            self._stack.pop()

    def current_scope(self, identifier: str = "", line: int = 0) -> Scope:
        """The scope a binding at this point belongs to.

        Raises:
            BindingOutsideScopeError: no function or method is open.
        """
        scopes = self.state.scopes if self.mode is ScopeMode.LAST_OPENED else self._stack
        if not scopes:
            raise BindingOutsideScopeError(
                identifier or "<unknown>", path=self.state.path, line=line
            )
        return scopes[-1]

    def record(self, identifier: str, line: int) -> bool:
        """Record a binding in the current scope; ``True`` if it shadows."""
        shadows = self.current_scope(identifier, line).record(identifier, line)
        if shadows:
            logger.debug("%s shadowed at line %d", identifier, line)
        return shadows
