# shadowlight/errors.py
"""
Error types for the shadowlight pipeline.

Error Hierarchy:
────────────────
  ShadowlightError (base)
  ├── SourceReadError          - file could not be read or decoded
  ├── SourceParseError         - source rejected by the Rust grammar
  ├── BindingOutsideScopeError - ``let`` found with no open function scope
  └── ConfigError              - invalid analysis configuration

Every per-file error carries the file path and, where known, a line and
column.  The batch driver catches them per file, logs a warning and moves
on; none of them aborts a batch run.
"""

from __future__ import annotations

from enum import Enum, unique
from typing import Any, Dict, Optional

from parsimonious.exceptions import ParseError


@unique
class ErrorPhase(Enum):
    """
    Pipeline phase where the error occurred.
    """

    READ = "read"            # Loading the source file
    PARSE = "parse"          # Grammar / tree lowering
    ANALYSIS = "analysis"    # Scope tracking and binding recording
    CONFIG = "config"        # Option validation


class ShadowlightError(Exception):
    """
    Base class for all shadowlight errors.

    Attributes:
        message: Human-readable description
        path: Source file the error belongs to (if any)
        line: 1-based line number (0 when unknown)
        column: 1-based column number (0 when unknown)
    """

    phase: ErrorPhase = ErrorPhase.ANALYSIS

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        line: int = 0,
        column: int = 0,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.line = line
        self.column = column

    @property
    def location(self) -> str:
        """``path:line:col`` with unknown parts left out."""
        loc = self.path or "<unknown>"
        if self.line:
            loc += f":{self.line}"
            if self.column:
                loc += f":{self.column}"
        return loc

    def __str__(self) -> str:
        return f"{self.location}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: Dict[str, Any] = {
            "error": type(self).__name__,
            "phase": self.phase.value,
            "message": self.message,
        }
        if self.path is not None:
            result["path"] = self.path
        if self.line:
            result["line"] = self.line
        if self.column:
            result["column"] = self.column
        return result


class SourceReadError(ShadowlightError):
    """The file could not be read (missing, permissions, bad encoding)."""

    phase = ErrorPhase.READ


class SourceParseError(ShadowlightError):
    """The source text is not valid for the Rust grammar."""

    phase = ErrorPhase.PARSE

    @classmethod
    def from_parsimonious(
        cls, exc: ParseError, path: Optional[str] = None
    ) -> "SourceParseError":
        """Wrap a parsimonious ``ParseError`` keeping its position."""
        line = exc.line() if exc.text is not None else 0
        column = exc.column() if exc.text is not None else 0
        rule = getattr(exc.expr, "name", "") or "source"
        return cls(
            f"unable to parse ({rule!s} failed)",
            path=path,
            line=line,
            column=column,
        )


class BindingOutsideScopeError(ShadowlightError):
    """
    A local binding was found while no function or method was open.

    Every ``let`` must sit inside a function body; meeting one outside
    means either the input is malformed (e.g. a block in a module-level
    ``const`` initializer) or the traversal lost track of its scopes.
    Fatal for the file being analysed only.
    """

    phase = ErrorPhase.ANALYSIS

    def __init__(
        self,
        identifier: str,
        *,
        path: Optional[str] = None,
        line: int = 0,
    ) -> None:
        super().__init__(
            f"binding outside any scope: {identifier!r}",
            path=path,
            line=line,
        )
        self.identifier = identifier


class ConfigError(ShadowlightError):
    """An analysis option has an invalid value."""

    phase = ErrorPhase.CONFIG
