"""shadowlight/config.py — analysis tuning knobs."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, List, Tuple

from shadowlight.errors import ConfigError

logger = logging.getLogger(__name__)


class ScopeMode(enum.Enum):
    """How a ``let`` binding is attributed to a function scope."""

    # Innermost lexically enclosing function/method (scope stack).
    LEXICAL = "lexical"
    # Most recently opened function/method, never closed.  Matches
    # cargo-light output for nested functions.
    LAST_OPENED = "last-opened"


class PatternMode(enum.Enum):
    """How bound names are pulled out of a ``let`` pattern."""

    # Every binding of an arbitrarily nested pattern.
    NESTED = "nested"
    # Only identifier alternatives at the top level of the pattern.
    FLAT = "flat"


def _enum_value(enum_cls: Any, value: Any, option: str) -> Any:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        choices = ", ".join(m.value for m in enum_cls)
        raise ConfigError(
            f"invalid {option} {value!r} (choose from {choices})"
        ) from None


@dataclass
class AnalysisConfig:
    """Tuning knobs for one shadowlight run."""
    scope_mode: ScopeMode = ScopeMode.LEXICAL
    pattern_mode: PatternMode = PatternMode.NESTED
    extensions: Tuple[str, ...] = (".rs",)
    exclude: Tuple[str, ...] = ()
    follow_symlinks: bool = False

    def __post_init__(self) -> None:
        self.scope_mode = _enum_value(ScopeMode, self.scope_mode, "scope mode")
        self.pattern_mode = _enum_value(
            PatternMode, self.pattern_mode, "pattern mode"
        )
        self.extensions = tuple(
            ext if ext.startswith(".") else f".{ext}" for ext in self.extensions
        )
        self.exclude = tuple(self.exclude)

    def validate(self) -> List[str]:
        """Return a list of validation warnings (empty if valid)."""
        warnings: List[str] = []
        if not self.extensions:
            warnings.append("no source extensions: directory walks find nothing")
        for ext in self.extensions:
            if ext == ".":
                warnings.append("empty source extension '.'")
        return warnings

    @classmethod
    def from_args(cls, args: Any) -> "AnalysisConfig":
        """Build a config from an ``argparse.Namespace``."""
        config = cls(
            scope_mode=getattr(args, "scope_mode", ScopeMode.LEXICAL.value),
            pattern_mode=(
                PatternMode.FLAT
                if getattr(args, "flat_patterns", False)
                else PatternMode.NESTED
            ),
            extensions=tuple(getattr(args, "ext", None) or (".rs",)),
            exclude=tuple(getattr(args, "exclude", None) or ()),
            follow_symlinks=getattr(args, "follow_symlinks", False),
        )
        for w in config.validate():
            logger.warning("AnalysisConfig: %s", w)
        return config
