# shadowlight/driver.py
"""
Batch driver: runs the analysis over many files, one at a time.

Printing policy
---------------
* Files named explicitly are always reported, shadowing or not.
* Files found by a directory walk are reported only when they contain
  shadowing.
* A file that cannot be read, parsed or analysed is logged as a warning
  and skipped; the batch goes on.

Every file is fully processed before the next one is opened, and no state
is shared between files.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

from shadowlight.config import AnalysisConfig
from shadowlight.discovery import walk_sources
from shadowlight.errors import ShadowlightError, SourceReadError
from shadowlight.scopes import AnalysisState
from shadowlight.visitor import analyze_source

logger = logging.getLogger(__name__)

__all__ = [
    "BatchResult",
    "FileResult",
    "analyze_file",
    "read_source",
    "run_directory",
    "run_files",
]

EXIT_OK = 0
EXIT_SHADOWED = 1
EXIT_INFRA = 2


@dataclass
class FileResult:
    """Outcome of analysing one file: a state, or the error that stopped it."""
    path: str
    state: Optional[AnalysisState] = None
    error: Optional[ShadowlightError] = None
    explicit: bool = True

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def has_shadow(self) -> bool:
        return self.state is not None and self.state.has_shadow

    @property
    def should_print(self) -> bool:
        if self.state is None:
            return False
        return self.explicit or self.state.has_shadow


@dataclass
class BatchResult:
    results: List[FileResult] = field(default_factory=list)

    @property
    def states(self) -> List[AnalysisState]:
        return [r.state for r in self.results if r.state is not None]

    @property
    def errors(self) -> List[ShadowlightError]:
        return [r.error for r in self.results if r.error is not None]

    @property
    def has_shadow(self) -> bool:
        return any(r.has_shadow for r in self.results)

    @property
    def explicit_failures(self) -> int:
        return sum(1 for r in self.results if r.explicit and not r.ok)

    def exit_code(self, strict: bool = False) -> int:
        """``2`` if a named file failed, ``1`` for shadowing under *strict*."""
        if self.explicit_failures:
            return EXIT_INFRA
        if strict and self.has_shadow:
            return EXIT_SHADOWED
        return EXIT_OK

    def summary(self) -> str:
        shadowed = sum(1 for r in self.results if r.has_shadow)
        return (
            f"{len(self.results)} file(s) checked, {shadowed} with shadowing, "
            f"{len(self.errors)} skipped"
        )


def read_source(path: str) -> str:
    """Read a UTF-8 source file.

    Raises:
        SourceReadError: the file is missing, unreadable or not UTF-8.
    """
    try:
        with open(path, encoding="utf-8") as fh:
            return fh.read()
    except UnicodeDecodeError as exc:
        raise SourceReadError(f"not valid UTF-8 ({exc.reason})", path=path) from exc
    except OSError as exc:
        raise SourceReadError(exc.strerror or str(exc), path=path) from exc


def analyze_file(
    path: str,
    config: Optional[AnalysisConfig] = None,
    explicit: bool = True,
) -> FileResult:
    """Read, parse and analyse one file; errors are captured, not raised."""
    logger.info("analysing %s", path)
    try:
        state = analyze_source(read_source(path), path, config)
    except ShadowlightError as exc:
        logger.warning("skipping %s", exc)
        return FileResult(path, error=exc, explicit=explicit)
    return FileResult(path, state=state, explicit=explicit)


Emitter = Callable[[FileResult], None]


def _run(paths: Iterable[str], config, explicit: bool, emit: Optional[Emitter]) -> BatchResult:
    batch = BatchResult()
    for path in paths:
        result = analyze_file(path, config, explicit=explicit)
        batch.results.append(result)
        if emit is not None and result.should_print:
            emit(result)
    logger.info("%s", batch.summary())
    return batch


def run_files(
    paths: Iterable[str],
    config: Optional[AnalysisConfig] = None,
    emit: Optional[Emitter] = None,
) -> BatchResult:
    """Analyse an explicit list of files; every analysed file is emitted."""
    return _run(paths, config, True, emit)


def run_directory(
    root: str,
    config: Optional[AnalysisConfig] = None,
    emit: Optional[Emitter] = None,
) -> BatchResult:
    """Analyse every source file under *root*; only shadowed files are emitted."""
    return _run(walk_sources(root, config), config, False, emit)
