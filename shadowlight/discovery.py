# shadowlight/discovery.py
"""Finding the Rust files to analyse."""

from __future__ import annotations

import fnmatch
import glob
import logging
import os
from typing import Iterable, Iterator, List, Optional

from shadowlight.config import AnalysisConfig

logger = logging.getLogger(__name__)

__all__ = ["expand_file_args", "has_source_ext", "is_excluded", "walk_sources"]

_GLOB_CHARS = frozenset("*?[")


def has_source_ext(path: str, config: AnalysisConfig) -> bool:
    return any(path.endswith(ext) for ext in config.extensions)


def is_excluded(path: str, config: AnalysisConfig) -> bool:
    """True if *path* or its base name matches an ``exclude`` glob."""
    name = os.path.basename(path)
    return any(
        fnmatch.fnmatch(path, pat) or fnmatch.fnmatch(name, pat)
        for pat in config.exclude
    )


def _walk_error(err: OSError) -> None:
    logger.warning("cannot read %s: %s", err.filename, err.strerror or err)


def walk_sources(root: str, config: Optional[AnalysisConfig] = None) -> Iterator[str]:
    """Yield every source file under *root*, recursively, in sorted order.

    A *root* that is itself a file is yielded when it has a source
    extension.  Unreadable directories are logged and skipped.
    """
    config = config or AnalysisConfig()
    if os.path.isfile(root):
        if has_source_ext(root, config) and not is_excluded(root, config):
            yield root
        return
    if not os.path.isdir(root):
        logger.warning("no such directory: %s", root)
        return

    for dirpath, dirnames, filenames in os.walk(
        root, onerror=_walk_error, followlinks=config.follow_symlinks
    ):
        # In place: os.walk descends into what is left, in this order.
        dirnames[:] = sorted(
            d for d in dirnames if not is_excluded(os.path.join(dirpath, d), config)
        )
        for name in sorted(filenames):
            path = os.path.join(dirpath, name)
            if not has_source_ext(path, config) or is_excluded(path, config):
                continue
            yield path


def expand_file_args(args: Iterable[str]) -> List[str]:
    """Expand ``--files`` arguments.

    An argument naming an existing path is kept as is; otherwise it is
    treated as a glob pattern (``**`` allowed).  A pattern with no match is
    kept verbatim so the read failure is reported for it.
    """
    files: List[str] = []
    for arg in args:
        if os.path.exists(arg) or not _GLOB_CHARS.intersection(arg):
            files.append(arg)
            continue
        matches = sorted(glob.glob(arg, recursive=True))
        if not matches:
            logger.warning("pattern matched no files: %s", arg)
            files.append(arg)
            continue
        files.extend(m for m in matches if os.path.isfile(m))
    return files
