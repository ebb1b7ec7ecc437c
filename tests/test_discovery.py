# tests/test_discovery.py
"""
Tests for source discovery: directory walks and ``--files`` expansion.
"""

import logging
import os

import pytest

from shadowlight.config import AnalysisConfig
from shadowlight.discovery import expand_file_args, is_excluded, walk_sources


@pytest.fixture
def tree(tmp_path):
    for rel in ("b.rs", "a.rs", "notes.txt", "sub/c.rs", "target/d.rs"):
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("fn f() {}\n")
    return tmp_path


def rel(paths, root):
    return [os.path.relpath(p, root).replace(os.sep, "/") for p in paths]


class TestWalk:

    def test_sorted_and_filtered_by_extension(self, tree):
        found = list(walk_sources(str(tree)))
        assert rel(found, tree) == ["a.rs", "b.rs", "sub/c.rs", "target/d.rs"]

    def test_other_extension(self, tree):
        config = AnalysisConfig(extensions=("txt",))
        assert rel(walk_sources(str(tree), config), tree) == ["notes.txt"]

    def test_exclude_prunes_directories(self, tree):
        config = AnalysisConfig(exclude=("target",))
        assert rel(walk_sources(str(tree), config), tree) == ["a.rs", "b.rs", "sub/c.rs"]

    def test_exclude_files(self, tree):
        config = AnalysisConfig(exclude=("b.*",))
        assert "b.rs" not in rel(walk_sources(str(tree), config), tree)

    def test_root_file(self, tree):
        path = str(tree / "a.rs")
        assert list(walk_sources(path)) == [path]
        assert list(walk_sources(str(tree / "notes.txt"))) == []

    def test_missing_root(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING, logger="shadowlight"):
            assert list(walk_sources(str(tmp_path / "nope"))) == []
        assert "no such directory" in caplog.text


class TestIsExcluded:

    def test_full_path_or_basename(self):
        config = AnalysisConfig(exclude=("*/gen/*", "build.rs"))
        assert is_excluded("crate/gen/x.rs", config)
        assert is_excluded("crate/build.rs", config)
        assert not is_excluded("crate/src/main.rs", config)


class TestExpandFileArgs:

    def test_existing_paths_kept(self, tree):
        path = str(tree / "a.rs")
        assert expand_file_args([path]) == [path]

    def test_plain_missing_path_kept(self):
        assert expand_file_args(["missing.rs"]) == ["missing.rs"]

    def test_recursive_glob(self, tree):
        pattern = os.path.join(str(tree), "**", "*.rs")
        assert rel(expand_file_args([pattern]), tree) == [
            "a.rs", "b.rs", "sub/c.rs", "target/d.rs",
        ]

    def test_unmatched_glob_kept(self, tmp_path, caplog):
        pattern = os.path.join(str(tmp_path), "*.nothing")
        with caplog.at_level(logging.WARNING, logger="shadowlight"):
            assert expand_file_args([pattern]) == [pattern]
        assert "matched no files" in caplog.text
