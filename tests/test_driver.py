# tests/test_driver.py
"""
Tests for the batch driver: per-file isolation, printing policy, exit codes.
"""

import logging

import pytest

from shadowlight.driver import (
    EXIT_INFRA, EXIT_OK, EXIT_SHADOWED, analyze_file, read_source, run_directory, run_files,
)
from shadowlight.errors import BindingOutsideScopeError, SourceParseError, SourceReadError
from tests.conftest import BROKEN_RS, CLEAN_FN_RS, CONST_BLOCK_RS, SHADOW_FN_RS


class Collector:
    def __init__(self):
        self.paths = []

    def __call__(self, result):
        self.paths.append(result.path)


class TestReadSource:

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceReadError) as info:
            read_source(str(tmp_path / "missing.rs"))
        assert info.value.path.endswith("missing.rs")

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "latin1.rs"
        path.write_bytes(b"fn f() { let s = \"\xe9\"; }\n")
        with pytest.raises(SourceReadError, match="UTF-8"):
            read_source(str(path))


class TestAnalyzeFile:

    def test_ok(self, rs_file):
        result = analyze_file(rs_file("a.rs", SHADOW_FN_RS))
        assert result.ok
        assert result.has_shadow
        assert result.should_print

    def test_error_is_captured(self, rs_file, caplog):
        with caplog.at_level(logging.WARNING, logger="shadowlight"):
            result = analyze_file(rs_file("bad.rs", BROKEN_RS))
        assert not result.ok
        assert isinstance(result.error, SourceParseError)
        assert not result.should_print
        assert "skipping" in caplog.text


class TestRunFiles:

    def test_every_analysed_file_is_emitted(self, rs_file):
        shadow = rs_file("a.rs", SHADOW_FN_RS)
        clean = rs_file("b.rs", CLEAN_FN_RS)
        emitted = Collector()
        batch = run_files([shadow, clean], emit=emitted)
        assert emitted.paths == [shadow, clean]
        assert batch.exit_code() == EXIT_OK
        assert batch.exit_code(strict=True) == EXIT_SHADOWED

    def test_failure_does_not_stop_the_batch(self, rs_file, tmp_path):
        missing = str(tmp_path / "missing.rs")
        outside = rs_file("c.rs", CONST_BLOCK_RS)
        shadow = rs_file("a.rs", SHADOW_FN_RS)
        emitted = Collector()
        batch = run_files([missing, outside, shadow], emit=emitted)
        assert emitted.paths == [shadow]
        assert [type(e) for e in batch.errors] == [SourceReadError, BindingOutsideScopeError]
        assert batch.explicit_failures == 2
        assert batch.exit_code() == EXIT_INFRA
        assert len(batch.states) == 1

    def test_summary(self, rs_file, tmp_path):
        batch = run_files([rs_file("a.rs", SHADOW_FN_RS), str(tmp_path / "gone.rs")])
        assert batch.summary() == "2 file(s) checked, 1 with shadowing, 1 skipped"


class TestRunDirectory:

    @pytest.fixture
    def crate(self, rs_file, tmp_path):
        rs_file("src/main.rs", SHADOW_FN_RS)
        rs_file("src/clean.rs", CLEAN_FN_RS)
        rs_file("src/broken.rs", BROKEN_RS)
        rs_file("build/outside.rs", CONST_BLOCK_RS)
        return tmp_path

    def test_only_shadowed_files_are_emitted(self, crate):
        emitted = Collector()
        batch = run_directory(str(crate), emit=emitted)
        assert [p.replace("\\", "/").rsplit("/", 2)[-2:] for p in emitted.paths] == [
            ["src", "main.rs"],
        ]
        assert len(batch.results) == 4
        assert len(batch.errors) == 2

    def test_walk_failures_do_not_change_exit_code(self, crate):
        batch = run_directory(str(crate))
        assert batch.explicit_failures == 0
        assert batch.exit_code() == EXIT_OK
        assert batch.exit_code(strict=True) == EXIT_SHADOWED

    def test_files_are_independent(self, rs_file, tmp_path):
        rs_file("a.rs", "fn main() {\n    let x = 1;\n}\n")
        rs_file("b.rs", "fn main() {\n    let x = 1;\n}\n")
        batch = run_directory(str(tmp_path))
        assert not batch.has_shadow
        assert [len(s.scopes) for s in batch.states] == [1, 1]
