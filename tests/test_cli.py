"""Tests for the command-line interface."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import pytest

from leg.cli import build_parser, main, parse_depth_arg, run_file, resolve_options


def _script(tmp_path: Path, source: str, name: str = "script.leg") -> Path:
    path = tmp_path / name
    path.write_text(source, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Argument helpers
# ---------------------------------------------------------------------------


class TestParseHelpers:
    def test_parse_depth_arg(self) -> None:
        assert parse_depth_arg("25") == 25

    def test_parse_depth_arg_not_a_number(self) -> None:
        with pytest.raises(argparse.ArgumentTypeError, match="expected an integer"):
            parse_depth_arg("deep")

    def test_parse_depth_arg_not_positive(self) -> None:
        with pytest.raises(argparse.ArgumentTypeError, match="must be positive"):
            parse_depth_arg("0")


class TestArgParsing:
    def test_script_only(self) -> None:
        ns = build_parser().parse_args(["a.leg"])
        assert ns.script == "a.leg"
        assert ns.config is None
        assert ns.max_depth is None
        assert not ns.tokens
        assert not ns.debug
        assert not ns.verbose

    def test_all_flags(self) -> None:
        ns = build_parser().parse_args(
            ["a.leg", "--config", "c.toml", "--max-depth", "30", "--tokens", "--debug", "-v"]
        )
        assert ns.config == "c.toml"
        assert ns.max_depth == 30
        assert ns.tokens and ns.debug and ns.verbose

    def test_bad_max_depth_exits(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["a.leg", "--max-depth", "-3"])
        assert exc_info.value.code == 2

    def test_missing_script_exits(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------


class TestExitCodes:
    def test_success(self, tmp_path: Path, capsys) -> None:
        script = _script(tmp_path, 'print("hi");\n')
        assert main([str(script)]) == 0
        assert capsys.readouterr().out == "hi\n"

    def test_lex_error_returns_1(self, tmp_path: Path, capsys) -> None:
        script = _script(tmp_path, "x = 1 ?\n")
        assert main([str(script)]) == 1
        err = capsys.readouterr().err
        assert "unexpected character '?'" in err
        assert f"{script}:1:7" in err

    def test_parse_error_returns_1(self, tmp_path: Path, capsys) -> None:
        script = _script(tmp_path, "x = 1 2;\n")
        assert main([str(script)]) == 1
        assert "expected ';' after statement" in capsys.readouterr().err

    def test_eval_error_returns_2(self, tmp_path: Path, capsys) -> None:
        script = _script(tmp_path, "x = doesNotExist;\n")
        assert main([str(script)]) == 2
        err = capsys.readouterr().err
        assert "undefined variable 'doesNotExist'" in err
        assert f"{script}:1:5" in err

    def test_eval_error_shows_call_chain(self, tmp_path: Path, capsys) -> None:
        script = _script(tmp_path, "f :: () { missing; }\nf();\n")
        assert main([str(script)]) == 2
        assert "in call chain: f()" in capsys.readouterr().err

    def test_deep_nesting_returns_1(self, tmp_path: Path, capsys) -> None:
        script = _script(tmp_path, "x = " + "(" * 2000 + "1" + ")" * 2000 + ";\n")
        assert main([str(script)]) == 1
        assert "expression nested too deeply" in capsys.readouterr().err

    def test_missing_file_returns_2(self, tmp_path: Path, capsys) -> None:
        assert main([str(tmp_path / "absent.leg")]) == 2
        assert "error: cannot read" in capsys.readouterr().err

    def test_output_before_error_is_kept(self, tmp_path: Path, capsys) -> None:
        script = _script(tmp_path, "print(1);\nboom;\n")
        assert main([str(script)]) == 2
        assert capsys.readouterr().out == "1\n"


# ---------------------------------------------------------------------------
# Stack depth
# ---------------------------------------------------------------------------


COUNT = "count :: (n) { if (n) { count(n - 1); } }\ncount(3);\n"


class TestMaxDepth:
    def test_default_depth_overflows(self, tmp_path: Path, capsys) -> None:
        script = _script(tmp_path, COUNT)
        assert main([str(script)]) == 2
        assert "stack overflow (maximum depth 10 exceeded)" in capsys.readouterr().err

    def test_flag_raises_limit(self, tmp_path: Path) -> None:
        script = _script(tmp_path, COUNT)
        assert main([str(script), "--max-depth", "20"]) == 0


# ---------------------------------------------------------------------------
# Dumps and logging
# ---------------------------------------------------------------------------


class TestDiagnostics:
    def test_tokens_dump(self, tmp_path: Path, capsys) -> None:
        script = _script(tmp_path, "x = 1;\n")
        assert main([str(script), "--tokens"]) == 0
        err = capsys.readouterr().err
        assert "1:1 IDENTIFIER 'x'" in err
        assert "1:6 END_OF_STATEMENT ';'" in err

    def test_ast_dump(self, tmp_path: Path, capsys) -> None:
        script = _script(tmp_path, "x = 1;\n")
        assert main([str(script), "--debug"]) == 0
        err = capsys.readouterr().err
        assert err.startswith("Ast\n")
        assert "Assignment x" in err

    def test_verbose_logs_calls(self, tmp_path: Path, caplog) -> None:
        script = _script(tmp_path, "f :: () { 1; }\nf();\n")
        with caplog.at_level(logging.DEBUG, logger="leg.eval"):
            assert main([str(script), "-v"]) == 0
        assert any("call f" in rec.getMessage() for rec in caplog.records)


class TestRunFile:
    def test_returns_script_value(self, tmp_path: Path) -> None:
        script = _script(tmp_path, "")
        ns = build_parser().parse_args([str(script)])
        opts = resolve_options(ns)
        value = run_file(opts, "2 * 21;")
        assert value.value == 42.0
