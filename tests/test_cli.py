"""Tests for CLI functionality."""

import io
import json

import pytest

from stepsolve_pkg import config
from stepsolve_pkg.cli import main_entry, print_result_pretty
from stepsolve_pkg.types import CalculationResponse, CalculationStep


def test_cli_version(capsys):
    assert main_entry(["--version"]) == 0
    assert capsys.readouterr().out.strip() == config.VERSION


def test_cli_eval_human(capsys):
    assert main_entry(["-e", "2+2"]) == 0
    out = capsys.readouterr().out
    assert "Answer: 4" in out
    assert "Symbols:" in out


def test_cli_eval_json(capsys):
    assert main_entry(["--eval", "2x + 5 = 11", "--format", "json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["finalAnswer"] == "x = 3"
    assert data["steps"][0]["rule"] == "Initial Equation"


def test_cli_error_json(capsys):
    assert main_entry(["-e", "5/0", "--format", "json"]) == 1
    data = json.loads(capsys.readouterr().out)
    assert data["error"] == "Division by zero is not allowed."


def test_cli_error_human(capsys):
    assert main_entry(["-e", "sqrt(-1)"]) == 1
    assert capsys.readouterr().out.startswith("Error:")


@pytest.mark.parametrize(
    "problem, code, word",
    [("x^2 - 4 = 0", 0, "offline"), ("What is 2+2?", 1, "online")],
)
def test_cli_check(capsys, problem, code, word):
    assert main_entry(["--check", problem]) == code
    assert capsys.readouterr().out.strip() == word


def test_cli_check_json(capsys):
    assert main_entry(["--check", "2+2", "--format", "json"]) == 0
    assert json.loads(capsys.readouterr().out) == {"offline": True}


def test_cli_numeric_fallback(capsys, monkeypatch):
    monkeypatch.setattr(config, "NUMERIC_FALLBACK_ENABLED", False)
    assert main_entry(["-e", "x^3 - 2 = 0", "--numeric-fallback"]) == 0
    assert "Answer: x = 1.2599" in capsys.readouterr().out


def test_cli_reads_stdin(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("2+2\n\nd/dx(3x^2)\n"))
    assert main_entry([]) == 0
    out = capsys.readouterr().out
    assert "Answer: 4" in out
    assert "Answer: 6x" in out


def test_cli_stdin_exit_code_reports_failure(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("5/0\n1+1\n"))
    assert main_entry([]) == 1
    out = capsys.readouterr().out
    assert "Error: Division by zero is not allowed." in out
    assert "Answer: 2" in out


def test_print_result_pretty_numbers_steps(capsys):
    res = CalculationResponse(
        final_answer="3",
        steps=[CalculationStep("1 + 2", "Starting expression.", "Initial Expression")],
    )
    print_result_pretty(res)
    out = capsys.readouterr().out
    assert "Answer: 3" in out
    assert "  1. [Initial Expression] 1 + 2" in out
    assert "Symbols:" not in out


def test_launcher_delegates_to_cli(capsys, monkeypatch):
    import stepsolve

    monkeypatch.setattr("sys.argv", ["stepsolve.py", "--eval=-2^2"])
    assert stepsolve.main() == 0
    assert "Answer: -4" in capsys.readouterr().out
    assert "Copyright (c) 2025 The StepSolve Authors" in stepsolve.__doc__
