"""Command-line front end for the offline engine.

Usage:
    python -m stepsolve_pkg -e "2x + 5 = 11"
    python -m stepsolve_pkg -e "d/dx(3x^2)" --format json
    python -m stepsolve_pkg --check "\\int_0^1 x dx"
    echo "integrate(x, 0, 5)" | python -m stepsolve_pkg
"""

from __future__ import annotations

import argparse
import json
import sys

from . import config as _config
from .api import can_solve_offline, solve_offline
from .config import VERSION
from .logging_config import setup_logging
from .types import CalculationResponse, ParseError, SolverError, ValidationError


def print_result_pretty(res: CalculationResponse, output_format: str = "human") -> None:
    """Print a response in the requested format.

    Args:
        res: Response to print
        output_format: "json" for JSON output, "human" for human-readable
    """
    if output_format == "json":
        print(json.dumps(res.to_dict(), indent=2, ensure_ascii=False))
        return
    if res.error is not None:
        print("Error:", res.error)
        return
    print("Answer:", res.final_answer)
    for i, step in enumerate(res.steps, start=1):
        print(f"  {i}. [{step.rule}] {step.expression}")
        print(f"     {step.explanation}")
    if res.symbols:
        print("Symbols:")
        for symbol in res.symbols:
            print(f"  {symbol.symbol}  {symbol.name}: {symbol.meaning}")


def run_once(problem: str, output_format: str = "human") -> int:
    """Solve one problem and print it. Returns the exit code."""
    try:
        res = solve_offline(problem)
    except (ValidationError, ParseError, SolverError) as e:
        print_result_pretty(CalculationResponse(final_answer="", error=str(e)), output_format)
        return 1
    print_result_pretty(res, output_format)
    return 0


def main_entry(argv: list[str] | None = None) -> int:
    """
    Main entry point for the StepSolve CLI.

    Args:
        argv: Optional command-line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = argparse.ArgumentParser(prog="stepsolve")
    parser.add_argument(
        "-e",
        "--eval",
        type=str,
        help="Solve one problem and exit (non-interactive)",
        dest="eval_expr",
    )
    parser.add_argument(
        "--check",
        type=str,
        help="Report whether a problem can be solved offline (exit 0 if yes)",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["json", "human"],
        default="human",
        help="Output format: json (machine-readable) or human (human-readable)",
    )
    parser.add_argument(
        "--numeric-fallback",
        action="store_true",
        help="Approximate cubic roots numerically when no rational root exists",
    )
    parser.add_argument(
        "-v", "--version", action="store_true", help="Show program version"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set logging level (default: STEPSOLVE_LOG_LEVEL or WARNING)",
    )
    parser.add_argument("--log-file", type=str, help="Write logs to file")
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, log_file=args.log_file)
    if args.numeric_fallback:
        _config.NUMERIC_FALLBACK_ENABLED = True

    if args.version:
        print(VERSION)
        return 0
    if args.check is not None:
        solvable = can_solve_offline(args.check)
        if args.format == "json":
            print(json.dumps({"offline": solvable}))
        else:
            print("offline" if solvable else "online")
        return 0 if solvable else 1
    if args.eval_expr is not None:
        return run_once(args.eval_expr, args.format)

    exit_code = 0
    for line in sys.stdin:
        if not line.strip():
            continue
        exit_code = max(exit_code, run_once(line, args.format))
    return exit_code


if __name__ == "__main__":
    sys.exit(main_entry())
