"""Main entry point for running stepsolve_pkg as a module.

This allows running StepSolve with:
    python -m stepsolve_pkg -e "2+2"
    python -m stepsolve_pkg --check "x^2 - 4 = 0"

This is equivalent to running:
    python -m stepsolve_pkg.cli
    python stepsolve.py
"""

from __future__ import annotations

import sys

from .cli import main_entry

if __name__ == "__main__":
    sys.exit(main_entry())
