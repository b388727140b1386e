#!/usr/bin/env python3
"""
StepSolve - Offline Step-by-Step Math Engine

Main entry point for the StepSolve command line. This file serves as a thin
wrapper that delegates all functionality to the stepsolve_pkg package.

Copyright (c) 2025 The StepSolve Authors
All rights reserved.

Usage:
    python stepsolve.py -e "x^2 - 5x + 6 = 0"   # Solve one problem
    python stepsolve.py --check "2+2"           # Offline capability check
    python stepsolve.py --help                  # Show help
"""

from __future__ import annotations

import sys


def main() -> int:
    """
    Main entry point for StepSolve.

    Delegates all functionality to the stepsolve_pkg.cli module,
    which handles argument parsing, solving, and output formatting.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    try:
        from stepsolve_pkg.cli import main_entry

        return main_entry(sys.argv[1:])
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
        return 1
    except ImportError as e:
        print(f"Error: Failed to import stepsolve_pkg: {e}")
        print("Please ensure all dependencies are installed: pip install -e .")
        return 1


if __name__ == "__main__":
    sys.exit(main())
