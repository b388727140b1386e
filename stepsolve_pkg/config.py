"""Centralized configuration for StepSolve.

This module defines:
- Numerical method settings (Simpson intervals, root tolerances)
- Display precision for roots and integrals
- Input validation limits
- Regex patterns used for classification and dispatch
- Function and constant tables for the arithmetic evaluator

Configuration can be overridden via:
- CLI flags (see cli.py)
- Environment variables (prefixed with STEPSOLVE_)
"""

import math
import os
import re

try:
    import importlib.metadata

    VERSION = importlib.metadata.version("stepsolve")
except Exception:
    # Fallback if package not installed
    VERSION = "1.0.0"

# Numerical integration
SIMPSON_INTERVALS = int(os.getenv("STEPSOLVE_SIMPSON_INTERVALS", "1000"))
if SIMPSON_INTERVALS % 2:
    SIMPSON_INTERVALS += 1  # Simpson's rule needs an even count

# Root finding
ROOT_TOLERANCE = float(
    os.getenv("STEPSOLVE_ROOT_TOLERANCE", "1e-9")
)  # Candidate root test and synthetic division remainder
ROOT_DEDUP_DECIMALS = int(os.getenv("STEPSOLVE_ROOT_DEDUP_DECIMALS", "6"))
NUMERIC_FALLBACK_ENABLED = (
    os.getenv("STEPSOLVE_NUMERIC_FALLBACK_ENABLED", "false").lower() == "true"
)  # Solve irrational cubics with nroots instead of failing
NUMERIC_TOLERANCE = float(
    os.getenv("STEPSOLVE_NUMERIC_TOLERANCE", "1e-8")
)  # For imaginary part filtering

# Display precision
DISPLAY_DECIMALS = int(os.getenv("STEPSOLVE_DISPLAY_DECIMALS", "4"))
INTEGRAL_RESULT_DECIMALS = int(os.getenv("STEPSOLVE_INTEGRAL_RESULT_DECIMALS", "6"))

# Input validation limits
MAX_INPUT_LENGTH = int(os.getenv("STEPSOLVE_MAX_INPUT_LENGTH", "10000"))  # characters
MAX_FACTORIAL = int(os.getenv("STEPSOLVE_MAX_FACTORIAL", "170"))

# Logging
LOG_LEVEL = os.getenv("STEPSOLVE_LOG_LEVEL", "WARNING")

# Classification and dispatch patterns (applied to lower-cased text)
OFFLINE_SOLVABLE_REGEX = re.compile(r"^[a-z0-9\s+\-*/().^=,]+$")
HAS_X_CUBED_REGEX = re.compile(r"x\^3")
HAS_X_SQUARED_REGEX = re.compile(r"x\^2")
HAS_X_REGEX = re.compile(r"x")
DERIVATIVE_REGEX = re.compile(r"d/dx\s*\((.+)\)")
INDEFINITE_INTEGRAL_REGEX = re.compile(r"integrate\s*\(([^,]+)\)")
DEFINITE_INTEGRAL_REGEX = re.compile(r"integrate\s*\((.+),\s*([^,]+),\s*([^,]+)\)")
FIND_ROOTS_PREFIX_REGEX = re.compile(r"f\(x\)\s*=")
FIND_ROOTS_SUFFIX = ", find roots"

# Numeric literal in positional notation; a trailing e is Euler's number (2e = 2 * e)
NUMBER_REGEX = re.compile(r"\d+\.?\d*|\.\d+")
# Leading numeric prefix, the way a lenient float reader consumes it
FLOAT_PREFIX_REGEX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

CONSTANTS = {
    "pi": math.pi,
    "e": math.e,
}

FUNCTION_NAMES = (
    "sin",
    "cos",
    "tan",
    "log",
    "ln",
    "asin",
    "acos",
    "atan",
    "sinh",
    "cosh",
    "tanh",
    "sqrt",
    "fact",
    "degtorad",
    "radtodeg",
)
