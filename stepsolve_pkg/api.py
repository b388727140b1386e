"""Public API for StepSolve - the offline math engine entry points.

``can_solve_offline`` is a syntactic pre-filter a caller uses to route a
problem between this engine and an online solver. ``solve_offline`` picks a
solver from an ordered dispatch table and returns its derivation, raising on
failure. ``solve_or_error`` wraps it for callers that prefer an error field.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from .calculus import solve_definite_integral, solve_derivative, solve_indefinite_integral
from .config import (
    DEFINITE_INTEGRAL_REGEX,
    DERIVATIVE_REGEX,
    FIND_ROOTS_PREFIX_REGEX,
    FIND_ROOTS_SUFFIX,
    HAS_X_CUBED_REGEX,
    HAS_X_REGEX,
    HAS_X_SQUARED_REGEX,
    INDEFINITE_INTEGRAL_REGEX,
    OFFLINE_SOLVABLE_REGEX,
)
from .evaluator import solve_arithmetic
from .logging_config import get_logger
from .parser import is_balanced, sanitize
from .solver import solve_cubic_equation, solve_linear_equation, solve_quadratic_equation
from .symbols import extract_symbols
from .types import (
    CalculationResponse,
    ParseError,
    SolverError,
    ValidationError,
)

logger = get_logger("api")

GENERIC_FAILURE = "The expression could not be solved by the offline engine."


@dataclass(frozen=True)
class DispatchRule:
    """A solver together with the predicate that selects it."""

    name: str
    matches: Callable[[str], bool]
    handler: Callable[[str], CalculationResponse]


def _is_equation_with(pattern) -> Callable[[str], bool]:
    return lambda text: bool(pattern.search(text)) and "=" in text


# Tried in order; the first rule whose predicate matches handles the problem.
# The definite integral must precede the indefinite one since both start with
# "integrate(".
DISPATCH_RULES: tuple[DispatchRule, ...] = (
    DispatchRule(
        "definite_integral",
        lambda text: bool(DEFINITE_INTEGRAL_REGEX.search(text)),
        solve_definite_integral,
    ),
    DispatchRule(
        "indefinite_integral",
        lambda text: bool(INDEFINITE_INTEGRAL_REGEX.search(text)),
        solve_indefinite_integral,
    ),
    DispatchRule(
        "derivative",
        lambda text: bool(DERIVATIVE_REGEX.search(text)),
        solve_derivative,
    ),
    DispatchRule("cubic", _is_equation_with(HAS_X_CUBED_REGEX), solve_cubic_equation),
    DispatchRule("quadratic", _is_equation_with(HAS_X_SQUARED_REGEX), solve_quadratic_equation),
    DispatchRule("linear", _is_equation_with(HAS_X_REGEX), solve_linear_equation),
    DispatchRule("arithmetic", lambda text: True, solve_arithmetic),
)


def can_solve_offline(equation: str) -> bool:
    """Decide from surface syntax whether the offline engine should try a problem.

    A True result does not guarantee that solving succeeds.

    Args:
        equation: Raw user input

    Returns:
        True for cubic, integral and derivative shapes, or text made only of
        lower-case letters, digits, whitespace and + - * / ( ) . ^ = ,
    """
    sanitized = equation.strip().lower()
    if not sanitized:
        return False
    if HAS_X_CUBED_REGEX.search(sanitized):
        return True
    if DEFINITE_INTEGRAL_REGEX.search(sanitized):
        return True
    if INDEFINITE_INTEGRAL_REGEX.search(sanitized):
        return True
    if DERIVATIVE_REGEX.search(sanitized):
        return True
    return bool(OFFLINE_SOLVABLE_REGEX.match(sanitized))


def rewrite_find_roots(text: str) -> str:
    """Turn "f(x) = <expr>, find roots" into "<expr> = 0"; other text is unchanged."""
    if FIND_ROOTS_SUFFIX not in text:
        return text
    rewritten = FIND_ROOTS_PREFIX_REGEX.sub("", text, count=1)
    return rewritten.replace(FIND_ROOTS_SUFFIX, " = 0").strip()


def select_rule(text: str) -> DispatchRule:
    """Return the first dispatch rule matching sanitized text."""
    return next(rule for rule in DISPATCH_RULES if rule.matches(text))


def solve_offline(equation: str) -> CalculationResponse:
    """Solve a problem with the offline engine.

    Args:
        equation: Raw user input (e.g., "2x + 5 = 11", "d/dx(3x^2)")

    Returns:
        CalculationResponse with the final answer, steps and symbol glossary

    Raises:
        ValidationError: For empty, oversized or malformed input
        ParseError: If an arithmetic expression does not reduce to a number
        SolverError: If the problem cannot be solved by the chosen method

    Example:
        >>> from stepsolve_pkg.api import solve_offline
        >>> solve_offline("2x + 5 = 11").final_answer
        'x = 3'
    """
    sanitized = sanitize(equation)
    symbols = extract_symbols(sanitized)
    balanced, position = is_balanced(sanitized)
    if not balanced:
        raise ValidationError(
            f"Mismatched parentheses at position {position}.", "MISMATCHED_PARENS"
        )

    text = rewrite_find_roots(sanitized)
    rule = select_rule(text)
    context = {"solver": rule.name, "problem": text}
    logger.debug("Dispatching problem", extra=context)
    try:
        response = rule.handler(text)
    except (ValidationError, ParseError, SolverError):
        raise
    except Exception as e:
        logger.error(f"Unexpected solver error: {e}", exc_info=True, extra=context)
        raise SolverError(GENERIC_FAILURE, "OFFLINE_UNSOLVABLE") from e

    response.symbols = symbols
    return response


def solve_or_error(equation: str) -> CalculationResponse:
    """Solve offline, reporting failure through the response's error field.

    Example:
        >>> from stepsolve_pkg.api import solve_or_error
        >>> solve_or_error("5/0").error
        'Division by zero is not allowed.'
    """
    try:
        return solve_offline(equation)
    except (ValidationError, ParseError, SolverError) as e:
        return CalculationResponse(final_answer="", error=str(e))
