"""Dedicated calculus operations module.

Symbolic derivatives and antiderivatives of polynomials use the power rule on
terms from ``parse_general_polynomial``. Definite integrals are approximated
with composite Simpson's rule, evaluating the integrand through the arithmetic
evaluator at every sample point.
"""

from __future__ import annotations

import math

import numpy as np

from .config import (
    DEFINITE_INTEGRAL_REGEX,
    DERIVATIVE_REGEX,
    DISPLAY_DECIMALS,
    INDEFINITE_INTEGRAL_REGEX,
    INTEGRAL_RESULT_DECIMALS,
    SIMPSON_INTERVALS,
)
from .evaluator import evaluate, solve_arithmetic
from .logging_config import get_logger
from .parser import (
    format_number,
    format_term,
    join_terms,
    parse_general_polynomial,
    round_to,
)
from .types import (
    CalculationResponse,
    CalculationStep,
    ParseError,
    SolverError,
    ValidationError,
)

logger = get_logger("calculus")


def solve_derivative(equation: str) -> CalculationResponse:
    """Differentiate a polynomial written as d/dx(...).

    Args:
        equation: Text such as "d/dx(3x^2 + 2x - 5)"

    Returns:
        CalculationResponse with the derivative (e.g., "6x + 2")

    Raises:
        ValidationError: If the text is not a d/dx(...) call
    """
    steps = [CalculationStep(equation, "Starting with the derivative expression.", "Initial Expression")]
    match = DERIVATIVE_REGEX.search(equation)
    if not match or not match.group(1):
        raise ValidationError("Invalid derivative format. Use d/dx(...)", "INVALID_FORMAT")
    inner = match.group(1)
    steps.append(
        CalculationStep(
            inner,
            "Identify the expression to differentiate with respect to $x$.",
            "Isolate Expression",
        )
    )

    derivative_terms = []
    for term in parse_general_polynomial(inner):
        coeff = format_number(term.coefficient)
        if term.power == 0:
            steps.append(
                CalculationStep(
                    f"d/dx({coeff}) = 0",
                    f"The derivative of a constant (${coeff}$) is 0.",
                    "Constant Rule",
                )
            )
            continue
        new_coeff = term.coefficient * term.power
        new_power = term.power - 1
        power = format_number(term.power)
        steps.append(
            CalculationStep(
                f"d/dx({format_term(term.coefficient, term.power)}) = {format_term(new_coeff, new_power)}",
                "Apply the power rule ($d/dx(ax^n) = anx^{n-1}$) to the term "
                f"${coeff}x^{power}$. The new coefficient is ${coeff} \\cdot {power} = "
                f"{format_number(new_coeff)}$ and the new power is ${power} - 1 = "
                f"{format_number(new_power)}$.",
                "Power Rule",
            )
        )
        if new_coeff != 0:
            derivative_terms.append(format_term(new_coeff, new_power))

    final_answer = join_terms(derivative_terms)
    steps.append(
        CalculationStep(
            final_answer,
            "Combine the derivatives of each term to get the final result.",
            "Sum Rule / Final Answer",
        )
    )
    return CalculationResponse(final_answer=final_answer, steps=steps)


def solve_indefinite_integral(equation: str) -> CalculationResponse:
    """Integrate a polynomial written as integrate(...).

    Coefficients of the antiderivative are rounded to DISPLAY_DECIMALS places
    and terms that round to zero are dropped.

    Args:
        equation: Text such as "integrate(4x^3)"

    Returns:
        CalculationResponse with the antiderivative plus C (e.g., "x^4 + C")

    Raises:
        ValidationError: If the text is not an integrate(...) call
    """
    steps = [
        CalculationStep(equation, "Starting with the indefinite integral expression.", "Initial Expression")
    ]
    match = INDEFINITE_INTEGRAL_REGEX.search(equation)
    if not match or not match.group(1):
        raise ValidationError("Invalid integral format. Use integrate(...)", "INVALID_FORMAT")
    inner = match.group(1)
    steps.append(
        CalculationStep(
            f"∫({inner}) dx",
            "Identify the expression to integrate with respect to $x$.",
            "Isolate Expression",
        )
    )

    integral_terms = []
    for term in parse_general_polynomial(inner):
        new_power = term.power + 1
        new_coeff = round_to(term.coefficient / new_power, DISPLAY_DECIMALS)
        coeff = format_number(term.coefficient)
        power = format_number(term.power)
        new_term = format_term(new_coeff, new_power)
        steps.append(
            CalculationStep(
                f"∫{coeff}x^{power} dx = {new_term}",
                "Apply the reverse power rule ($∫ax^n dx = (a/(n+1))x^{n+1}$) to the term "
                f"${coeff}x^{power}$. The new coefficient is ${coeff} / {format_number(new_power)} = "
                f"{format_number(new_coeff)}$ and the new power is ${power} + 1 = "
                f"{format_number(new_power)}$.",
                "Reverse Power Rule",
            )
        )
        if new_coeff != 0:
            integral_terms.append(new_term)

    final_answer = f"{join_terms(integral_terms)} + C"
    steps.append(
        CalculationStep(
            final_answer,
            "Combine the integrals of each term and add the constant of integration, $C$, "
            "to represent all possible antiderivatives.",
            "Add Constant of Integration",
        )
    )
    return CalculationResponse(final_answer=final_answer, steps=steps)


def evaluate_at(expression: str, x: float) -> float:
    """Evaluate an expression in x at a point, or NaN if it cannot be evaluated.

    Every x is replaced by the parenthesized value, written positionally so
    that a tiny sample such as 1e-05 is not read as 1 * e - 5.
    """
    value = np.format_float_positional(x, trim="-")
    substituted = expression.replace("x", f"({value})")
    try:
        return evaluate(substituted)
    except (ParseError, ValidationError, SolverError) as e:
        logger.debug("Could not evaluate %r: %s", substituted, e)
        return math.nan


def simpson(expression: str, a: float, b: float, n: int = SIMPSON_INTERVALS) -> float:
    """Composite Simpson's rule over [a, b] with n (even) subintervals.

    A sample that cannot be evaluated is NaN and makes the whole sum NaN.
    """
    points = np.linspace(a, b, n + 1)
    weights = np.ones(n + 1)
    weights[1:-1:2] = 4
    weights[2:-1:2] = 2
    samples = np.array([evaluate_at(expression, float(p)) for p in points])
    h = (b - a) / n
    return float(h / 3 * np.dot(weights, samples))


def solve_definite_integral(equation: str) -> CalculationResponse:
    """Numerically integrate integrate(expression, from, to).

    The bounds may be arithmetic expressions and are evaluated first.

    Args:
        equation: Text such as "integrate(x^2, 0, 3)"

    Returns:
        CalculationResponse with the value to INTEGRAL_RESULT_DECIMALS places

    Raises:
        ValidationError: If the text is not an integrate(expr, from, to) call
        SolverError: If the bounds or the result are not finite
    """
    steps = [CalculationStep(equation, "Starting with the definite integral expression.", "Initial Expression")]
    match = DEFINITE_INTEGRAL_REGEX.search(equation)
    if not match:
        raise ValidationError(
            "Invalid definite integral format. Use integrate(expression, from, to)",
            "INVALID_FORMAT",
        )
    expression, lower_src, upper_src = match.groups()
    steps.append(
        CalculationStep(
            f"∫({expression}) dx from {lower_src} to {upper_src}",
            "Identify the expression and the lower and upper bounds of integration.",
            "Parse Integral",
        )
    )

    bounds = []
    for src, label in ((lower_src, "lower"), (upper_src, "upper")):
        result = solve_arithmetic(src)
        value = float(result.final_answer)
        if result.steps:
            steps.append(
                CalculationStep(
                    f"{src} = {format_number(value)}",
                    f"Evaluate the {label} bound.",
                    "Bounds Evaluation",
                )
            )
        bounds.append(value)
    a, b = bounds
    if not (math.isfinite(a) and math.isfinite(b)):
        raise SolverError("Invalid integral bounds.", "INVALID_BOUNDS")

    n = SIMPSON_INTERVALS
    h = (b - a) / n
    value = simpson(expression, a, b, n)
    if not math.isfinite(value):
        raise SolverError(
            "Could not compute the integral. The expression may be invalid for the given range.",
            "NON_FINITE_RESULT",
        )

    steps.append(
        CalculationStep(
            f"h = ({format_number(b)} - {format_number(a)})/{n} = {h:.4g}",
            f"Using Simpson's Rule for numerical integration with n={n} intervals. "
            "The step size $h$ is calculated.",
            "Numerical Method Setup",
        )
    )
    steps.append(
        CalculationStep(
            "∫ ≈ (h/3) * [f(a) + 4f(a+h) + 2f(a+2h) + ... + f(b)]",
            f"The integral is approximated by calculating the weighted sum of the function at {n + 1} points.",
            "Apply Simpson's Rule",
        )
    )
    final_answer = f"{value:.{INTEGRAL_RESULT_DECIMALS}f}"
    steps.append(
        CalculationStep(
            f"Result ≈ {final_answer}",
            "The final calculated value of the definite integral.",
            "Final Answer",
        )
    )
    return CalculationResponse(final_answer=final_answer, steps=steps)
