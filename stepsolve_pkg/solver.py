"""Polynomial equation solving module.

This module provides:
- Linear equations (isolate x, divide by its coefficient)
- Quadratic equations via the discriminant and the quadratic formula
- Cubic equations via the Rational Root Theorem and synthetic division,
  handing the remaining quadratic to the shared coefficient-level routine

Every solver returns a complete CalculationResponse or raises; there are no
partial results. Roots are displayed sorted ascending and deduplicated.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

import sympy as sp

from . import config
from .config import DISPLAY_DECIMALS, NUMERIC_TOLERANCE, ROOT_DEDUP_DECIMALS, ROOT_TOLERANCE
from .logging_config import get_logger
from .parser import (
    format_number,
    format_term,
    join_terms,
    normalize_signs,
    parse_polynomial_coefficients,
    round_to,
    split_equation,
)
from .types import CalculationResponse, CalculationStep, PolynomialCoefficients, SolverError

logger = get_logger("solver")


def _parse_sides(equation: str, message: str) -> PolynomialCoefficients:
    left, right = split_equation(equation, message)
    return parse_polynomial_coefficients(left) - parse_polynomial_coefficients(right)


def _polynomial_text(coefficients: List[float]) -> str:
    """Render highest-degree-first coefficients, skipping zero terms."""
    degree = len(coefficients) - 1
    terms = [
        format_term(coeff, degree - i)
        for i, coeff in enumerate(coefficients)
        if coeff != 0
    ]
    return join_terms(terms)


def _standard_form(coefficients: List[float]) -> str:
    return f"{_polynomial_text(coefficients)} = 0"


def format_roots(roots: List[float], decimals: int = DISPLAY_DECIMALS) -> str:
    """Render roots as "x = r" or as a set, sorted ascending and deduplicated."""
    unique = sorted({round_to(root, decimals) for root in roots})
    if len(unique) > 1:
        return f"x \\in \\{{{', '.join(format_number(r) for r in unique)}\\}}"
    return f"x = {format_number(unique[0])}"


def solve_quadratic_from_coefficients(
    a: float, b: float, c: float
) -> Tuple[List[float], List[CalculationStep], Optional[str]]:
    """Solve a*x^2 + b*x + c = 0 using the discriminant.

    Args:
        a: Leading coefficient (non-zero)
        b: Linear coefficient
        c: Constant term

    Returns:
        (real roots, steps, message). The message is "No real solutions" when
        the discriminant is negative, None otherwise.
    """
    steps: List[CalculationStep] = []
    discriminant = b * b - 4 * a * c
    steps.append(
        CalculationStep(
            f"D = b^2 - 4ac = ({format_number(b)})^2 - 4({format_number(a)})"
            f"({format_number(c)}) = {format_number(discriminant)}",
            "Calculate the discriminant ($D = b^2 - 4ac$) to determine the number of real solutions.",
            "Calculate Discriminant",
        )
    )

    roots: List[float] = []
    message: Optional[str] = None
    if discriminant > 0:
        sqrt_d = discriminant**0.5
        x1 = (-b + sqrt_d) / (2 * a)
        x2 = (-b - sqrt_d) / (2 * a)
        roots.extend([x1, x2])
        steps.append(
            CalculationStep(
                "x = (-b ± \\sqrt{D}) / 2a",
                "Since the discriminant is positive, there are two distinct real roots. "
                "We apply the quadratic formula.",
                "Quadratic Formula",
            )
        )
        steps.append(
            CalculationStep(
                f"x_1 = {x1:.4f}, x_2 = {x2:.4f}",
                "Calculate the final roots for $x$.",
                "Calculate Roots",
            )
        )
    elif discriminant == 0:
        x = -b / (2 * a)
        roots.append(x)
        steps.append(
            CalculationStep(
                "x = -b / 2a",
                "Since the discriminant is zero, there is exactly one real root.",
                "Quadratic Formula (One Root)",
            )
        )
        steps.append(
            CalculationStep(f"x = {x:.4f}", "Calculate the final root for $x$.", "Calculate Root")
        )
    else:
        steps.append(
            CalculationStep(
                "D < 0",
                "Since the discriminant is negative, there are no real roots. "
                "The solutions are complex numbers.",
                "No Real Roots",
            )
        )
        message = "No real solutions"
    return roots, steps, message


def solve_linear_equation(equation: str) -> CalculationResponse:
    """Solve an equation of the form c1*x + d1 = c2*x + d2.

    Args:
        equation: Equation text with exactly one '='

    Returns:
        CalculationResponse with "x = value", "No solution" or "Infinite solutions"
    """
    steps = [
        CalculationStep(equation, "Starting with the original linear equation.", "Initial Equation")
    ]
    left_src, right_src = split_equation(
        equation, "Invalid linear equation format. Must contain one '=' sign."
    )
    left = parse_polynomial_coefficients(left_src)
    right = parse_polynomial_coefficients(right_src)

    x_coeff = left.c - right.c
    const_val = right.d - left.d

    left_expr = normalize_signs(f"{format_number(left.c)}x + {format_number(left.d)}")
    right_expr = normalize_signs(f"{format_number(right.c)}x + {format_number(right.d)}")
    steps.append(
        CalculationStep(
            f"{left_expr} = {right_expr}",
            "Identify variable ($x$) terms and constant terms on each side.",
            "Identify Terms",
        )
    )
    isolated = f"{format_number(x_coeff)}x = {format_number(const_val)}"
    steps.append(
        CalculationStep(
            isolated,
            "Move all variable terms to the left side and all constant terms to the right side of the equation.",
            "Isolate Variable Term",
        )
    )

    if x_coeff == 0:
        result = "Infinite solutions" if const_val == 0 else "No solution"
        steps.append(
            CalculationStep(
                isolated, "After combining terms, the coefficient of $x$ is zero.", "Simplification"
            )
        )
        return CalculationResponse(final_answer=result, steps=steps)

    steps.append(CalculationStep(isolated, "Simplify both sides of the equation.", "Simplification"))
    steps.append(
        CalculationStep(
            f"x = {format_number(const_val)} / {format_number(x_coeff)}",
            f"To solve for $x$, divide both sides by its coefficient, ${format_number(x_coeff)}$.",
            "Solve for Variable",
        )
    )
    final_answer = f"x = {format_number(const_val / x_coeff)}"
    steps.append(CalculationStep(final_answer, "The final solution for $x$.", "Final Answer"))
    return CalculationResponse(final_answer=final_answer, steps=steps)


def solve_quadratic_equation(equation: str) -> CalculationResponse:
    """Solve a quadratic equation, falling back to cubic or linear by degree.

    Args:
        equation: Equation text with exactly one '='

    Returns:
        CalculationResponse with the real roots or "No real solutions"
    """
    coeffs = _parse_sides(
        equation, "Invalid quadratic equation format. It must contain one '=' sign."
    )
    if coeffs.a != 0:
        logger.debug("Cubic term present, delegating %r to cubic solver", equation)
        return solve_cubic_equation(equation)
    if coeffs.b == 0:
        logger.debug("No x^2 term, delegating %r to linear solver", equation)
        return solve_linear_equation(equation)

    a, b, c = coeffs.b, coeffs.c, coeffs.d
    steps = [CalculationStep(equation, "Starting with the quadratic equation.", "Initial Equation")]
    steps.append(
        CalculationStep(
            _standard_form([a, b, c]),
            "Rearrange the equation into the standard form $ax^2 + bx + c = 0$. "
            f"Here, $a={format_number(a)}$, $b={format_number(b)}$, and $c={format_number(c)}$.",
            "Standard Form",
        )
    )
    roots, solve_steps, message = solve_quadratic_from_coefficients(a, b, c)
    steps.extend(solve_steps)
    final_answer = message or format_roots(roots)
    return CalculationResponse(final_answer=final_answer, steps=steps)


def integer_factors(n: float) -> List[int]:
    """Positive and negative divisors of |n|; [0] for zero, [] for non-integers."""
    if n == 0:
        return [0]
    if not float(n).is_integer():
        return []
    return [sign * int(f) for f in sp.divisors(abs(int(n))) for sign in (1, -1)]


def rational_root_candidates(a: float, d: float) -> List[float]:
    """Candidate rational roots p/q ordered by absolute value."""
    candidates = dict.fromkeys(
        p / q for p in integer_factors(d) for q in integer_factors(a) if q != 0
    )
    return sorted(candidates, key=abs)


def _nroots_fallback(
    coeffs: PolynomialCoefficients, steps: List[CalculationStep]
) -> CalculationResponse:
    x = sp.Symbol("x")
    poly = sp.Poly([coeffs.a, coeffs.b, coeffs.c, coeffs.d], x)
    real_roots = []
    for root in poly.nroots():
        value = complex(root)
        if abs(value.imag) < NUMERIC_TOLERANCE:
            real_roots.append(value.real)
    steps.append(
        CalculationStep(
            ", ".join(f"x \\approx {r:.4f}" for r in sorted(real_roots)),
            "No rational root exists, so the real roots are approximated numerically.",
            "Numerical Root Finding",
        )
    )
    return CalculationResponse(final_answer=format_roots(real_roots), steps=steps)


def solve_cubic_equation(equation: str) -> CalculationResponse:
    """Solve a cubic equation by finding one rational root and factoring.

    Candidate roots p/q come from the factors of the constant term (p) and the
    leading coefficient (q), tested smallest |p/q| first. The first root found
    is divided out synthetically and the remaining quadratic is solved with the
    discriminant.

    Args:
        equation: Equation text with exactly one '='

    Returns:
        CalculationResponse with all real roots

    Raises:
        SolverError: If no rational root exists (unless the numeric fallback is
            enabled) or synthetic division leaves a remainder
    """
    coeffs = _parse_sides(equation, "Invalid equation format. It must contain one '=' sign.")
    if coeffs.a == 0:
        logger.debug("No x^3 term, delegating %r to quadratic solver", equation)
        return solve_quadratic_equation(equation)

    a, b, c, d = coeffs.a, coeffs.b, coeffs.c, coeffs.d
    steps = [CalculationStep(equation, "Starting with the cubic equation.", "Initial Equation")]
    steps.append(
        CalculationStep(
            _standard_form([a, b, c, d]),
            "Rearrange the equation into standard form $ax^3+bx^2+cx+d=0$. "
            f"Here, $a={format_number(a)}$, $b={format_number(b)}$, "
            f"$c={format_number(c)}$, $d={format_number(d)}$.",
            "Standard Form",
        )
    )
    steps.append(
        CalculationStep(
            "x = p/q",
            "Using the Rational Root Theorem, we test potential rational roots. Potential roots are "
            "fractions $p/q$, where $p$ is a factor of the constant term ($d$) and $q$ is a factor "
            "of the leading coefficient ($a$).",
            "Rational Root Theorem",
        )
    )

    first_root = next(
        (
            r
            for r in rational_root_candidates(a, d)
            if abs(a * r**3 + b * r**2 + c * r + d) < ROOT_TOLERANCE
        ),
        None,
    )
    if first_root is None:
        if config.NUMERIC_FALLBACK_ENABLED:
            logger.debug(
                "No rational root, using numeric fallback",
                extra={"solver": "cubic", "problem": equation},
            )
            return _nroots_fallback(coeffs, steps)
        raise SolverError(
            "Could not find a rational root for this equation using the offline solver.",
            "NO_RATIONAL_ROOT",
        )
    root_text = format_number(first_root)
    steps.append(
        CalculationStep(
            f"f({root_text}) = 0",
            f"By testing the potential values, we find that $x = {root_text}$ is a root of the equation.",
            "Find First Root",
        )
    )

    # Synthetic division by (x - root)
    q_a = a
    q_b = b + first_root * q_a
    q_c = c + first_root * q_b
    remainder = d + first_root * q_c
    if abs(remainder) > ROOT_TOLERANCE:
        raise SolverError(
            "Synthetic division resulted in a non-zero remainder. Calculation error.",
            "INTERNAL_ERROR",
        )

    quadratic = _polynomial_text([q_a, q_b, q_c])
    steps.append(
        CalculationStep(
            f"(x - ({root_text}))({quadratic}) = 0",
            f"Using synthetic division with the root $x = {root_text}$, we can factor the original "
            f"polynomial. We are left with solving the quadratic equation: ${quadratic} = 0$.",
            "Synthetic Division",
        )
    )
    quadratic_roots, solve_steps, _ = solve_quadratic_from_coefficients(q_a, q_b, q_c)
    steps.extend(solve_steps)

    final_answer = format_roots([first_root, *quadratic_roots], ROOT_DEDUP_DECIMALS)
    return CalculationResponse(final_answer=final_answer, steps=steps)
