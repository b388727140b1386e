"""Input sanitizing, number formatting and polynomial parsing.

This module handles:
- Input sanitization and validation (case folding, length, emptiness)
- Balancing checks for parentheses
- Lenient numeric prefix parsing and display formatting of numbers
- Polynomial term extraction for calculus (``parse_general_polynomial``)
- Up-to-cubic coefficient extraction for equations (``parse_polynomial_coefficients``)
"""

from __future__ import annotations

import math

from .config import FLOAT_PREFIX_REGEX, MAX_INPUT_LENGTH
from .types import PolynomialCoefficients, PolynomialTerm, ValidationError


def sanitize(text: str) -> str:
    """Lower-case and trim raw input, rejecting empty or oversized text.

    Args:
        text: Raw user input

    Returns:
        Normalized text

    Raises:
        ValidationError: If input is empty or longer than MAX_INPUT_LENGTH
    """
    if len(text) > MAX_INPUT_LENGTH:
        raise ValidationError(
            f"Input too long (max {MAX_INPUT_LENGTH} characters)", "TOO_LONG"
        )
    sanitized = text.strip().lower()
    if not sanitized:
        raise ValidationError("Empty input. Please enter a problem to solve.", "EMPTY_INPUT")
    return sanitized


def is_balanced(input_str: str) -> tuple[bool, int | None]:
    """Check if parentheses are balanced. Returns (is_balanced, error_position)."""
    stack: list[int] = []
    for i, char in enumerate(input_str):
        if char == "(":
            stack.append(i)
        elif char == ")":
            if not stack:
                return False, i
            stack.pop()
    if stack:
        return False, stack[0]
    return True, None


def parse_float_prefix(text: str) -> float:
    """Read the leading number of ``text``, ignoring any trailing residue.

    Returns NaN when the text does not start with a number, so that callers can
    decide whether a malformed term is skipped or propagated.
    """
    match = FLOAT_PREFIX_REGEX.match(text)
    if not match:
        return math.nan
    return float(match.group(0))


def format_number(val: float) -> str:
    """Format a float for display, dropping the fractional part of whole numbers.

    Args:
        val: Numeric value

    Returns:
        "3" for 3.0, "0.5" for 0.5, repr-style text otherwise
    """
    val = float(val)
    if math.isfinite(val) and val.is_integer() and abs(val) < 1e16:
        return str(int(val))
    return repr(val)


def round_to(val: float, decimals: int) -> float:
    """Round for display, normalizing negative zero."""
    return round(val, decimals) + 0.0


def normalize_signs(expr: str) -> str:
    """Turn "a + -b" into "a - b"."""
    return expr.replace("+ -", "- ")


def split_equation(equation: str, message: str) -> tuple[str, str]:
    """Split an equation into its two sides.

    Raises:
        ValidationError: If the equation does not contain exactly one '='
    """
    parts = equation.split("=")
    if len(parts) != 2:
        raise ValidationError(message, "INVALID_EQUATION")
    return parts[0], parts[1]


def _signed_terms(expr: str) -> list[str]:
    normalized = "".join(expr.split()).replace("-", "+-")
    return [term for term in normalized.split("+") if term]


def parse_general_polynomial(expr: str) -> list[PolynomialTerm]:
    """Convert a single-variable polynomial into (coefficient, power) terms.

    Subtraction is rewritten as signed addition before splitting on '+'.
    Constant terms get power 0; unparsable constants are skipped. Malformed
    terms such as ``2x^2x`` are not rejected and yield whatever their prefix
    and suffix read as.

    Args:
        expr: Polynomial text (e.g., "3x^2 - x + 4")

    Returns:
        Terms in input order, powers neither merged nor sorted
    """
    terms: list[PolynomialTerm] = []
    for term_str in _signed_terms(expr):
        if "x" not in term_str:
            coefficient = parse_float_prefix(term_str)
            if not math.isnan(coefficient):
                terms.append(PolynomialTerm(coefficient, 0))
            continue

        coeff_part, _, power_part = term_str.partition("x")
        if coeff_part in ("", "+"):
            coefficient = 1.0
        elif coeff_part == "-":
            coefficient = -1.0
        else:
            coefficient = parse_float_prefix(coeff_part)

        power = 1.0
        if power_part.startswith("^"):
            power = parse_float_prefix(power_part[1:])
        terms.append(PolynomialTerm(coefficient, power))
    return terms


def _read_coefficient(term: str, marker: str) -> float:
    coeff_str = term.replace(marker, "", 1).replace("*", "", 1)
    if coeff_str in ("", "+"):
        return 1.0
    if coeff_str == "-":
        return -1.0
    return parse_float_prefix(coeff_str)


def parse_polynomial_coefficients(expr: str) -> PolynomialCoefficients:
    """Accumulate the coefficients of one side of a polynomial equation.

    Each term is matched against "x^3", "x^2" and "x" in that order; the first
    match decides its slot. Terms without x are added to the constant slot when
    they read as a number.

    Args:
        expr: One side of an equation (e.g., "x^3 - 6x^2 + 11x")

    Returns:
        PolynomialCoefficients for a*x^3 + b*x^2 + c*x + d
    """
    coeffs = PolynomialCoefficients()
    for term in _signed_terms(expr):
        if "x^3" in term:
            coeffs.a += _read_coefficient(term, "x^3")
        elif "x^2" in term:
            coeffs.b += _read_coefficient(term, "x^2")
        elif "x" in term:
            coeffs.c += _read_coefficient(term, "x")
        else:
            constant = parse_float_prefix(term)
            if not math.isnan(constant):
                coeffs.d += constant
    return coeffs


def format_term(coefficient: float, power: float) -> str:
    """Render coefficient * x^power, omitting unit coefficients and powers.

    Examples: (6, 1) -> "6x", (1, 4) -> "x^4", (-1, 2) -> "-x^2", (5, 0) -> "5"
    """
    coeff_text = format_number(coefficient)
    if power == 0:
        return coeff_text
    variable = "x" if power == 1 else f"x^{format_number(power)}"
    if coefficient == 1:
        return variable
    if coefficient == -1:
        return f"-{variable}"
    return f"{coeff_text}{variable}"


def join_terms(terms: list[str]) -> str:
    """Sum rendered terms with sign normalization; "0" when there are none."""
    return normalize_signs(" + ".join(terms)) or "0"
