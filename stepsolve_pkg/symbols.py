"""Glossary of operator and function symbols found in a problem."""

from __future__ import annotations

from .types import SymbolDefinition

# Keyed by the surface token; declaration order is the order of the result.
SYMBOL_TABLE: dict[str, SymbolDefinition] = {
    "d/dx": SymbolDefinition(
        "d/dx",
        "Derivative",
        "Represents the rate of change of a function with respect to the variable x.",
    ),
    "integrate": SymbolDefinition(
        "∫",
        "Integral",
        "Represents the area under a curve, or the antiderivative of a function.",
    ),
    "sqrt": SymbolDefinition(
        "\\sqrt{x}",
        "Square Root",
        "Finds a number that, when multiplied by itself, equals x.",
    ),
    "=": SymbolDefinition("=", "Equals", "Represents equality between two expressions."),
    "^": SymbolDefinition(
        "a^b", "Exponentiation", "Raises a base (a) to the power of an exponent (b)."
    ),
    "+": SymbolDefinition("+", "Addition", "Adds two numbers or expressions."),
    "-": SymbolDefinition("-", "Subtraction", "Subtracts one number or expression from another."),
    "*": SymbolDefinition("*", "Multiplication", "Multiplies two numbers or expressions."),
    "/": SymbolDefinition("/", "Division", "Divides one number or expression by another."),
}


def extract_symbols(equation: str) -> list[SymbolDefinition]:
    """Return glossary entries for the tokens present in ``equation``.

    A '/' only counts as division when the text has no d/dx.
    """
    text = equation.lower()
    has_derivative = "d/dx" in text
    return [
        definition
        for token, definition in SYMBOL_TABLE.items()
        if token in text and not (token == "/" and has_derivative)
    ]
