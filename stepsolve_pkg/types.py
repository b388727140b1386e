"""Type definitions and result dataclasses for consistent engine responses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class CalculationStep:
    """One transformation of the problem toward its answer."""

    expression: str
    explanation: str
    rule: str

    def to_dict(self) -> dict[str, str]:
        return {
            "expression": self.expression,
            "explanation": self.explanation,
            "rule": self.rule,
        }


@dataclass(frozen=True)
class SymbolDefinition:
    """Glossary entry for an operator or function token."""

    symbol: str
    name: str
    meaning: str

    def to_dict(self) -> dict[str, str]:
        return {"symbol": self.symbol, "name": self.name, "meaning": self.meaning}


@dataclass
class CalculationResponse:
    """Result returned by every solver.

    Under the error convention ``error`` is set and the other fields are empty.
    ``detected_equation`` is reserved for image recognition results and is
    never populated by the offline engine.
    """

    final_answer: str
    steps: list[CalculationStep] = field(default_factory=list)
    symbols: list[SymbolDefinition] = field(default_factory=list)
    detected_equation: str | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {
            "finalAnswer": self.final_answer,
            "steps": [step.to_dict() for step in self.steps],
            "symbols": [symbol.to_dict() for symbol in self.symbols],
        }
        if self.detected_equation is not None:
            result_dict["detectedEquation"] = self.detected_equation
        if self.error is not None:
            result_dict["error"] = self.error
        return result_dict

    def __repr__(self) -> str:
        """Return string representation of the response."""
        if self.error is not None:
            return f"CalculationResponse(error={self.error!r})"
        return (
            f"CalculationResponse(final_answer={self.final_answer!r}, "
            f"steps={len(self.steps)}, symbols={len(self.symbols)})"
        )


@dataclass
class PolynomialTerm:
    """A single coefficient * x^power term. Powers may repeat or be unsorted."""

    coefficient: float
    power: float


class ValidationError(Exception):
    """Raised when input validation fails."""

    def __init__(self, message: str, code: str = "VALIDATION_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class ParseError(Exception):
    """Raised when parsing fails."""

    def __init__(self, message: str, code: str = "PARSE_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class SolverError(Exception):
    """Raised when solving fails."""

    def __init__(self, message: str, code: str = "SOLVER_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class MathDomainError(SolverError):
    """Raised when an operation is applied outside its mathematical domain."""

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        super().__init__(message, code)


@dataclass
class PolynomialCoefficients:
    """Coefficients of a*x^3 + b*x^2 + c*x + d."""

    a: float = 0.0
    b: float = 0.0
    c: float = 0.0
    d: float = 0.0

    def __sub__(self, other: PolynomialCoefficients) -> PolynomialCoefficients:
        return PolynomialCoefficients(
            self.a - other.a, self.b - other.b, self.c - other.c, self.d - other.d
        )
