"""StepSolve package: offline math engine with step-by-step derivations."""

from .api import can_solve_offline, solve_offline, solve_or_error
from .types import CalculationResponse, CalculationStep, SymbolDefinition

__all__ = [
    "api",
    "calculus",
    "cli",
    "config",
    "evaluator",
    "expression",
    "logging_config",
    "parser",
    "solver",
    "symbols",
    "types",
    "can_solve_offline",
    "solve_offline",
    "solve_or_error",
    "CalculationResponse",
    "CalculationStep",
    "SymbolDefinition",
]
