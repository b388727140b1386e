"""Arithmetic evaluator producing step-annotated derivations.

The expression tree from ``expression.parse_expression`` is reduced in a fixed
order, one step per reduction:

1. named constants (pi, e) are substituted
2. percentages become ``(N / 100)``
3. function calls are evaluated, rightmost first
4. parenthesized groups are evaluated, innermost and rightmost first
5. binary operators are folded tier by tier (``^``, then ``*``/``/``, then
   ``+``/``-``), left to right within a tier

Function arguments and groups are evaluated by recursive derivations whose
steps are folded into a single step of the outer derivation.
"""

from __future__ import annotations

import math
from typing import Callable

from .config import CONSTANTS, MAX_FACTORIAL
from .expression import (
    INVALID_EXPRESSION,
    BinaryOp,
    Constant,
    Grouping,
    Literal,
    Node,
    Percent,
    UnaryFunction,
    iter_nodes,
    parse_expression,
    render,
    replace_node,
)
from .logging_config import get_logger
from .parser import format_number
from .types import CalculationResponse, CalculationStep, MathDomainError, ParseError

logger = get_logger("evaluator")

OPERATOR_TIERS = (
    (("^",), "Exponents"),
    (("*", "/"), "Multiplication/Division"),
    (("+", "-"), "Addition/Subtraction"),
)


def factorial(n: float) -> float:
    """Factorial of a non-negative integer no larger than MAX_FACTORIAL."""
    if n < 0:
        raise MathDomainError("Factorial is not defined for negative numbers.")
    if n > MAX_FACTORIAL:
        raise MathDomainError(
            f"Factorial of numbers > {MAX_FACTORIAL} is too large to calculate."
        )
    if not float(n).is_integer():
        raise MathDomainError("Factorial is only defined for whole numbers.")
    return float(math.factorial(int(n)))


def _log10(x: float) -> float:
    if x <= 0:
        raise MathDomainError("Logarithm of a non-positive number is undefined.")
    return math.log10(x)


def _ln(x: float) -> float:
    if x <= 0:
        raise MathDomainError("Natural log of a non-positive number is undefined.")
    return math.log(x)


def _sqrt(x: float) -> float:
    if x < 0:
        raise MathDomainError("Square root of a negative number is not a real number.")
    return math.sqrt(x)


# name -> (implementation, rule, explanation prefix)
FUNCTIONS: dict[str, tuple[Callable[[float], float], str, str]] = {
    "sin": (math.sin, "Sine Function", "Calculate the sine (in radians)"),
    "cos": (math.cos, "Cosine Function", "Calculate the cosine (in radians)"),
    "tan": (math.tan, "Tangent Function", "Calculate the tangent (in radians)"),
    "asin": (math.asin, "Arcsine", "Calculate the arcsine"),
    "acos": (math.acos, "Arccosine", "Calculate the arccosine"),
    "atan": (math.atan, "Arctangent", "Calculate the arctangent"),
    "sinh": (math.sinh, "Hyperbolic Sine", "Calculate the hyperbolic sine"),
    "cosh": (math.cosh, "Hyperbolic Cosine", "Calculate the hyperbolic cosine"),
    "tanh": (math.tanh, "Hyperbolic Tangent", "Calculate the hyperbolic tangent"),
    "log": (_log10, "Logarithm (Base 10)", "Calculate the base-10 logarithm"),
    "ln": (_ln, "Natural Logarithm", "Calculate the natural logarithm"),
    "sqrt": (_sqrt, "Square Root", "Calculate the square root"),
    "fact": (factorial, "Factorial", "Calculate the factorial"),
    "degtorad": (math.radians, "Degrees to Radians", "Convert degrees to radians"),
    "radtodeg": (math.degrees, "Radians to Degrees", "Convert radians to degrees"),
}


def apply_function(name: str, arg: float) -> tuple[float, str, str]:
    """Apply a named unary function.

    Returns:
        (result, rule, explanation)

    Raises:
        MathDomainError: If the argument lies outside the function's domain
    """
    func, rule, prefix = FUNCTIONS[name]
    try:
        result = func(arg)
    except (ValueError, OverflowError) as e:
        raise MathDomainError(
            f"{name}({format_number(arg)}) is undefined over the real numbers."
        ) from e
    if name == "degtorad":
        explanation = (
            f"{prefix}: ${format_number(arg)}^\\circ \\times \\frac{{\\pi}}{{180}} "
            f"= {result:.8g} \\text{{ rad}}$"
        )
    elif name == "radtodeg":
        explanation = (
            f"{prefix}: ${format_number(arg)} \\text{{ rad}} \\times "
            f"\\frac{{180}}{{\\pi}} = {result:.8g}^\\circ$"
        )
    elif name == "fact":
        explanation = f"{prefix}: $fact({format_number(arg)}) = {format_number(result)}$"
    else:
        explanation = f"{prefix}: ${name}({format_number(arg)}) = {result:.8g}$"
    return result, rule, explanation


def apply_operator(op: str, left: float, right: float) -> float:
    """Apply a binary operator.

    Raises:
        MathDomainError: On division by zero or a non-real power
    """
    if op == "^":
        try:
            return math.pow(left, right)
        except (ValueError, OverflowError) as e:
            raise MathDomainError(
                f"{format_number(left)} ^ {format_number(right)} is undefined over the real numbers."
            ) from e
    if op == "*":
        return left * right
    if op == "/":
        if right == 0:
            raise MathDomainError("Division by zero is not allowed.", "DIVISION_BY_ZERO")
        return left / right
    if op == "+":
        return left + right
    return left - right


class _Derivation:
    """Working state of one reduction: the current tree and its steps."""

    def __init__(self, tree: Node, steps: list[CalculationStep]):
        self.tree = tree
        self.steps = steps

    def record(self, explanation: str, rule: str) -> None:
        self.steps.append(CalculationStep(render(self.tree), explanation, rule))

    def substitute_constants(self) -> None:
        constants = [n for n in iter_nodes(self.tree) if isinstance(n, Constant)]
        if not constants:
            return
        for node in constants:
            self.tree = replace_node(self.tree, node, Literal(CONSTANTS[node.name]))
        self.record(
            "Substitute mathematical constants like $\\pi$ and $e$ with their numerical values.",
            "Constant Substitution",
        )

    def convert_percentages(self) -> None:
        percents = [n for n in iter_nodes(self.tree) if isinstance(n, Percent)]
        if not percents:
            return
        for node in percents:
            decimal = Grouping(BinaryOp("/", Literal(node.value), Literal(100.0)))
            self.tree = replace_node(self.tree, node, decimal)
        self.record(
            "Convert percentage values to their decimal equivalents "
            "(e.g., $50\\% \\rightarrow 0.5$).",
            "Percentage Conversion",
        )

    def resolve_functions(self) -> None:
        while True:
            calls = [n for n in iter_nodes(self.tree) if isinstance(n, UnaryFunction)]
            if not calls:
                return
            call = calls[-1]
            arg_value, arg_steps = derive(call.argument, render(call.argument))
            if len(arg_steps) > 1:
                self.record(
                    f"Evaluate the expression inside the {call.name} function: "
                    f"${render(call.argument)}$",
                    "Function Argument",
                )
            result, rule, explanation = apply_function(call.name, arg_value)
            self.tree = replace_node(self.tree, call, Literal(result))
            self.record(explanation, rule)

    def resolve_groups(self) -> None:
        while True:
            innermost = [
                n
                for n in iter_nodes(self.tree)
                if isinstance(n, Grouping)
                and not any(isinstance(m, Grouping) for m in iter_nodes(n.inner))
            ]
            if not innermost:
                return
            group = innermost[-1]
            inner_value, _ = derive(group.inner, render(group.inner))
            self.tree = replace_node(self.tree, group, Literal(inner_value))
            self.record(
                "First, solve the expression inside the parentheses: "
                f"${render(group.inner)} = {format_number(inner_value)}$",
                "Parentheses (Brackets)",
            )

    def fold_operators(self, ops: tuple[str, ...], rule: str) -> None:
        while True:
            node = next(
                (
                    n
                    for n in iter_nodes(self.tree)
                    if isinstance(n, BinaryOp)
                    and n.op in ops
                    and isinstance(n.left, Literal)
                    and isinstance(n.right, Literal)
                ),
                None,
            )
            if node is None:
                return
            left, right = node.left.value, node.right.value
            result = apply_operator(node.op, left, right)
            self.tree = replace_node(self.tree, node, Literal(result))
            self.record(
                f"Perform {rule.lower()}: ${format_number(left)} {node.op} "
                f"{format_number(right)} = {format_number(result)}$",
                rule,
            )


def derive(tree: Node, text: str) -> tuple[float, list[CalculationStep]]:
    """Reduce an expression tree to a number, recording every reduction.

    Args:
        tree: Parsed expression
        text: Text the derivation starts from (the first step's expression)

    Returns:
        (value, steps). A bare number yields no steps, and no final step is
        added when it would repeat the previous step.
    """
    derivation = _Derivation(
        tree, [CalculationStep(text, "Starting expression.", "Initial Expression")]
    )
    derivation.substitute_constants()
    derivation.convert_percentages()
    derivation.resolve_functions()
    derivation.resolve_groups()
    for ops, rule in OPERATOR_TIERS:
        derivation.fold_operators(ops, rule)

    if not isinstance(derivation.tree, Literal) or math.isnan(derivation.tree.value):
        raise ParseError(INVALID_EXPRESSION)
    value = derivation.tree.value
    final = format_number(value)
    steps = derivation.steps

    if text.strip() == final:
        return value, []
    if len(steps) == 1 and steps[0].expression == final:
        steps.pop()
    if steps and steps[-1].expression != final:
        steps.append(CalculationStep(final, "The final simplified answer.", "Final Answer"))
    elif not steps:
        steps.append(CalculationStep(final, "The final simplified answer.", "Final Answer"))
    return value, steps


def evaluate(expression: str) -> float:
    """Evaluate arithmetic text to a float, discarding the derivation."""
    value, _ = derive(parse_expression(expression), expression)
    return value


def solve_arithmetic(expression: str) -> CalculationResponse:
    """Evaluate an arithmetic expression with a step-by-step derivation.

    Args:
        expression: Arithmetic text (e.g., "2 + 3 * sqrt(16)")

    Returns:
        CalculationResponse with the numeric answer

    Raises:
        ParseError: If the text does not reduce to a number
        ValidationError: On unbalanced parentheses or malformed function calls
        MathDomainError: On division by zero or out-of-domain function arguments
    """
    value, steps = derive(parse_expression(expression), expression)
    logger.debug("Evaluated %r to %s in %d steps", expression, value, len(steps))
    return CalculationResponse(final_answer=format_number(value), steps=steps)
