"""Tokenizer, recursive-descent parser and renderer for arithmetic expressions.

The parser builds a small expression tree which the evaluator reduces one node
at a time, re-rendering the tree to text after every reduction. Operators are
parsed left-associatively in three tiers: ``^``, then ``*``/``/``, then
``+``/``-``. A leading minus binds looser than ``^``, so ``-2^2`` is -4.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Union

from .config import CONSTANTS, FUNCTION_NAMES, NUMBER_REGEX
from .parser import format_number
from .types import ParseError, ValidationError

INVALID_EXPRESSION = "Invalid arithmetic expression."


@dataclass(eq=False)
class Literal:
    value: float


@dataclass(eq=False)
class Constant:
    name: str


@dataclass(eq=False)
class Percent:
    value: float


@dataclass(eq=False)
class Negation:
    operand: "Node"


@dataclass(eq=False)
class BinaryOp:
    op: str
    left: "Node"
    right: "Node"


@dataclass(eq=False)
class UnaryFunction:
    name: str
    argument: "Node"


@dataclass(eq=False)
class Grouping:
    inner: "Node"


Node = Union[Literal, Constant, Percent, Negation, BinaryOp, UnaryFunction, Grouping]


@dataclass
class Token:
    kind: str  # "number", "name", "op", "(", ")", "%"
    text: str


def tokenize(text: str) -> list[Token]:
    """Split expression text into tokens, skipping whitespace."""
    tokens: list[Token] = []
    pos = 0
    while pos < len(text):
        char = text[pos]
        if char.isspace():
            pos += 1
            continue
        number = NUMBER_REGEX.match(text, pos)
        if number:
            tokens.append(Token("number", number.group(0)))
            pos = number.end()
            continue
        if char.isalpha():
            end = pos
            while end < len(text) and text[end].isalpha():
                end += 1
            tokens.append(Token("name", text[pos:end]))
            pos = end
            continue
        if char in "+-*/^":
            tokens.append(Token("op", char))
        elif char in "()%":
            tokens.append(Token(char, char))
        else:
            raise ParseError(INVALID_EXPRESSION)
        pos += 1
    return tokens


def _negate(operand: Node) -> Node:
    if isinstance(operand, Literal):
        return Literal(-operand.value)
    return Negation(operand)


class _Parser:
    def __init__(self, tokens: list[Token]):
        self.tokens = tokens
        self.pos = 0

    def peek(self) -> Token | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def advance(self) -> Token:
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def at_op(self, *ops: str) -> bool:
        token = self.peek()
        return token is not None and token.kind == "op" and token.text in ops

    def parse(self) -> Node:
        if not self.tokens:
            raise ParseError(INVALID_EXPRESSION)
        node = self.expression()
        token = self.peek()
        if token is not None:
            if token.kind == ")":
                raise ValidationError("Mismatched parentheses.", "MISMATCHED_PARENS")
            raise ParseError(INVALID_EXPRESSION)
        return node

    def expression(self) -> Node:
        node = self.term()
        while self.at_op("+", "-"):
            op = self.advance().text
            node = BinaryOp(op, node, self.term())
        return node

    def term(self) -> Node:
        node = self.unary()
        while True:
            if self.at_op("*", "/"):
                op = self.advance().text
                node = BinaryOp(op, node, self.unary())
                continue
            token = self.peek()
            # Implicit multiplication: 2(3), 2pi, 3sqrt(4)
            if token is not None and token.kind in ("(", "name"):
                node = BinaryOp("*", node, self.power())
                continue
            return node

    def unary(self) -> Node:
        # Binds looser than ^: -2^2 is -(2^2)
        if self.at_op("+"):
            self.advance()
            return self.unary()
        if self.at_op("-"):
            self.advance()
            return _negate(self.unary())
        return self.power()

    def power(self) -> Node:
        node = self.primary()
        while self.at_op("^"):
            self.advance()
            node = BinaryOp("^", node, self.exponent())
        return node

    def exponent(self) -> Node:
        """Right operand of ^; a sign here applies to the exponent only (2^-1)."""
        if self.at_op("+"):
            self.advance()
            return self.exponent()
        if self.at_op("-"):
            self.advance()
            return _negate(self.exponent())
        return self.primary()

    def primary(self) -> Node:
        token = self.peek()
        if token is None:
            raise ParseError(INVALID_EXPRESSION)
        if token.kind == "number":
            self.advance()
            value = float(token.text)
            next_token = self.peek()
            if next_token is not None and next_token.kind == "%":
                self.advance()
                return Percent(value)
            return Literal(value)
        if token.kind == "name":
            self.advance()
            if token.text in FUNCTION_NAMES:
                return self.function_call(token.text)
            if token.text in CONSTANTS:
                return Constant(token.text)
            raise ParseError(f"Unknown name '{token.text}' in expression.")
        if token.kind == "(":
            self.advance()
            inner = self.expression()
            closing = self.peek()
            if closing is None or closing.kind != ")":
                raise ValidationError("Mismatched parentheses.", "MISMATCHED_PARENS")
            self.advance()
            return Grouping(inner)
        if token.kind == ")":
            raise ValidationError("Mismatched parentheses.", "MISMATCHED_PARENS")
        raise ParseError(INVALID_EXPRESSION)

    def function_call(self, name: str) -> Node:
        opening = self.peek()
        if opening is None or opening.kind != "(":
            raise ValidationError(
                f"Malformed call to function {name}: expected '('.", "INVALID_FORMAT"
            )
        self.advance()
        argument = self.expression()
        closing = self.peek()
        if closing is None or closing.kind != ")":
            raise ValidationError(
                f"Mismatched parentheses for function {name}.", "MISMATCHED_PARENS"
            )
        self.advance()
        return UnaryFunction(name, argument)


def parse_expression(text: str) -> Node:
    """Parse arithmetic text into an expression tree.

    Raises:
        ParseError: For unknown names or malformed operator sequences
        ValidationError: For unbalanced parentheses or malformed function calls
    """
    return _Parser(tokenize(text)).parse()


def render(node: Node) -> str:
    """Render an expression tree back to text."""
    if isinstance(node, Literal):
        return format_number(node.value)
    if isinstance(node, Constant):
        return node.name
    if isinstance(node, Percent):
        return f"{format_number(node.value)}%"
    if isinstance(node, Negation):
        return f"-{render(node.operand)}"
    if isinstance(node, BinaryOp):
        return f"{render(node.left)} {node.op} {render(node.right)}"
    if isinstance(node, UnaryFunction):
        return f"{node.name}({render(node.argument)})"
    return f"({render(node.inner)})"


def iter_nodes(node: Node) -> Iterator[Node]:
    """Yield nodes in pre-order, which follows their textual left-to-right order."""
    yield node
    if isinstance(node, Negation):
        yield from iter_nodes(node.operand)
    elif isinstance(node, BinaryOp):
        yield from iter_nodes(node.left)
        yield from iter_nodes(node.right)
    elif isinstance(node, UnaryFunction):
        yield from iter_nodes(node.argument)
    elif isinstance(node, Grouping):
        yield from iter_nodes(node.inner)


def replace_node(root: Node, target: Node, replacement: Node) -> Node:
    """Return ``root`` with ``target`` swapped for ``replacement``.

    Negations whose operand becomes a literal are folded into the literal.
    """
    if root is target:
        return replacement
    if isinstance(root, Negation):
        operand = replace_node(root.operand, target, replacement)
        if isinstance(operand, Literal):
            return Literal(-operand.value)
        return Negation(operand)
    if isinstance(root, BinaryOp):
        return BinaryOp(
            root.op,
            replace_node(root.left, target, replacement),
            replace_node(root.right, target, replacement),
        )
    if isinstance(root, UnaryFunction):
        return UnaryFunction(root.name, replace_node(root.argument, target, replacement))
    if isinstance(root, Grouping):
        return Grouping(replace_node(root.inner, target, replacement))
    return root
