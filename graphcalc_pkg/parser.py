"""Expression preprocessing, parsing and evaluation.

This module handles:
- Input validation (empty input, length limit)
- Preprocessing (constants, the variable, implicit multiplication)
- Recursive-descent parsing into a small expression tree
- Evaluation of the tree at a scalar x or over a whole numpy array of x values

Grammar, parsed strictly left to right without backtracking::

    expression := term (('+' | '-') term)*
    term       := factor (('*' | '/') factor)*
    factor     := ('+' | '-') factor
                | '(' expression ')'
                | number
                | identifier factor
    factor     := factor '^' factor

Non-finite results (division by zero, ``ln`` of a negative number, ...) are
not errors; they come back as ``inf``/``nan`` and callers filter them.
"""

from __future__ import annotations

import math
import operator
from functools import lru_cache
from typing import Any, Callable

import numpy as np

from .config import (
    CACHE_SIZE_PARSE,
    CONSTANTS,
    FUNCTIONS,
    IDENTIFIER_RE,
    IMPLICIT_MULTIPLICATION_RE,
    MAX_INPUT_LENGTH,
    STRICT_TRAILING_INPUT,
    VARIABLE,
)
from .logging_config import get_logger
from .types import ParseError, TrailingInputError, UnknownFunctionError, ValidationError

logger = get_logger("parser")

DIGITS = "0123456789."


class Node:
    """Base class for expression tree nodes."""

    __slots__ = ()

    uses_variable = False

    def evaluate(self, x: Any) -> Any:
        raise NotImplementedError


class Number(Node):
    __slots__ = ("value",)

    def __init__(self, value: float):
        self.value = np.float64(value)

    def evaluate(self, x: Any) -> Any:
        return self.value

    def __repr__(self) -> str:
        return f"Number({float(self.value)!r})"


class Variable(Node):
    __slots__ = ()

    uses_variable = True

    def evaluate(self, x: Any) -> Any:
        return x

    def __repr__(self) -> str:
        return "Variable()"


class Negate(Node):
    __slots__ = ("operand", "uses_variable")

    def __init__(self, operand: Node):
        self.operand = operand
        self.uses_variable = operand.uses_variable

    def evaluate(self, x: Any) -> Any:
        return -self.operand.evaluate(x)

    def __repr__(self) -> str:
        return f"Negate({self.operand!r})"


class BinaryOp(Node):
    __slots__ = ("symbol", "left", "right", "uses_variable")

    OPERATORS: dict[str, Callable[[Any, Any], Any]] = {
        "+": operator.add,
        "-": operator.sub,
        "*": operator.mul,
        "/": operator.truediv,
        "^": np.power,
    }

    def __init__(self, symbol: str, left: Node, right: Node):
        self.symbol = symbol
        self.left = left
        self.right = right
        self.uses_variable = left.uses_variable or right.uses_variable

    def evaluate(self, x: Any) -> Any:
        return self.OPERATORS[self.symbol](self.left.evaluate(x), self.right.evaluate(x))

    def __repr__(self) -> str:
        return f"BinaryOp({self.symbol!r}, {self.left!r}, {self.right!r})"


class Call(Node):
    __slots__ = ("name", "argument", "uses_variable")

    def __init__(self, name: str, argument: Node):
        self.name = name
        self.argument = argument
        self.uses_variable = argument.uses_variable

    def evaluate(self, x: Any) -> Any:
        return FUNCTIONS[self.name](self.argument.evaluate(x))

    def __repr__(self) -> str:
        return f"Call({self.name!r}, {self.argument!r})"


class Parser:
    """Recursive-descent parser over a preprocessed expression string.

    The parser keeps its cursor (``pos``) and the character under it (``ch``)
    as instance state; every ``_parse_*`` method advances the cursor.
    """

    def __init__(self, text: str):
        self.text = text
        self.pos = -1
        self.ch: str | None = None
        self._next_char()

    def _next_char(self) -> None:
        self.pos += 1
        self.ch = self.text[self.pos] if self.pos < len(self.text) else None

    def _skip_whitespace(self) -> None:
        while self.ch is not None and self.ch.isspace():
            self._next_char()

    def _eat(self, char: str) -> bool:
        self._skip_whitespace()
        if self.ch == char:
            self._next_char()
            return True
        return False

    def parse(self) -> tuple[Node, str]:
        """Parse the whole input.

        Returns:
            Tuple (tree, trailing_input) where trailing_input is the text left
            over after a complete expression ("" when everything was consumed)
        """
        node = self._parse_expression()
        self._skip_whitespace()
        return node, self.text[self.pos:]

    def _parse_expression(self) -> Node:
        node = self._parse_term()
        while True:
            if self._eat("+"):
                node = BinaryOp("+", node, self._parse_term())
            elif self._eat("-"):
                node = BinaryOp("-", node, self._parse_term())
            else:
                return node

    def _parse_term(self) -> Node:
        node = self._parse_factor()
        while True:
            if self._eat("*"):
                node = BinaryOp("*", node, self._parse_factor())
            elif self._eat("/"):
                node = BinaryOp("/", node, self._parse_factor())
            else:
                return node

    def _parse_factor(self) -> Node:
        if self._eat("+"):
            return self._parse_factor()
        if self._eat("-"):
            return Negate(self._parse_factor())

        start = self.pos
        if self._eat("("):
            node = self._parse_expression()
            # a missing closing parenthesis is tolerated
            self._eat(")")
        elif self.ch is not None and self.ch in DIGITS:
            while self.ch is not None and self.ch in DIGITS:
                self._next_char()
            literal = self.text[start:self.pos]
            try:
                node = Number(float(literal))
            except ValueError:
                raise ParseError(
                    f"Malformed number {literal!r} at position {start}",
                    "MALFORMED_NUMBER",
                ) from None
        elif self.ch is not None and "a" <= self.ch <= "z":
            while self.ch is not None and "a" <= self.ch <= "z":
                self._next_char()
            name = self.text[start:self.pos]
            if name == VARIABLE:
                node = Variable()
            elif name in FUNCTIONS:
                node = Call(name, self._parse_factor())
            else:
                raise UnknownFunctionError(name, start)
        else:
            return Number(0.0)

        if self._eat("^"):
            node = BinaryOp("^", node, self._parse_factor())
        return node


class CompiledExpression:
    """A parsed expression that can be evaluated at any x.

    Attributes:
        text: The expression as entered
        normalized: The preprocessed text that was parsed
        tree: Root node of the expression tree
        trailing_input: Text left unparsed after a complete expression
    """

    def __init__(self, text: str, normalized: str, tree: Node, trailing_input: str):
        self.text = text
        self.normalized = normalized
        self.tree = tree
        self.trailing_input = trailing_input

    @property
    def uses_variable(self) -> bool:
        return self.tree.uses_variable

    @property
    def has_trailing_input(self) -> bool:
        return bool(self.trailing_input)

    def evaluate(self, x: Any = None, strict: bool | None = None) -> Any:
        """Evaluate at a scalar x (returns float) or an array of x values (returns ndarray).

        Trailing unparsed input makes the whole result 0, unless ``strict`` is
        set, in which case TrailingInputError is raised.
        """
        if strict is None:
            strict = STRICT_TRAILING_INPUT
        if self.trailing_input:
            if strict:
                raise TrailingInputError(
                    self.trailing_input, len(self.normalized) - len(self.trailing_input)
                )
            logger.debug("Ignoring %r: trailing input %r", self.text, self.trailing_input)
            if x is not None and np.ndim(x) > 0:
                return np.zeros(np.shape(x))
            return 0.0

        if x is None:
            if self.uses_variable:
                raise ValidationError(
                    f"Expression {self.text!r} depends on {VARIABLE} but no value was given",
                    "UNBOUND_VARIABLE",
                )
            x_value: Any = None
        elif np.ndim(x) > 0:
            x_value = np.asarray(x, dtype=float)
        else:
            x_value = np.float64(x)

        with np.errstate(all="ignore"):
            value = self.tree.evaluate(x_value)

        if x_value is not None and np.ndim(x_value) > 0:
            return np.broadcast_to(np.asarray(value, dtype=float), x_value.shape).copy()
        return float(value)

    def __call__(self, x: Any = None) -> Any:
        return self.evaluate(x)

    def __repr__(self) -> str:
        return f"CompiledExpression({self.text!r})"


def _expand_identifier(match: Any) -> str:
    word = match.group(0)
    if word in FUNCTIONS or not set(word) <= {VARIABLE, "e"}:
        return word
    return "".join(
        f"({VARIABLE})" if char == VARIABLE else f"({CONSTANTS[char]!r})" for char in word
    )


def preprocess(text: str) -> str:
    """Rewrite user input into the form the parser expects.

    - ``π`` becomes a parenthesized pi literal
    - letter runs made only of ``x`` and ``e`` are split into ``(x)`` and a
      parenthesized Euler literal per character (``2xe`` -> ``2(x)(2.718...)``)
    - ``*`` is inserted between a digit or ``)`` and a directly following
      ``(`` or function name (``2(x)`` -> ``2*(x)``, ``2sin(x)`` -> ``2*sin(x)``)

    Args:
        text: Raw expression

    Returns:
        Preprocessed expression string
    """
    text = text.replace("π", f"({CONSTANTS['π']!r})")
    text = IDENTIFIER_RE.sub(_expand_identifier, text)
    return IMPLICIT_MULTIPLICATION_RE.sub(r"\1*", text)


def validate_input(text: str) -> str:
    """Check type, emptiness and length; returns the stripped text."""
    if not isinstance(text, str):
        raise ValidationError(f"Expression must be a string, not {type(text).__name__}")
    text = text.strip()
    if not text:
        raise ValidationError("Expression is empty", "EMPTY")
    if len(text) > MAX_INPUT_LENGTH:
        raise ValidationError(
            f"Input too long (max {MAX_INPUT_LENGTH} characters)", "TOO_LONG"
        )
    return text


@lru_cache(maxsize=CACHE_SIZE_PARSE)
def compile_expression(text: str) -> CompiledExpression:
    """Parse an expression once so it can be evaluated many times.

    Raises:
        ValidationError: Empty or overly long input
        UnknownFunctionError: Identifier outside sqrt, ln, log, sin, cos, tan
        ParseError: Malformed numeric literal
    """
    text = validate_input(text)
    normalized = preprocess(text)
    tree, trailing = Parser(normalized).parse()
    logger.debug("Compiled %r as %r", text, tree)
    return CompiledExpression(text, normalized, tree, trailing)


def evaluate(text: str, x: float | None = None, strict: bool | None = None) -> float:
    """Evaluate an expression to a float.

    Args:
        text: Expression (e.g. "2+3*4", "sqrt(9)", "x^2" together with x)
        x: Value of the variable, required when the expression uses it
        strict: Raise TrailingInputError instead of returning 0 for input like "2 3"

    Returns:
        The value, possibly inf or nan

    Example:
        >>> evaluate("2(3)")
        6.0
        >>> evaluate("x^2", x=3)
        9.0
    """
    return compile_expression(text).evaluate(x, strict=strict)


def format_literal(x: float) -> str:
    """Positional decimal text for x, never in exponent notation."""
    return np.format_float_positional(float(x), trim="-")


def substitute(text: str, x: float) -> str:
    """Replace the variable in ``text`` with a parenthesized literal.

    Only valid because ``x`` is the sole variable and no function name
    contains the letter x.

    Example:
        >>> substitute("x^2", 3)
        '(3)^2'
    """
    if not math.isfinite(x):
        raise ValidationError(f"Cannot substitute non-finite value {x!r}")
    return text.replace(VARIABLE, f"({format_literal(x)})")
