"""FunctionHandler: the interface the presentation layer talks to.

A handler is built once per (expression, scale, derivative order). It samples
the function and computes its derivatives at construction and never changes
them afterwards; a new expression or scale needs a new handler.
"""

from __future__ import annotations

import math

from .calculus import derivative_of, derivatives, tangent
from .config import DEFAULT_SCALE, DERIVATIVE_ORDER, SADDLE_CRITERION
from .features import candidate_points, classify, extrema, roots
from .logging_config import get_logger
from .parser import compile_expression, evaluate
from .sampler import SampledFunction, sample
from .types import Derivative, Point, TangentLine, ValidationError

logger = get_logger("handler")

__all__ = [
    "FunctionHandler",
    "construct",
    "derivative_of",
    "evaluate",
    "extrema",
    "normalize_decimal",
    "parse_scale",
    "parse_x",
    "roots",
]

SADDLE_CRITERIA = ("slope", "curvature")


def normalize_decimal(text: str) -> str:
    """Accept a comma as decimal separator ("2,5" -> "2.5")."""
    return text.replace(",", ".")


def parse_scale(text: object, default: int = DEFAULT_SCALE) -> int:
    """Parse an axis scale; anything that is not a positive integer gives the default."""
    try:
        scale = int(str(text).strip())
    except (TypeError, ValueError):
        logger.debug("Invalid scale %r, using %d", text, default)
        return default
    if scale <= 0:
        logger.debug("Non-positive scale %r, using %d", text, default)
        return default
    return scale


def parse_x(text: object) -> float | None:
    """Parse an x value typed by the user, returning None when it is not a finite number."""
    try:
        x = float(normalize_decimal(str(text).strip()))
    except (TypeError, ValueError):
        logger.debug("Ignoring invalid x value %r", text)
        return None
    if not math.isfinite(x):
        logger.debug("Ignoring non-finite x value %r", text)
        return None
    return x


class FunctionHandler:
    """Samples one function and answers questions about it.

    Args:
        expression: Expression in x; a comma is accepted as decimal separator
        scale_x: Half width of the sampled domain [-scale_x, scale_x)
        derivative_order: How many derivatives to compute (order 1..N)
        saddle_criterion: "curvature" (default) to classify inflection
            candidates by the second derivative, "slope" to use the first

    Raises:
        ValidationError: Empty/too long expression, non-positive scale,
            negative order or unknown criterion
        ParseError: Malformed expression (UnknownFunctionError for names
            outside sqrt, ln, log, sin, cos, tan)
    """

    def __init__(
        self,
        expression: str,
        scale_x: float = DEFAULT_SCALE,
        derivative_order: int = DERIVATIVE_ORDER,
        saddle_criterion: str = SADDLE_CRITERION,
    ):
        if saddle_criterion not in SADDLE_CRITERIA:
            raise ValidationError(
                f"Unknown saddle criterion {saddle_criterion!r}, expected one of {SADDLE_CRITERIA}"
            )
        if derivative_order < 0:
            raise ValidationError(f"Derivative order must not be negative, got {derivative_order}")
        if not math.isfinite(scale_x) or scale_x <= 0:
            raise ValidationError(f"Scale must be positive, got {scale_x!r}", "INVALID_SCALE")

        self.expression = normalize_decimal(expression).strip()
        self.scale_x = scale_x
        self.saddle_criterion = saddle_criterion
        self._compiled = compile_expression(self.expression)
        self._samples = sample(self._compiled, scale_x)
        self._derivatives = derivatives(self._samples, derivative_order)
        logger.debug(
            "Handler for %r: %d samples, %d derivatives",
            self.expression,
            len(self._samples),
            len(self._derivatives),
        )

    evaluate = staticmethod(evaluate)
    derivative_of = staticmethod(derivative_of)

    @property
    def function(self) -> str:
        return self.expression

    @property
    def derivatives(self) -> list[Derivative]:
        return self._derivatives

    @property
    def derivative_order(self) -> int:
        return len(self._derivatives)

    def sampled_values(self) -> SampledFunction:
        return self._samples

    def derivative(self, order: int) -> SampledFunction:
        """The sampled derivative of the given order (order 0 is the function itself)."""
        if order == 0:
            return self._samples
        if 1 <= order <= len(self._derivatives):
            return self._derivatives[order - 1].values
        if order < 0:
            raise ValueError(f"Derivative order must not be negative, got {order}")
        values = self._derivatives[-1].values if self._derivatives else self._samples
        for _ in range(order - len(self._derivatives)):
            values = derivative_of(values)
        return values

    def value_at(self, x: float) -> float:
        """f(x), possibly nan or inf outside the function's domain."""
        return self._compiled.evaluate(x)

    def tangent_line(self, x: float) -> TangentLine | None:
        return tangent(self._samples, x, self.value_at)

    def tangent_at(self, x: float) -> str | None:
        """Equation of the tangent at x, or None at the edge of the sampled domain."""
        line = self.tangent_line(x)
        return None if line is None else line.equation()

    def roots(self) -> list[Point]:
        return roots(self._samples)

    def extrema(self) -> list[Point]:
        return extrema(self._samples)

    def _classified_candidates(self) -> tuple[set[Point], set[Point]]:
        candidates = candidate_points(self.derivative(1), self.value_at)
        reference = self.derivative(1 if self.saddle_criterion == "slope" else 2)
        return classify(candidates, reference)

    def turning_points(self) -> set[Point]:
        """Inflection candidates (extrema of f') that are not saddle points."""
        return self._classified_candidates()[0]

    def saddle_points(self) -> set[Point]:
        """Inflection candidates where the reference derivative rounds to zero."""
        return self._classified_candidates()[1]

    def point_at(self, x: float) -> Point | None:
        """The point (x, f(x)), or None when f(x) is nan."""
        y = self.value_at(x)
        if math.isnan(y):
            return None
        return Point(x, y)

    def __repr__(self) -> str:
        return (
            f"FunctionHandler({self.expression!r}, scale_x={self.scale_x!r}, "
            f"derivative_order={self.derivative_order})"
        )


def construct(expression: str, scale_x: object = DEFAULT_SCALE) -> FunctionHandler:
    """Build a handler from raw user input; an invalid scale falls back to the default."""
    if (
        isinstance(scale_x, (int, float))
        and not isinstance(scale_x, bool)
        and math.isfinite(scale_x)
        and scale_x > 0
    ):
        return FunctionHandler(expression, scale_x)
    return FunctionHandler(expression, parse_scale(scale_x))
