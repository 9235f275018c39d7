"""Type definitions, result dataclasses and the exception hierarchy."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from .config import TANGENT_DECIMALS


def round_half_up(value: float, decimals: int = 0) -> float:
    """Round like a pocket calculator: halves go up, not to the nearest even digit.

    Args:
        value: Value to round
        decimals: Number of decimal places to keep

    Returns:
        Rounded value (non-finite values are returned unchanged)
    """
    if not math.isfinite(value):
        return value
    factor = 10.0**decimals
    return math.floor(value * factor + 0.5) / factor


def format_number(value: float) -> str:
    """Format a number without a trailing ".0" (4.0 -> "4", 2.5 -> "2.5")."""
    value = float(value)
    if value == 0:
        return "0"
    if value.is_integer():
        return str(int(value))
    return repr(value)


@dataclass(frozen=True)
class Point:
    """An (x, y) pair on the plane."""

    x: float
    y: float

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}

    def __iter__(self):
        yield self.x
        yield self.y


@dataclass
class Derivative:
    """A derivative of some order together with its visibility toggle."""

    values: Any  # SampledFunction, kept untyped to avoid an import cycle
    order: int
    visible: bool = False


@dataclass(frozen=True)
class TangentLine:
    """Tangent y = slope*x + intercept, both rounded to two decimals."""

    slope: float
    intercept: float
    x: float
    y: float

    def equation(self) -> str:
        """Render the tangent as text, e.g. "4x - 4" or "2.5x"."""
        if self.intercept == 0:
            return f"{format_number(self.slope)}x"
        sign = "-" if self.intercept < 0 else "+"
        return f"{format_number(self.slope)}x {sign} {format_number(abs(self.intercept))}"

    def __str__(self) -> str:
        return self.equation()

    @classmethod
    def through(cls, x: float, y: float, raw_slope: float) -> TangentLine:
        slope = round_half_up(raw_slope, TANGENT_DECIMALS)
        intercept = round_half_up(y - slope * x, TANGENT_DECIMALS)
        return cls(slope=slope, intercept=intercept, x=x, y=y)


@dataclass
class EvalResult:
    """Result of evaluating an expression."""

    ok: bool
    value: float | None = None
    trailing_input: str | None = None
    error: str | None = None
    error_code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {"ok": self.ok}
        if self.value is not None:
            result_dict["value"] = self.value
        if self.trailing_input:
            result_dict["trailing_input"] = self.trailing_input
        if self.error is not None:
            result_dict["error"] = self.error
        if self.error_code is not None:
            result_dict["error_code"] = self.error_code
        return result_dict

    def __repr__(self) -> str:
        if not self.ok:
            return f"EvalResult(ok=False, error={self.error!r}, error_code={self.error_code!r})"
        parts = [f"ok={self.ok}", f"value={self.value!r}"]
        if self.trailing_input:
            parts.append(f"trailing_input={self.trailing_input!r}")
        return f"EvalResult({', '.join(parts)})"


@dataclass
class AnalysisResult:
    """Result of analysing a function over its sampled domain."""

    ok: bool
    expression: str | None = None
    scale_x: int | None = None
    sample_count: int = 0
    roots: list[Point] = field(default_factory=list)
    extrema: list[Point] = field(default_factory=list)
    turning_points: list[Point] = field(default_factory=list)
    saddle_points: list[Point] = field(default_factory=list)
    tangent: str | None = None
    error: str | None = None
    error_code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        if not self.ok:
            return {"ok": False, "error": self.error, "error_code": self.error_code}
        result_dict: dict[str, Any] = {
            "ok": True,
            "expression": self.expression,
            "scale_x": self.scale_x,
            "sample_count": self.sample_count,
            "roots": [p.to_dict() for p in self.roots],
            "extrema": [p.to_dict() for p in self.extrema],
            "turning_points": [p.to_dict() for p in self.turning_points],
            "saddle_points": [p.to_dict() for p in self.saddle_points],
        }
        if self.tangent is not None:
            result_dict["tangent"] = self.tangent
        return result_dict


@dataclass
class TableResult:
    """Result of tabulating an expression."""

    ok: bool
    rows: list[Point] = field(default_factory=list)
    text: str | None = None
    error: str | None = None
    error_code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        if not self.ok:
            return {"ok": False, "error": self.error, "error_code": self.error_code}
        return {"ok": True, "rows": [p.to_dict() for p in self.rows]}


class GraphcalcError(Exception):
    """Base class for errors raised by the graphcalc core."""

    default_code = "GRAPHCALC_ERROR"

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.default_code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class ValidationError(GraphcalcError):
    """Raised when input validation fails."""

    default_code = "VALIDATION_ERROR"


class ParseError(GraphcalcError):
    """Raised when parsing fails."""

    default_code = "PARSE_ERROR"


class UnknownFunctionError(ParseError):
    """Raised for an identifier that is neither x, a constant nor a known function."""

    default_code = "UNKNOWN_FUNCTION"

    def __init__(self, name: str, position: int | None = None):
        self.name = name
        self.position = position
        super().__init__(f"Unknown function: {name}")


class TrailingInputError(ParseError):
    """Raised in strict mode when input remains after a complete expression."""

    default_code = "TRAILING_INPUT"

    def __init__(self, remainder: str, position: int):
        self.remainder = remainder
        self.position = position
        super().__init__(
            f"Unexpected input at position {position}: {remainder!r}"
        )
