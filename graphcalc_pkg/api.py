"""Public API for Graphcalc - returns structured objects instead of raising for user errors."""

from __future__ import annotations

from .config import DEFAULT_SCALE
from .handler import FunctionHandler, parse_scale, parse_x
from .logging_config import get_logger
from .parser import compile_expression, validate_input
from .plotting import export_png
from .types import AnalysisResult, EvalResult, GraphcalcError, TableResult, ValidationError
from .value_table import format_value_table, value_table

logger = get_logger("api")


def evaluate(expression: str, x: float | None = None, strict: bool = False) -> EvalResult:
    """Evaluate an expression.

    Args:
        expression: Expression string (e.g., "2+3*4", "sqrt(9)")
        x: Value for the variable, when the expression uses it
        strict: Report trailing input as an error instead of evaluating to 0

    Returns:
        EvalResult with the value, or the error message and code

    Example:
        >>> from graphcalc_pkg.api import evaluate
        >>> evaluate("2(3)").value
        6.0
        >>> evaluate("2 3").trailing_input
        '3'
        >>> evaluate("foo(2)").error_code
        'UNKNOWN_FUNCTION'
    """
    try:
        compiled = compile_expression(expression)
        value = compiled.evaluate(x, strict=strict)
    except GraphcalcError as e:
        return EvalResult(ok=False, error=e.message, error_code=e.code)
    return EvalResult(ok=True, value=value, trailing_input=compiled.trailing_input or None)


def validate_expression(expression: str) -> tuple[bool, str | None]:
    """Validate an expression without evaluating it.

    Returns:
        Tuple of (is_valid, error_message)

    Example:
        >>> from graphcalc_pkg.api import validate_expression
        >>> validate_expression("x^2 - 4")
        (True, None)
        >>> validate_expression("exp(x)")
        (False, 'Unknown function: exp')
    """
    try:
        validate_input(expression)
        compile_expression(expression)
    except GraphcalcError as e:
        return False, e.message
    return True, None


def analyze(
    expression: str,
    scale_x: object = None,
    tangent_x: object = None,
    derivative_order: int | None = None,
) -> AnalysisResult:
    """Sample a function and collect its feature points.

    Args:
        expression: Function of x (comma accepted as decimal separator)
        scale_x: Axis scale, as a number or user text; invalid input gives 10
        tangent_x: Optional x for a tangent, as a number or user text
        derivative_order: Number of derivatives to compute (default from config)

    Returns:
        AnalysisResult with roots, extrema, turning and saddle points

    Example:
        >>> from graphcalc_pkg.api import analyze
        >>> result = analyze("x^2-4", tangent_x="2")
        >>> [p.x for p in result.roots]
        [-2.0, 2.0]
        >>> result.tangent
        '4x - 8'
    """
    scale = parse_scale(scale_x) if scale_x is not None else DEFAULT_SCALE
    try:
        kwargs = {} if derivative_order is None else {"derivative_order": derivative_order}
        handler = FunctionHandler(expression, scale, **kwargs)
    except GraphcalcError as e:
        return AnalysisResult(ok=False, error=e.message, error_code=e.code)

    tangent = None
    if tangent_x is not None:
        x = parse_x(tangent_x)
        if x is not None:
            tangent = handler.tangent_at(x)

    return AnalysisResult(
        ok=True,
        expression=handler.function,
        scale_x=scale,
        sample_count=len(handler.sampled_values()),
        roots=handler.roots(),
        extrema=handler.extrema(),
        turning_points=sorted(handler.turning_points(), key=lambda p: p.x),
        saddle_points=sorted(handler.saddle_points(), key=lambda p: p.x),
        tangent=tangent,
    )


def table(
    expression: str, x_min: object = -5, x_max: object = 5, increment: object = 1
) -> TableResult:
    """Value table of an expression.

    Example:
        >>> from graphcalc_pkg.api import table
        >>> [p.y for p in table("x^2", -1, 1).rows]
        [1.0, 0.0, 1.0]
    """
    try:
        rows = value_table(expression, x_min, x_max, increment)
    except GraphcalcError as e:
        return TableResult(ok=False, error=e.message, error_code=e.code)
    return TableResult(ok=True, rows=rows, text=format_value_table(rows))


def plot(
    expression: str,
    path: str,
    scale_x: object = None,
    scale_y: object = None,
    **features,
) -> EvalResult:
    """Save a PNG plot of the function (requires matplotlib).

    Example:
        >>> from graphcalc_pkg.api import plot
        >>> plot("sin(x)", "/tmp/sin.png", show_roots=True).ok
        True
    """
    try:
        handler = FunctionHandler(
            expression, parse_scale(scale_x) if scale_x is not None else DEFAULT_SCALE
        )
        export_png(
            handler,
            path,
            scale_y=parse_scale(scale_y) if scale_y is not None else DEFAULT_SCALE,
            **features,
        )
    except GraphcalcError as e:
        return EvalResult(ok=False, error=e.message, error_code=e.code)
    except ImportError as e:
        return EvalResult(ok=False, error=str(e), error_code="MISSING_DEPENDENCY")
    except OSError as e:
        logger.warning("Could not write plot to %s: %s", path, e)
        return EvalResult(ok=False, error=f"Could not write {path}: {e}", error_code="IO_ERROR")
    return EvalResult(ok=True)


__all__ = [
    "AnalysisResult",
    "EvalResult",
    "TableResult",
    "ValidationError",
    "analyze",
    "evaluate",
    "plot",
    "table",
    "validate_expression",
]
