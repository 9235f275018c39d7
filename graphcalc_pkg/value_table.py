"""Value tables: f(x) for x from x_min to x_max in fixed increments."""

from __future__ import annotations

import math

from .config import MAX_TABLE_ROWS, TABLE_DECIMALS, TABLE_INCREMENT, TABLE_X_MAX, TABLE_X_MIN
from .handler import normalize_decimal
from .logging_config import get_logger
from .parser import compile_expression
from .types import Point, ValidationError, format_number, round_half_up

logger = get_logger("value_table")


def parse_bound(text: object, default: int) -> int:
    """Parse a table bound; non-integer input gives the default."""
    try:
        return int(str(text).strip())
    except (TypeError, ValueError):
        logger.debug("Invalid table bound %r, using %d", text, default)
        return default


def parse_increment(text: object, default: float = TABLE_INCREMENT) -> float:
    """Parse the table increment (comma tolerant); invalid or non-positive input gives the default."""
    try:
        increment = float(normalize_decimal(str(text).strip()))
    except (TypeError, ValueError):
        logger.debug("Invalid increment %r, using %s", text, default)
        return default
    if not math.isfinite(increment) or increment <= 0:
        logger.debug("Non-positive increment %r, using %s", text, default)
        return default
    return increment


def value_table(
    expression: str,
    x_min: object = TABLE_X_MIN,
    x_max: object = TABLE_X_MAX,
    increment: object = TABLE_INCREMENT,
) -> list[Point]:
    """Tabulate f(x) for x_min <= x <= x_max.

    Bounds and increment may be given as user text; malformed values fall
    back to x in [-5, 5] with increment 1. Both coordinates are rounded to
    five decimals. Rows where f is undefined keep their nan/inf value.

    Raises:
        ValidationError: When the table would exceed MAX_TABLE_ROWS rows
    """
    low = parse_bound(x_min, TABLE_X_MIN)
    high = parse_bound(x_max, TABLE_X_MAX)
    step = parse_increment(increment)
    compiled = compile_expression(normalize_decimal(expression))

    count = int(math.floor(round((high - low) / step, 9))) + 1 if high >= low else 0
    if count > MAX_TABLE_ROWS:
        raise ValidationError(
            f"Value table too large ({count} rows, max {MAX_TABLE_ROWS})", "TOO_LARGE"
        )

    rows = []
    for i in range(count):
        x = low + i * step
        rows.append(
            Point(
                round_half_up(x, TABLE_DECIMALS),
                round_half_up(compiled.evaluate(x), TABLE_DECIMALS),
            )
        )
    return rows


def format_value_table(rows: list[Point], header: tuple[str, str] = ("x", "f(x)")) -> str:
    """Render rows as a two-column text table."""
    cells = [header] + [(format_number(p.x), _format_value(p.y)) for p in rows]
    left = max(len(c[0]) for c in cells)
    right = max(len(c[1]) for c in cells)
    lines = [f"{cells[0][0]:>{left}} | {cells[0][1]:>{right}}", f"{'-' * left}-+-{'-' * right}"]
    lines.extend(f"{x:>{left}} | {y:>{right}}" for x, y in cells[1:])
    return "\n".join(lines)


def _format_value(y: float) -> str:
    if math.isnan(y):
        return "undefined"
    if math.isinf(y):
        return "inf" if y > 0 else "-inf"
    return format_number(y)
