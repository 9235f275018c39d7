"""Numerical calculus on sampled functions: derivatives and tangents."""

from __future__ import annotations

from typing import Callable

import numpy as np

from .config import DERIVATIVE_ORDER
from .logging_config import get_logger
from .sampler import SampledFunction
from .types import Derivative, TangentLine

logger = get_logger("calculus")


def derivative_of(samples: SampledFunction) -> SampledFunction:
    """Approximate the derivative with a central difference over adjacent samples.

    The slope at x_i is (y_{i+1} - y_{i-1}) / (x_{i+1} - x_{i-1}). The first
    and last sample have no slope and are dropped, as are non-finite slopes,
    so every application shrinks the domain by one sample on each end.

    Args:
        samples: Sampled function

    Returns:
        Sampled first derivative
    """
    xs, ys = samples.xs, samples.ys
    if len(xs) < 3:
        return SampledFunction()
    with np.errstate(all="ignore"):
        slopes = (ys[2:] - ys[:-2]) / (xs[2:] - xs[:-2])
    return SampledFunction(xs[1:-1], slopes)


def derivatives(samples: SampledFunction, order: int = DERIVATIVE_ORDER) -> list[Derivative]:
    """Derivatives of order 1..order, each computed from the previous one.

    Args:
        samples: Sampled function
        order: Highest derivative order (0 gives an empty list)

    Returns:
        List of Derivative objects, index 0 holding the first derivative
    """
    if order < 0:
        raise ValueError(f"Derivative order must not be negative, got {order}")
    result: list[Derivative] = []
    current = samples
    for n in range(1, order + 1):
        current = derivative_of(current)
        result.append(Derivative(values=current, order=n))
    logger.debug(
        "Computed %d derivatives, sizes %s", order, [len(d.values) for d in result]
    )
    return result


def tangent(
    samples: SampledFunction, x: float, value_at: Callable[[float], float]
) -> TangentLine | None:
    """Tangent at x from the nearest samples below and above x.

    Args:
        samples: Sampled function
        x: Point of contact
        value_at: Evaluates the function itself at x

    Returns:
        TangentLine, or None when x has no sample strictly below or strictly
        above it (at or beyond the edge of the sampled domain)
    """
    previous = samples.lower_item(x)
    following = samples.higher_item(x)
    if previous is None or following is None:
        return None

    y = value_at(x)
    (previous_x, previous_y), (next_x, next_y) = previous, following
    return TangentLine.through(x, y, (next_y - previous_y) / (next_x - previous_x))


def tangent_equation(
    samples: SampledFunction, x: float, value_at: Callable[[float], float]
) -> str | None:
    """Like tangent() but rendered as text, e.g. "4x - 4"."""
    line = tangent(samples, x, value_at)
    return None if line is None else line.equation()
