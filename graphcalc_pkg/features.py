"""Detection of feature points: roots, extrema, turning points and saddle points."""

from __future__ import annotations

from typing import Callable, Iterable

import numpy as np

from .config import SADDLE_DECIMALS
from .sampler import SampledFunction
from .types import Point, round_half_up


def roots(samples: SampledFunction) -> list[Point]:
    """Sample points where the sign of y changes.

    For each pair of neighbouring samples that are not both strictly positive
    and not both strictly negative, the second sample is recorded. A sample
    that was just recorded as a root does not start a new pair, so a value of
    exactly zero yields one root instead of two.

    Args:
        samples: Sampled function

    Returns:
        Roots ordered by x
    """
    xs, ys = samples.xs, samples.ys
    if len(xs) < 2:
        return []
    same_sign = ((ys[:-1] > 0) & (ys[1:] > 0)) | ((ys[:-1] < 0) & (ys[1:] < 0))

    recorded: list[int] = []
    for i in np.flatnonzero(~same_sign).tolist():
        if recorded and recorded[-1] == i:
            continue
        recorded.append(i + 1)
    return [Point(float(xs[i]), float(ys[i])) for i in recorded]


def extrema(samples: SampledFunction) -> list[Point]:
    """Samples whose neighbours are both strictly lower (maximum) or both strictly higher (minimum)."""
    xs, ys = samples.xs, samples.ys
    if len(xs) < 3:
        return []
    previous, current, following = ys[:-2], ys[1:-1], ys[2:]
    maxima = (previous < current) & (following < current)
    minima = (previous > current) & (following > current)
    indices = np.flatnonzero(maxima | minima) + 1
    return [Point(float(xs[i]), float(ys[i])) for i in indices.tolist()]


def candidate_points(
    first_derivative: SampledFunction, value_at: Callable[[float], float]
) -> list[Point]:
    """Extrema of the first derivative, carrying the function's own value as y."""
    return [Point(p.x, value_at(p.x)) for p in extrema(first_derivative)]


def classify(
    candidates: Iterable[Point], reference: SampledFunction
) -> tuple[set[Point], set[Point]]:
    """Split candidates into turning points and saddle points.

    The reference derivative is read at each candidate's x and rounded to
    three decimals: a non-zero value makes a turning point, zero makes a
    saddle point. Candidates outside the reference's domain are dropped.

    Returns:
        Tuple (turning_points, saddle_points)
    """
    turning: set[Point] = set()
    saddle: set[Point] = set()
    for point in candidates:
        value = reference.get(point.x)
        if value is None:
            continue
        if round_half_up(value, SADDLE_DECIMALS) == 0:
            saddle.add(point)
        else:
            turning.add(point)
    return turning, saddle
