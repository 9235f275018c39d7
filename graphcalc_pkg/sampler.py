"""Sampling an expression over a symmetric domain."""

from __future__ import annotations

import math
from typing import Any, Iterator, Mapping

import numpy as np

from .config import MIN_SAMPLE_STEP, SAMPLE_KEY_DECIMALS
from .logging_config import get_logger
from .parser import CompiledExpression, compile_expression
from .types import round_half_up

logger = get_logger("sampler")


def _readonly(values: Any) -> np.ndarray:
    array = np.array(values, dtype=float)
    array.setflags(write=False)
    return array


class SampledFunction:
    """Immutable mapping x -> y ordered by ascending x.

    Keys are unique and finite, values are finite. Lookups of the sample
    strictly below or above an arbitrary x use binary search.
    """

    __slots__ = ("_xs", "_ys")

    def __init__(self, xs: Any = (), ys: Any = ()):
        xs = np.asarray(xs, dtype=float)
        ys = np.asarray(ys, dtype=float)
        if xs.shape != ys.shape or xs.ndim != 1:
            raise ValueError("xs and ys must be one-dimensional arrays of equal length")

        keep = np.isfinite(xs) & np.isfinite(ys)
        xs, ys = xs[keep], ys[keep]
        order = np.argsort(xs, kind="stable")
        xs, ys = xs[order], ys[order]
        if len(xs) > 1:
            # last value wins for duplicate keys, like assigning into a dict
            unique = np.append(xs[1:] != xs[:-1], True)
            xs, ys = xs[unique], ys[unique]

        self._xs = _readonly(xs)
        self._ys = _readonly(ys)

    @classmethod
    def from_mapping(cls, mapping: Mapping[float, float]) -> SampledFunction:
        return cls(list(mapping.keys()), list(mapping.values()))

    @property
    def xs(self) -> np.ndarray:
        return self._xs

    @property
    def ys(self) -> np.ndarray:
        return self._ys

    def __len__(self) -> int:
        return len(self._xs)

    def __bool__(self) -> bool:
        return len(self._xs) > 0

    def __iter__(self) -> Iterator[tuple[float, float]]:
        return self.items()

    def items(self) -> Iterator[tuple[float, float]]:
        return zip(self._xs.tolist(), self._ys.tolist())

    def keys(self) -> list[float]:
        return self._xs.tolist()

    def values(self) -> list[float]:
        return self._ys.tolist()

    def _index_of(self, x: float) -> int | None:
        i = int(np.searchsorted(self._xs, x, side="left"))
        if i < len(self._xs) and self._xs[i] == x:
            return i
        return None

    def get(self, x: float, default: Any = None) -> Any:
        i = self._index_of(x)
        return default if i is None else float(self._ys[i])

    def __getitem__(self, x: float) -> float:
        i = self._index_of(x)
        if i is None:
            raise KeyError(x)
        return float(self._ys[i])

    def __contains__(self, x: object) -> bool:
        try:
            return self._index_of(float(x)) is not None  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return False

    def lower_item(self, x: float) -> tuple[float, float] | None:
        """The sample with the greatest key strictly less than x."""
        i = int(np.searchsorted(self._xs, x, side="left")) - 1
        if i < 0:
            return None
        return float(self._xs[i]), float(self._ys[i])

    def higher_item(self, x: float) -> tuple[float, float] | None:
        """The sample with the smallest key strictly greater than x."""
        i = int(np.searchsorted(self._xs, x, side="right"))
        if i >= len(self._xs):
            return None
        return float(self._xs[i]), float(self._ys[i])

    def first(self) -> tuple[float, float] | None:
        if not len(self._xs):
            return None
        return float(self._xs[0]), float(self._ys[0])

    def last(self) -> tuple[float, float] | None:
        if not len(self._xs):
            return None
        return float(self._xs[-1]), float(self._ys[-1])

    def to_dict(self) -> dict[float, float]:
        return dict(self.items())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SampledFunction):
            return NotImplemented
        return np.array_equal(self._xs, other._xs) and np.array_equal(self._ys, other._ys)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if not len(self._xs):
            return "SampledFunction(empty)"
        return (
            f"SampledFunction({len(self)} samples, "
            f"x in [{self._xs[0]:g}, {self._xs[-1]:g}])"
        )


def sample_step(scale_x: float) -> float:
    """Distance between samples: round(scale/10)/1000, about 10000 samples per half axis.

    Scales below 5 would round to a zero step, so the step never drops below
    MIN_SAMPLE_STEP.
    """
    step = round_half_up(scale_x / 10) / 1000
    return max(step, MIN_SAMPLE_STEP)


def sample_points(scale_x: float) -> np.ndarray:
    """The x values covering [-scale_x, scale_x) at sample_step(scale_x)."""
    if not math.isfinite(scale_x) or scale_x <= 0:
        raise ValueError(f"Scale must be a positive number, got {scale_x!r}")
    step = sample_step(scale_x)
    count = int(math.ceil(round(2 * scale_x / step, SAMPLE_KEY_DECIMALS)))
    xs = np.round(-scale_x + step * np.arange(count), SAMPLE_KEY_DECIMALS)
    return xs[xs < scale_x]


def sample(expression: str | CompiledExpression, scale_x: float) -> SampledFunction:
    """Evaluate an expression at every sample point of [-scale_x, scale_x).

    Samples with a non-finite value (poles, points outside the domain of
    sqrt/ln/log) are left out.

    Args:
        expression: Expression text or an already compiled expression
        scale_x: Half width of the visible x axis

    Returns:
        SampledFunction over the domain
    """
    compiled = (
        expression
        if isinstance(expression, CompiledExpression)
        else compile_expression(expression)
    )
    xs = sample_points(scale_x)
    ys = compiled.evaluate(xs)
    samples = SampledFunction(xs, ys)
    logger.debug(
        "Sampled %r at scale %s: %d of %d points finite",
        compiled.text,
        scale_x,
        len(samples),
        len(xs),
    )
    return samples
