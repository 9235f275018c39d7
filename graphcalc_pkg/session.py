"""Presentation-side state: last used inputs and user-marked points.

The core keeps no global state. A front end holds one of these structs and
passes it from one dialog to the next so that the previous expression and
scales can be offered again.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterator

from .config import DEFAULT_SCALE, TABLE_INCREMENT, TABLE_X_MAX, TABLE_X_MIN
from .handler import FunctionHandler, parse_x
from .types import Point


@dataclass(frozen=True)
class DrawingSession:
    """Inputs of the last drawing dialog."""

    expression: str = ""
    scale_x: int = DEFAULT_SCALE
    scale_y: int = DEFAULT_SCALE

    def remember(self, **changes) -> DrawingSession:
        return replace(self, **changes)


@dataclass(frozen=True)
class TableSession:
    """Inputs of the last value table dialog."""

    expression: str = ""
    x_min: float = TABLE_X_MIN
    x_max: float = TABLE_X_MAX
    increment: float = TABLE_INCREMENT

    def remember(self, **changes) -> TableSession:
        return replace(self, **changes)


class MarkedPoints:
    """Points marked by the user on a drawn function, newest last."""

    def __init__(self, handler: FunctionHandler):
        self.handler = handler
        self._points: list[Point] = []

    def mark(self, x: float | str) -> Point | None:
        """Mark the point of the function at x.

        Text input is parsed leniently (comma as decimal separator); input
        that is not a number, or an x where the function is undefined, marks
        nothing and returns None.
        """
        if isinstance(x, str):
            parsed = parse_x(x)
            if parsed is None:
                return None
            x = parsed
        point = self.handler.point_at(x)
        if point is not None:
            self._points.append(point)
        return point

    def remove_last(self) -> Point | None:
        if not self._points:
            return None
        return self._points.pop()

    def clear(self) -> None:
        self._points.clear()

    def __iter__(self) -> Iterator[Point]:
        return iter(list(self._points))

    def __len__(self) -> int:
        return len(self._points)

    def __getitem__(self, index: int) -> Point:
        return self._points[index]
