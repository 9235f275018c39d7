"""Optional plotting of a sampled function, its derivatives and feature points."""

from __future__ import annotations

import math

try:
    # Set non-GUI backend before importing pyplot to avoid Tkinter issues
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False

from .config import DEFAULT_SCALE
from .handler import FunctionHandler
from .logging_config import get_logger
from .types import Point

logger = get_logger("plotting")

# Constants for ASCII plot dimensions
ASCII_ROWS = 21
ASCII_COLS = 61

DERIVATIVE_COLORS = ("#F18F01", "#6A994E", "#8E7DBE", "#C73E1D")


def ascii_plot(
    handler: FunctionHandler,
    scale_y: float = DEFAULT_SCALE,
    rows: int = ASCII_ROWS,
    cols: int = ASCII_COLS,
) -> str:
    """Draw the sampled function as characters inside [-scale_x, scale_x] x [-scale_y, scale_y].

    Args:
        handler: Function to draw
        scale_y: Half height of the visible y axis
        rows: Height of the plot in characters
        cols: Width of the plot in characters

    Returns:
        The plot as text, "*" for the function with the "-" and "|" axes on top
    """
    scale_x = handler.scale_x
    grid = [[" " for _ in range(cols)] for _ in range(rows)]

    def to_col(x: float) -> int:
        return int(round((x + scale_x) / (2 * scale_x) * (cols - 1)))

    def to_row(y: float) -> int:
        return int(round((scale_y - y) / (2 * scale_y) * (rows - 1)))

    for x, y in handler.sampled_values():
        if -scale_y <= y <= scale_y:
            grid[to_row(y)][to_col(x)] = "*"

    # axes are drawn last and stay visible where the graph crosses them
    axis_row, axis_col = to_row(0), to_col(0)
    for c in range(cols):
        grid[axis_row][c] = "-"
    for r in range(rows):
        grid[r][axis_col] = "|"
    grid[axis_row][axis_col] = "+"

    return "\n".join("".join(line) for line in grid)


def export_png(
    handler: FunctionHandler,
    path: str,
    scale_y: float = DEFAULT_SCALE,
    show_roots: bool = False,
    show_extrema: bool = False,
    show_turning_points: bool = False,
    show_saddle_points: bool = False,
    marked_points: list[Point] | None = None,
    tangent_x: float | None = None,
) -> str:
    """Render the function with matplotlib and save it as a PNG image.

    Derivatives whose ``visible`` flag is set are drawn as well.

    Args:
        handler: Function to draw
        path: Target file
        scale_y: Half height of the visible y axis
        show_roots, show_extrema, show_turning_points, show_saddle_points:
            Feature points to mark
        marked_points: Additional user-marked points
        tangent_x: Draw the tangent at this x when it exists

    Returns:
        The path the image was written to

    Raises:
        ImportError: matplotlib is not installed
    """
    if not HAS_MATPLOTLIB:
        raise ImportError("matplotlib not installed. Install graphcalc[plot] or use the ASCII plot.")

    samples = handler.sampled_values()
    fig, ax = plt.subplots(figsize=(10, 10))
    try:
        ax.plot(samples.xs, samples.ys, linewidth=2, color="#2E86AB", label=f"f(x) = {handler.function}")
        for derivative in handler.derivatives:
            if not derivative.visible:
                continue
            color = DERIVATIVE_COLORS[(derivative.order - 1) % len(DERIVATIVE_COLORS)]
            ax.plot(
                derivative.values.xs,
                derivative.values.ys,
                linewidth=1.2,
                color=color,
                label="f" + "'" * derivative.order + "(x)",
            )

        features: list[tuple[str, str, list[Point]]] = []
        if show_roots:
            features.append(("roots", "o", handler.roots()))
        if show_extrema:
            features.append(("extrema", "s", handler.extrema()))
        if show_turning_points:
            features.append(("turning points", "^", sorted(handler.turning_points(), key=lambda p: p.x)))
        if show_saddle_points:
            features.append(("saddle points", "D", sorted(handler.saddle_points(), key=lambda p: p.x)))
        if marked_points:
            features.append(("marked", "x", list(marked_points)))
        for label, marker, points in features:
            if points:
                ax.scatter([p.x for p in points], [p.y for p in points], marker=marker, zorder=3, label=label)

        if tangent_x is not None:
            line = handler.tangent_line(tangent_x)
            if line is not None and math.isfinite(line.y):
                xs = [-handler.scale_x, handler.scale_x]
                ax.plot(
                    xs,
                    [line.slope * x + line.intercept for x in xs],
                    linestyle="--",
                    color="#444444",
                    label=f"t(x) = {line.equation()}",
                )

        ax.set_xlim(-handler.scale_x, handler.scale_x)
        ax.set_ylim(-scale_y, scale_y)
        ax.set_xlabel("x", fontsize=12, fontweight="bold")
        ax.set_ylabel("f(x)", fontsize=12, fontweight="bold")
        ax.grid(True, alpha=0.3, linestyle="--")
        ax.axhline(y=0, color="k", linewidth=0.8, alpha=0.5)
        ax.axvline(x=0, color="k", linewidth=0.8, alpha=0.5)
        ax.legend(loc="best", fontsize=10)
        plt.tight_layout()
        fig.savefig(path, dpi=150, bbox_inches="tight")
    finally:
        plt.close(fig)

    logger.info("Saved plot of %r to %s", handler.function, path)
    return path
