from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from .config import DEFAULT_SCALE, DERIVATIVE_ORDER, TABLE_X_MAX, TABLE_X_MIN, VERSION
from .handler import FunctionHandler, parse_scale, parse_x
from .logging_config import get_logger, setup_logging
from .parser import compile_expression
from .plotting import ascii_plot, export_png
from .session import DrawingSession, MarkedPoints, TableSession
from .types import GraphcalcError, Point, TrailingInputError, format_number
from .value_table import format_value_table, parse_bound, parse_increment, value_table

logger = get_logger("cli")

REPL_HELP = """Commands:
  <expression>        evaluate a constant expression or analyse a function of x
  scale <n> [<m>]     set the x (and y) axis scale, default 10
  tangent <x>         tangent of the last function at x
  point <x>           mark the point of the last function at x
  unmark              remove the last marked point
  table [a b step]    value table of the last function
  plot                ASCII plot of the last function
  help                show this help
  quit | exit         leave
"""


def _format_point(point: Point) -> str:
    return f"({format_number(round(point.x, 6))}, {format_number(round(point.y, 6))})"


def _format_points(points: Any) -> str:
    points = sorted(points, key=lambda p: p.x)
    if not points:
        return "none"
    return ", ".join(_format_point(p) for p in points)


def analysis_dict(handler: FunctionHandler, args: argparse.Namespace) -> dict[str, Any]:
    """Collect the features requested on the command line."""
    data: dict[str, Any] = {
        "ok": True,
        "function": handler.function,
        "scale_x": handler.scale_x,
        "samples": len(handler.sampled_values()),
    }
    wanted = {
        "roots": args.roots,
        "extrema": args.extrema,
        "turning_points": args.turning,
        "saddle_points": args.saddle,
    }
    if not any(wanted.values()) and args.tangent is None and args.point is None:
        wanted = dict.fromkeys(wanted, True)
    for name, enabled in wanted.items():
        if enabled:
            points = sorted(getattr(handler, name)(), key=lambda p: p.x)
            data[name] = [p.to_dict() for p in points]
    if args.tangent is not None:
        x = parse_x(args.tangent)
        data["tangent"] = None if x is None else handler.tangent_at(x)
    if args.point is not None:
        marked = MarkedPoints(handler)
        for text in args.point:
            marked.mark(text)
        data["points"] = [p.to_dict() for p in marked]
    return data


def print_analysis(data: dict[str, Any], output_format: str = "human") -> None:
    if output_format == "json":
        print(json.dumps(data))
        return
    print(f"f(x) = {data['function']}  (x in [-{data['scale_x']}, {data['scale_x']}), {data['samples']} samples)")
    labels = {
        "roots": "Roots",
        "extrema": "Extrema",
        "turning_points": "Turning points",
        "saddle_points": "Saddle points",
        "points": "Marked points",
    }
    for key, label in labels.items():
        if key in data:
            print(f"{label}: {_format_points(Point(p['x'], p['y']) for p in data[key])}")
    if "tangent" in data:
        print(f"Tangent: {data['tangent'] if data['tangent'] is not None else 'none'}")


def print_error(error: GraphcalcError, output_format: str = "human") -> None:
    if output_format == "json":
        print(json.dumps({"ok": False, "error": error.message, "error_code": error.code}))
    else:
        print(f"Error: {error.message}")


def evaluate_command(text: str, strict: bool, output_format: str) -> int:
    try:
        compiled = compile_expression(text.replace(",", "."))
        value = compiled.evaluate(strict=strict)
    except GraphcalcError as e:
        print_error(e, output_format)
        return 1
    if output_format == "json":
        result: dict[str, Any] = {"ok": True, "value": value}
        if compiled.trailing_input:
            result["trailing_input"] = compiled.trailing_input
        print(json.dumps(result))
    else:
        print(format_number(value) if value == value else "undefined")
        if compiled.trailing_input:
            print(f"  (ignored trailing input {compiled.trailing_input!r})")
    return 0


def function_command(args: argparse.Namespace, output_format: str) -> int:
    scale_x = parse_scale(args.scale_x)
    scale_y = parse_scale(args.scale_y)
    try:
        compiled = compile_expression(args.function.replace(",", ".").strip())
        if args.strict and compiled.has_trailing_input:
            raise TrailingInputError(
                compiled.trailing_input,
                len(compiled.normalized) - len(compiled.trailing_input),
            )
        handler = FunctionHandler(args.function, scale_x, derivative_order=args.order)
        rows = (
            value_table(handler.function, args.x_min, args.x_max, args.increment)
            if args.table
            else []
        )
    except GraphcalcError as e:
        print_error(e, output_format)
        return 1

    if args.table:
        if output_format == "json":
            print(json.dumps({"ok": True, "function": handler.function, "rows": [p.to_dict() for p in rows]}))
        else:
            print(format_value_table(rows))
        return 0

    print_analysis(analysis_dict(handler, args), output_format)

    if args.plot:
        print(ascii_plot(handler, scale_y=scale_y))
    if args.export:
        for derivative in handler.derivatives:
            derivative.visible = derivative.order in args.show_derivative
        try:
            path = export_png(
                handler,
                args.export,
                scale_y=scale_y,
                show_roots=args.roots,
                show_extrema=args.extrema,
                show_turning_points=args.turning,
                show_saddle_points=args.saddle,
                tangent_x=parse_x(args.tangent) if args.tangent is not None else None,
            )
        except ImportError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        except OSError as e:
            print(f"Error: could not write {args.export}: {e}", file=sys.stderr)
            return 1
        if output_format != "json":
            print(f"Plot saved to: {path}")
    return 0


def repl_loop(output_format: str = "human", strict: bool = False) -> None:
    """Interactive loop; the drawing and table sessions carry the last used inputs."""
    session = DrawingSession()
    table_session = TableSession()
    handler: FunctionHandler | None = None
    marked: MarkedPoints | None = None

    print(f"Graphcalc {VERSION}. Type 'help' for commands.")
    while True:
        try:
            raw = input(">>> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return
        if not raw:
            continue
        command, _, rest = raw.partition(" ")
        parts = rest.split()

        if command in ("quit", "exit"):
            return
        if command == "help":
            print(REPL_HELP)
        elif command == "scale":
            session = session.remember(
                scale_x=parse_scale(parts[0] if parts else ""),
                scale_y=parse_scale(parts[1] if len(parts) > 1 else (parts[0] if parts else "")),
            )
            if session.expression:
                handler = FunctionHandler(session.expression, session.scale_x)
                marked = MarkedPoints(handler)
            print(f"Scale: x={session.scale_x}, y={session.scale_y}")
        elif command in ("tangent", "point", "unmark", "table", "plot") and handler is None:
            print("Enter a function of x first.")
        elif command == "tangent":
            x = parse_x(rest)
            if x is not None:
                print(f"Tangent: {handler.tangent_at(x) or 'none'}")
        elif command == "point":
            point = marked.mark(rest)
            print(_format_point(point) if point is not None else "Not marked")
        elif command == "unmark":
            marked.remove_last()
            print(f"Marked points: {_format_points(marked)}")
        elif command == "table":
            if len(parts) == 3:
                table_session = table_session.remember(
                    x_min=parse_bound(parts[0], TABLE_X_MIN),
                    x_max=parse_bound(parts[1], TABLE_X_MAX),
                    increment=parse_increment(parts[2]),
                )
            table_session = table_session.remember(expression=session.expression)
            try:
                rows = value_table(
                    table_session.expression,
                    table_session.x_min,
                    table_session.x_max,
                    table_session.increment,
                )
            except GraphcalcError as e:
                print_error(e, output_format)
                continue
            print(format_value_table(rows))
        elif command == "plot":
            print(ascii_plot(handler, scale_y=session.scale_y))
        else:
            try:
                compiled = compile_expression(raw.replace(",", "."))
                if not compiled.uses_variable:
                    evaluate_command(raw, strict, output_format)
                    continue
                handler = FunctionHandler(raw, session.scale_x)
            except GraphcalcError as e:
                print_error(e, output_format)
                continue
            session = session.remember(expression=handler.function)
            marked = MarkedPoints(handler)
            print(f"f(x) = {handler.function}")
            print(f"Roots: {_format_points(handler.roots())}")
            print(f"Extrema: {_format_points(handler.extrema())}")
            print(f"Turning points: {_format_points(handler.turning_points())}")
            print(f"Saddle points: {_format_points(handler.saddle_points())}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="graphcalc",
        description="Sample a function of x and find its roots, extrema, turning points, saddle points and tangents.",
    )
    parser.add_argument("-e", "--eval", dest="expression", type=str, help="Evaluate a constant expression and exit")
    parser.add_argument("-f", "--function", type=str, help="Analyse a function of x and exit")
    parser.add_argument("--scale-x", default=str(DEFAULT_SCALE), help="Half width of the x axis (default: 10)")
    parser.add_argument("--scale-y", default=str(DEFAULT_SCALE), help="Half height of the y axis (default: 10)")
    parser.add_argument(
        "--order", type=int, default=DERIVATIVE_ORDER, help="Number of derivatives to compute (default: 3)"
    )
    parser.add_argument("--roots", action="store_true", help="Show roots")
    parser.add_argument("--extrema", action="store_true", help="Show extrema")
    parser.add_argument("--turning", action="store_true", help="Show turning points")
    parser.add_argument("--saddle", action="store_true", help="Show saddle points")
    parser.add_argument("--tangent", metavar="X", help="Show the tangent at X")
    parser.add_argument("--point", metavar="X", action="append", help="Mark the point at X (repeatable)")
    parser.add_argument("--table", action="store_true", help="Print a value table instead of the analysis")
    parser.add_argument("--x-min", default="-5", help="First x of the value table (default: -5)")
    parser.add_argument("--x-max", default="5", help="Last x of the value table (default: 5)")
    parser.add_argument("--increment", default="1", help="Step of the value table (default: 1)")
    parser.add_argument("--plot", action="store_true", help="Print an ASCII plot")
    parser.add_argument("--export", metavar="PATH", help="Save a PNG plot (requires matplotlib)")
    parser.add_argument(
        "--show-derivative",
        type=int,
        action="append",
        default=[],
        metavar="N",
        help="Draw the N-th derivative in the exported plot (repeatable)",
    )
    parser.add_argument("--strict", action="store_true", help="Treat trailing input as an error")
    parser.add_argument("--format", choices=["human", "json"], default="human", help="Output format")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", type=str, help="Write logs to file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    return parser


def main_entry(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level, args.log_file)
    logger.debug("Arguments: %s", args)

    if args.expression is not None:
        return evaluate_command(args.expression, args.strict, args.format)
    if args.function is not None:
        return function_command(args, args.format)

    repl_loop(output_format=args.format, strict=args.strict)
    return 0


if __name__ == "__main__":
    """Allow running the CLI module directly with python -m graphcalc_pkg.cli"""
    sys.exit(main_entry())
