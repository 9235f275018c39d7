#!/usr/bin/env python3
"""
Graphcalc - Function Graphing Calculator

Main entry point for the Graphcalc command line application.
This file serves as a thin wrapper that delegates all functionality
to the graphcalc_pkg package.

Usage:
    python graphcalc.py                          # Interactive REPL
    python graphcalc.py -e "2(3)+sqrt(9)"        # Evaluate expression
    python graphcalc.py -f "x^2-4" --roots       # Analyse a function
    python graphcalc.py --help                   # Show help
"""

from __future__ import annotations

import sys


def main() -> int:
    """
    Main entry point for Graphcalc.

    Delegates all functionality to the graphcalc_pkg.cli module,
    which handles argument parsing, evaluation, analysis and output formatting.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    from graphcalc_pkg.cli import main_entry

    try:
        return main_entry(sys.argv[1:])
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
