"""Main entry point for running graphcalc_pkg as a module.

This allows running Graphcalc with:
    python -m graphcalc_pkg
    python -m graphcalc_pkg -e "2(3)"
    python -m graphcalc_pkg -f "x^2-4" --roots --tangent 2

This is equivalent to running:
    python -m graphcalc_pkg.cli
    python graphcalc.py
"""

from __future__ import annotations

import sys

from .cli import main_entry

if __name__ == "__main__":
    sys.exit(main_entry())
