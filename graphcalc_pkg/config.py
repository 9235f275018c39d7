"""Centralized configuration for Graphcalc.

This module defines:
- Sampling resolution and derivative order
- Rounding precision for tangents, saddle detection and value tables
- Input validation limits and parse cache size
- The function and constant tables understood by the expression parser
- Defaults substituted for malformed user input

Configuration can be overridden via:
- CLI flags (see cli.py)
- Environment variables (prefixed with GRAPHCALC_)
"""

import math
import os
import re

import numpy as np

# Version is defined in pyproject.toml [project] section
try:
    import importlib.metadata

    VERSION = importlib.metadata.version("graphcalc")
except Exception:
    # Fallback if package not installed
    VERSION = "1.0.0"

# Axis scale used when the user enters something that is not an integer
DEFAULT_SCALE = int(os.getenv("GRAPHCALC_DEFAULT_SCALE", "10"))

# Number of derivatives computed for every function handler
DERIVATIVE_ORDER = int(os.getenv("GRAPHCALC_DERIVATIVE_ORDER", "3"))

# Sampling configuration
MIN_SAMPLE_STEP = float(
    os.getenv("GRAPHCALC_MIN_SAMPLE_STEP", "0.001")
)  # Used when the scale is too small for round(scale/10)/1000 to be positive
SAMPLE_KEY_DECIMALS = int(
    os.getenv("GRAPHCALC_SAMPLE_KEY_DECIMALS", "9")
)  # Sample keys are rounded to remove float noise

# Rounding precision (decimal places)
TANGENT_DECIMALS = int(os.getenv("GRAPHCALC_TANGENT_DECIMALS", "2"))
SADDLE_DECIMALS = int(os.getenv("GRAPHCALC_SADDLE_DECIMALS", "3"))
TABLE_DECIMALS = int(os.getenv("GRAPHCALC_TABLE_DECIMALS", "5"))

# Which derivative separates turning points from saddle points:
# "curvature" (second derivative) or "slope" (first derivative)
SADDLE_CRITERION = os.getenv("GRAPHCALC_SADDLE_CRITERION", "curvature").lower()

# Raise TrailingInputError instead of evaluating "2 3" to 0
STRICT_TRAILING_INPUT = (
    os.getenv("GRAPHCALC_STRICT_TRAILING_INPUT", "false").lower() == "true"
)

# Input validation limits
MAX_INPUT_LENGTH = int(os.getenv("GRAPHCALC_MAX_INPUT_LENGTH", "10000"))  # characters

# Cache configuration
CACHE_SIZE_PARSE = int(os.getenv("GRAPHCALC_CACHE_SIZE_PARSE", "256"))

# Value table defaults
TABLE_X_MIN = int(os.getenv("GRAPHCALC_TABLE_X_MIN", "-5"))
TABLE_X_MAX = int(os.getenv("GRAPHCALC_TABLE_X_MAX", "5"))
TABLE_INCREMENT = float(os.getenv("GRAPHCALC_TABLE_INCREMENT", "1"))
MAX_TABLE_ROWS = int(os.getenv("GRAPHCALC_MAX_TABLE_ROWS", "100000"))

VARIABLE = "x"

FUNCTIONS = {
    "sqrt": np.sqrt,
    "ln": np.log,
    "log": np.log10,
    "sin": np.sin,
    "cos": np.cos,
    "tan": np.tan,
}

CONSTANTS = {
    "e": math.e,
    "π": math.pi,
}

IDENTIFIER_RE = re.compile(r"[a-z]+")
IMPLICIT_MULTIPLICATION_RE = re.compile(r"([0-9)])(?=[(a-z])")
