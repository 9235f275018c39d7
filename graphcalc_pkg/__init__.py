"""Graphcalc package: expression parser, sampler, numerical calculus and feature detection."""

__all__ = [
    "config",
    "parser",
    "sampler",
    "calculus",
    "features",
    "handler",
    "session",
    "value_table",
    "plotting",
    "cli",
    "types",
    "api",
    "logging_config",
]

# Public API exports

__api_exports__ = [
    "evaluate",
    "validate_expression",
    "analyze",
    "table",
    "plot",
]
