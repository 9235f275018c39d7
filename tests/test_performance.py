"""Performance tests and benchmarks for Graphcalc.

These tests are marked as 'slow' and can be skipped with: pytest -m "not slow"
"""

import time

import pytest

from graphcalc_pkg.handler import FunctionHandler
from graphcalc_pkg.parser import compile_expression
from graphcalc_pkg.sampler import sample


@pytest.mark.slow
class TestParsingPerformance:
    """Test parsing performance."""

    def test_simple_expression_parsing_time(self):
        """Benchmark uncached parses."""
        start = time.time()
        for i in range(100):
            compile_expression(f"x^2 + 2x + {i}")
        elapsed = time.time() - start
        assert elapsed < 1.0, f"Parsing too slow: {elapsed}s"


@pytest.mark.slow
class TestSamplingPerformance:
    """Test sampling performance."""

    def test_sample_time(self):
        """20000 samples of a nested expression."""
        start = time.time()
        for _ in range(20):
            sample("sin(x)^2*sqrt(x^2+1)/ln(x^2+2)", 10)
        elapsed = time.time() - start
        assert elapsed < 2.0, f"Sampling too slow: {elapsed}s"

    def test_handler_time(self):
        """Full analysis of one function."""
        start = time.time()
        handler = FunctionHandler("x^5-5x^3+4x", 10)
        handler.roots()
        handler.extrema()
        handler.turning_points()
        handler.saddle_points()
        elapsed = time.time() - start
        assert elapsed < 2.0, f"Analysis too slow: {elapsed}s"
