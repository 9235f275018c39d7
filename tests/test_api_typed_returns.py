"""Test that API functions return typed dataclasses."""

import math

import pytest

from graphcalc_pkg.api import analyze, evaluate, plot, table, validate_expression
from graphcalc_pkg.types import AnalysisResult, EvalResult, Point, TableResult


class TestAPITypedReturns:
    """Test that all API functions return typed dataclasses."""

    def test_evaluate_returns_eval_result(self):
        """Test that evaluate() returns EvalResult."""
        result = evaluate("2(3)")
        assert isinstance(result, EvalResult)
        assert result.ok is True
        assert result.value == 6.0
        assert result.to_dict() == {"ok": True, "value": 6.0}

    def test_evaluate_with_variable(self):
        result = evaluate("x^2+1", x=2)
        assert result.ok is True
        assert result.value == 5.0

    def test_evaluate_error_returns_eval_result(self):
        """Test that evaluate() errors return EvalResult."""
        result = evaluate("foo(2)")
        assert isinstance(result, EvalResult)
        assert result.ok is False
        assert result.error == "Unknown function: foo"
        assert result.error_code == "UNKNOWN_FUNCTION"
        assert "error_code" in result.to_dict()
        assert "UNKNOWN_FUNCTION" in repr(result)

    def test_evaluate_trailing_input(self):
        result = evaluate("2 3")
        assert result.ok is True
        assert result.value == 0.0
        assert result.trailing_input == "3"
        strict = evaluate("2 3", strict=True)
        assert strict.ok is False
        assert strict.error_code == "TRAILING_INPUT"

    def test_evaluate_non_finite_is_not_an_error(self):
        result = evaluate("1/0")
        assert result.ok is True
        assert math.isinf(result.value)

    def test_validate_expression_returns_tuple(self):
        """Test that validate_expression() returns tuple."""
        assert validate_expression("x^2 - 4") == (True, None)
        assert validate_expression("exp(x)") == (False, "Unknown function: exp")
        is_valid, error = validate_expression("")
        assert is_valid is False
        assert isinstance(error, str)

    def test_analyze_returns_analysis_result(self):
        """Test that analyze() returns AnalysisResult."""
        result = analyze("x^2-4", tangent_x="2")
        assert isinstance(result, AnalysisResult)
        assert result.ok is True
        assert result.roots == [Point(-2.0, 0.0), Point(2.0, 0.0)]
        assert result.extrema == [Point(0.0, -4.0)]
        assert result.tangent == "4x - 8"
        assert result.sample_count == 20000
        data = result.to_dict()
        assert data["roots"] == [{"x": -2.0, "y": 0.0}, {"x": 2.0, "y": 0.0}]

    def test_analyze_sorts_inflection_points(self):
        result = analyze("sin(x)")
        xs = [p.x for p in result.saddle_points]
        assert xs == sorted(xs)
        assert len(xs) == 7
        assert result.turning_points == []

    def test_analyze_invalid_scale_falls_back(self):
        result = analyze("x", scale_x="abc")
        assert result.ok is True
        assert result.scale_x == 10

    def test_analyze_error_returns_analysis_result(self):
        result = analyze("abs(x)")
        assert isinstance(result, AnalysisResult)
        assert result.ok is False
        assert result.error_code == "UNKNOWN_FUNCTION"
        assert result.to_dict() == {
            "ok": False,
            "error": "Unknown function: abs",
            "error_code": "UNKNOWN_FUNCTION",
        }

    def test_table_returns_table_result(self):
        """Test that table() returns TableResult."""
        result = table("x^2", -1, 1)
        assert isinstance(result, TableResult)
        assert result.ok is True
        assert [p.y for p in result.rows] == [1.0, 0.0, 1.0]
        assert "f(x)" in result.text

    def test_table_error_returns_table_result(self):
        result = table("x", -1000, 1000, "0.001")
        assert result.ok is False
        assert result.error_code == "TOO_LARGE"

    def test_plot_returns_eval_result(self, tmp_path):
        pytest.importorskip("matplotlib")
        target = tmp_path / "plot.png"
        result = plot("sin(x)", str(target), show_roots=True)
        assert isinstance(result, EvalResult)
        assert result.ok is True
        assert target.exists()

    def test_plot_error_returns_eval_result(self, tmp_path):
        result = plot("foo(x)", str(tmp_path / "plot.png"))
        assert result.ok is False
        assert result.error_code == "UNKNOWN_FUNCTION"
