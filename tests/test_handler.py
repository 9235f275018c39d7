"""Tests for FunctionHandler and its input parsing helpers."""

import math
import unittest

from graphcalc_pkg.handler import FunctionHandler, construct, parse_scale, parse_x
from graphcalc_pkg.types import Point, UnknownFunctionError, ValidationError


class TestInputParsing(unittest.TestCase):
    """Lenient parsing of user typed scales and x values."""

    def test_parse_scale(self):
        self.assertEqual(parse_scale("20"), 20)
        self.assertEqual(parse_scale(" 5 "), 5)
        self.assertEqual(parse_scale(15), 15)

    def test_parse_scale_falls_back_to_default(self):
        for text in ("", "abc", "2.5", "0", "-3", None):
            self.assertEqual(parse_scale(text), 10, text)
        self.assertEqual(parse_scale("abc", default=7), 7)

    def test_parse_x(self):
        self.assertEqual(parse_x("2"), 2.0)
        self.assertEqual(parse_x("-1,5"), -1.5)
        self.assertEqual(parse_x(" 0.25 "), 0.25)

    def test_parse_x_rejects_garbage(self):
        self.assertIsNone(parse_x("abc"))
        self.assertIsNone(parse_x(""))
        self.assertIsNone(parse_x("inf"))
        self.assertIsNone(parse_x("nan"))


class TestFunctionHandler(unittest.TestCase):
    """Queries on a sampled function."""

    @classmethod
    def setUpClass(cls):
        cls.handler = FunctionHandler("x^2-4", 10)

    def test_function_text(self):
        self.assertEqual(self.handler.function, "x^2-4")
        self.assertIn("x^2-4", repr(self.handler))

    def test_value_at(self):
        self.assertEqual(self.handler.value_at(3), 5.0)
        self.assertEqual(self.handler.value_at(100), 9996.0)

    def test_comma_decimal_separator(self):
        handler = FunctionHandler(" x^2+0,5 ", 10)
        self.assertEqual(handler.function, "x^2+0.5")
        self.assertEqual(handler.value_at(1), 1.5)

    def test_sampled_values(self):
        samples = self.handler.sampled_values()
        self.assertEqual(len(samples), 20000)
        self.assertEqual(samples[2.0], 0.0)

    def test_derivatives(self):
        self.assertEqual(self.handler.derivative_order, 3)
        self.assertEqual([d.order for d in self.handler.derivatives], [1, 2, 3])
        self.assertIs(self.handler.derivative(0), self.handler.sampled_values())
        self.assertIs(self.handler.derivative(2), self.handler.derivatives[1].values)
        self.assertAlmostEqual(self.handler.derivative(1)[3.0], 6.0, delta=1e-3)

    def test_derivative_beyond_computed_order(self):
        fourth = self.handler.derivative(4)
        self.assertEqual(len(fourth), 20000 - 8)
        self.assertAlmostEqual(fourth[0.0], 0.0, delta=1e-2)
        with self.assertRaises(ValueError):
            self.handler.derivative(-1)

    def test_derivative_order_parameter(self):
        handler = FunctionHandler("x^2", 10, derivative_order=1)
        self.assertEqual(handler.derivative_order, 1)
        self.assertAlmostEqual(handler.derivative(2)[0.0], 2.0, delta=1e-3)

    def test_features(self):
        self.assertEqual(self.handler.roots(), [Point(-2.0, 0.0), Point(2.0, 0.0)])
        self.assertEqual(self.handler.extrema(), [Point(0.0, -4.0)])

    def test_tangent(self):
        self.assertEqual(self.handler.tangent_at(2), "4x - 8")
        self.assertEqual(self.handler.tangent_at(1), "2x - 5")
        line = self.handler.tangent_line(1)
        self.assertEqual((line.slope, line.intercept), (2.0, -5.0))

    def test_tangent_at_domain_edge(self):
        self.assertIsNone(self.handler.tangent_at(-10))
        self.assertIsNone(self.handler.tangent_at(50))

    def test_point_at(self):
        self.assertEqual(self.handler.point_at(3), Point(3, 5.0))

    def test_point_at_undefined_value(self):
        handler = FunctionHandler("sqrt(x)", 10)
        self.assertIsNone(handler.point_at(-1))
        self.assertEqual(handler.point_at(4), Point(4, 2.0))

    def test_static_helpers(self):
        self.assertEqual(FunctionHandler.evaluate("2+3*4"), 14)
        self.assertEqual(FunctionHandler.evaluate("x^2", x=3), 9)
        derivative = FunctionHandler.derivative_of(self.handler.sampled_values())
        self.assertEqual(len(derivative), 19998)


class TestConstructionErrors(unittest.TestCase):
    """Failures at construction time."""

    def test_unknown_function(self):
        with self.assertRaises(UnknownFunctionError) as ctx:
            FunctionHandler("exp(x)", 10)
        self.assertEqual(ctx.exception.name, "exp")

    def test_invalid_scale(self):
        for scale in (0, -5, math.inf, math.nan):
            with self.assertRaises(ValidationError) as ctx:
                FunctionHandler("x", scale)
            self.assertEqual(ctx.exception.code, "INVALID_SCALE")

    def test_empty_expression(self):
        with self.assertRaises(ValidationError) as ctx:
            FunctionHandler("  ", 10)
        self.assertEqual(ctx.exception.code, "EMPTY")

    def test_negative_order(self):
        with self.assertRaises(ValidationError):
            FunctionHandler("x", 10, derivative_order=-1)

    def test_unknown_criterion(self):
        with self.assertRaises(ValidationError):
            FunctionHandler("x", 10, saddle_criterion="sideways")


class TestConstruct(unittest.TestCase):
    """Building a handler from raw user input."""

    def test_numeric_scale(self):
        self.assertEqual(construct("x", 20).scale_x, 20)

    def test_text_scale(self):
        self.assertEqual(construct("x", "20").scale_x, 20)

    def test_invalid_scale_falls_back(self):
        for scale in ("abc", 0, -4, None, True):
            self.assertEqual(construct("x", scale).scale_x, 10, scale)


if __name__ == "__main__":
    unittest.main()
