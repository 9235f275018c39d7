"""Test error codes raised by the parser and the function handler."""

import unittest

from graphcalc_pkg.handler import FunctionHandler
from graphcalc_pkg.parser import compile_expression, evaluate
from graphcalc_pkg.types import (
    GraphcalcError,
    ParseError,
    TrailingInputError,
    UnknownFunctionError,
    ValidationError,
)


class TestErrorCodes(unittest.TestCase):
    """Test that errors carry appropriate codes."""

    def assertCode(self, error_type, code, func, *args, **kwargs):
        try:
            func(*args, **kwargs)
            self.fail(f"Should have raised {error_type.__name__}")
        except error_type as e:
            self.assertEqual(e.code, code, f"Expected {code}, got {e.code}")
            return e

    def test_empty_error_code(self):
        e = self.assertCode(ValidationError, "EMPTY", compile_expression, "")
        self.assertIn("empty", str(e).lower())

    def test_too_long_error_code(self):
        e = self.assertCode(ValidationError, "TOO_LONG", compile_expression, "x" * 10001)
        self.assertIn("too long", str(e).lower())

    def test_unbound_variable_error_code(self):
        self.assertCode(ValidationError, "UNBOUND_VARIABLE", evaluate, "2x")

    def test_invalid_scale_error_code(self):
        self.assertCode(ValidationError, "INVALID_SCALE", FunctionHandler, "x", 0)

    def test_malformed_number_error_code(self):
        e = self.assertCode(ParseError, "MALFORMED_NUMBER", evaluate, "2..5")
        self.assertIn("2..5", str(e))

    def test_unknown_function_error_code(self):
        e = self.assertCode(UnknownFunctionError, "UNKNOWN_FUNCTION", evaluate, "sinh(1)")
        self.assertEqual(e.position, 0)

    def test_trailing_input_error_code(self):
        e = self.assertCode(TrailingInputError, "TRAILING_INPUT", evaluate, "1+2)", strict=True)
        self.assertEqual(e.remainder, ")")
        self.assertEqual(e.position, 3)

    def test_hierarchy(self):
        self.assertTrue(issubclass(ValidationError, GraphcalcError))
        self.assertTrue(issubclass(ParseError, GraphcalcError))
        self.assertTrue(issubclass(UnknownFunctionError, ParseError))
        self.assertTrue(issubclass(TrailingInputError, ParseError))

    def test_default_codes(self):
        self.assertEqual(ValidationError("bad").code, "VALIDATION_ERROR")
        self.assertEqual(ParseError("bad").code, "PARSE_ERROR")
        self.assertEqual(GraphcalcError("bad", "CUSTOM").code, "CUSTOM")


if __name__ == "__main__":
    unittest.main()
