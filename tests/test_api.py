"""Tests for the public API: classification, dispatch and typed results."""

import unittest

import pytest

from stepsolve_pkg import can_solve_offline, solve_offline, solve_or_error
from stepsolve_pkg.api import rewrite_find_roots, select_rule
from stepsolve_pkg.symbols import extract_symbols
from stepsolve_pkg.types import CalculationResponse, CalculationStep, SymbolDefinition


class TestCanSolveOffline(unittest.TestCase):
    """Test the syntactic offline pre-filter."""

    def test_blank_input(self):
        self.assertFalse(can_solve_offline(""))
        self.assertFalse(can_solve_offline("   "))

    def test_plain_arithmetic(self):
        self.assertTrue(can_solve_offline("2+2"))
        self.assertTrue(can_solve_offline("sin(pi/2)"))

    def test_case_insensitive(self):
        self.assertTrue(can_solve_offline("2X + 1 = 3"))

    def test_calculus_shapes(self):
        self.assertTrue(can_solve_offline("d/dx(3x^2)"))
        self.assertTrue(can_solve_offline("integrate(x, 0, 5)"))
        self.assertTrue(can_solve_offline("integrate(4x^3)"))

    def test_rejects_other_characters(self):
        self.assertFalse(can_solve_offline("\\int_0^1 x dx"))
        self.assertFalse(can_solve_offline("What is 2+2?"))
        self.assertFalse(can_solve_offline("5 % 2"))


class TestDispatch(unittest.TestCase):
    """Test solver selection order."""

    def test_rule_order(self):
        self.assertEqual(select_rule("integrate(x, 0, 5)").name, "definite_integral")
        self.assertEqual(select_rule("integrate(x)").name, "indefinite_integral")
        self.assertEqual(select_rule("d/dx(x^2)").name, "derivative")
        self.assertEqual(select_rule("x^3 = 1").name, "cubic")
        self.assertEqual(select_rule("x^2 = 1").name, "quadratic")
        self.assertEqual(select_rule("x = 1").name, "linear")
        self.assertEqual(select_rule("2 + 2").name, "arithmetic")

    def test_rewrite_find_roots(self):
        self.assertEqual(rewrite_find_roots("f(x) = x^2 - 4, find roots"), "x^2 - 4 = 0")
        self.assertEqual(rewrite_find_roots("x^2 - 4 = 0"), "x^2 - 4 = 0")


class TestSolveOffline(unittest.TestCase):
    """End-to-end solving through the dispatcher."""

    def test_linear(self):
        res = solve_offline("2x + 5 = 11")
        self.assertIsInstance(res, CalculationResponse)
        self.assertEqual(res.final_answer, "x = 3")
        self.assertTrue(all(isinstance(s, CalculationStep) for s in res.steps))
        self.assertEqual([s.name for s in res.symbols], ["Equals", "Addition"])

    def test_derivative_symbols(self):
        res = solve_offline("d/dx(3x^2)")
        self.assertEqual(res.final_answer, "6x")
        self.assertEqual([s.name for s in res.symbols], ["Derivative", "Exponentiation"])

    def test_definite_integral(self):
        res = solve_offline("integrate(x, 0, 5)")
        self.assertEqual(res.final_answer, "12.500000")
        self.assertEqual([s.name for s in res.symbols], ["Integral"])

    def test_find_roots(self):
        res = solve_offline("f(x) = x^2 - 4, find roots")
        self.assertEqual(res.final_answer, "x \\in \\{-2, 2\\}")
        self.assertEqual(
            [s.name for s in res.symbols], ["Equals", "Exponentiation", "Subtraction"]
        )

    def test_upper_case_input(self):
        self.assertEqual(solve_offline("X^2 - 5X + 6 = 0").final_answer, "x \\in \\{2, 3\\}")

    def test_idempotent(self):
        first = solve_offline("x^3 - 6x^2 + 11x - 6 = 0")
        second = solve_offline("x^3 - 6x^2 + 11x - 6 = 0")
        self.assertEqual(first.to_dict(), second.to_dict())


class TestSerialization:
    def test_to_dict_keys(self):
        data = solve_offline("1 + 1").to_dict()
        assert set(data) == {"finalAnswer", "steps", "symbols"}
        assert data["finalAnswer"] == "2"
        assert set(data["steps"][0]) == {"expression", "explanation", "rule"}
        assert data["symbols"][0] == {
            "symbol": "+",
            "name": "Addition",
            "meaning": "Adds two numbers or expressions.",
        }

    def test_error_response(self):
        res = solve_or_error("5/0")
        assert res.error == "Division by zero is not allowed."
        assert res.final_answer == ""
        assert res.steps == [] and res.symbols == []
        assert res.to_dict()["error"] == "Division by zero is not allowed."

    def test_success_has_no_error_key(self):
        assert "error" not in solve_or_error("2+2").to_dict()


class TestSymbols:
    def test_division_hidden_by_derivative(self):
        names = [s.name for s in extract_symbols("d/dx(x/2)")]
        assert "Division" not in names

    def test_division(self):
        assert [s.name for s in extract_symbols("6 / 3")] == ["Division"]

    def test_sqrt_and_each_symbol_once(self):
        symbols = extract_symbols("sqrt(4) + sqrt(9) + 1")
        assert [s.name for s in symbols] == ["Square Root", "Addition"]
        assert all(isinstance(s, SymbolDefinition) for s in symbols)

    def test_no_symbols(self):
        assert extract_symbols("42") == []


@pytest.mark.parametrize("problem", ["", "   "])
def test_blank_problem_reports_error(problem):
    assert solve_or_error(problem).error == "Empty input. Please enter a problem to solve."
