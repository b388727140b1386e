"""Tests for the step-annotated arithmetic evaluator."""

import math

import pytest

from stepsolve_pkg.evaluator import evaluate, factorial, solve_arithmetic
from stepsolve_pkg.expression import parse_expression, render
from stepsolve_pkg.types import MathDomainError, ParseError, ValidationError


def rules(response):
    return [step.rule for step in response.steps]


class TestPrecedence:
    """Operator tiers and associativity."""

    def test_multiplication_before_addition(self):
        res = solve_arithmetic("2 + 3 * 4")
        assert res.final_answer == "14"
        assert [s.expression for s in res.steps] == ["2 + 3 * 4", "2 + 12", "14"]
        assert rules(res) == [
            "Initial Expression",
            "Multiplication/Division",
            "Addition/Subtraction",
        ]

    def test_exponent_is_left_associative(self):
        assert evaluate("2^3^2") == 64

    def test_leading_minus_binds_looser_than_exponent(self):
        assert evaluate("-2^2") == -4
        assert evaluate("(-2)^2") == 4
        assert evaluate("-(3)^2") == -9
        assert evaluate("2 * -3^2") == -18

    def test_signed_exponent(self):
        assert evaluate("2^-1") == 0.5
        assert evaluate("-2^-2") == -0.25

    def test_negated_power_steps(self):
        res = solve_arithmetic("-2^2 + 1")
        assert res.final_answer == "-3"
        assert [s.expression for s in res.steps] == ["-2^2 + 1", "-4 + 1", "-3"]

    def test_subtraction_and_division_left_to_right(self):
        assert evaluate("10 - 4 - 3") == 3
        assert evaluate("8 / 4 / 2") == 1

    def test_parentheses_first(self):
        res = solve_arithmetic("(1+2)*3")
        assert res.final_answer == "9"
        assert rules(res) == [
            "Initial Expression",
            "Parentheses (Brackets)",
            "Multiplication/Division",
        ]

    def test_nested_groups(self):
        assert evaluate("((2+3)*(1+1))^2") == 100

    def test_implicit_multiplication(self):
        assert evaluate("2(3+4)") == 14
        assert evaluate("3sqrt(4)") == 6


class TestSteps:
    """Step suppression and final answer step."""

    def test_bare_number_has_no_steps(self):
        res = solve_arithmetic("5")
        assert res.final_answer == "5"
        assert res.steps == []

    def test_final_step_not_duplicated(self):
        res = solve_arithmetic("1 + 1")
        assert res.steps[-1].expression == "2"
        assert [s.expression for s in res.steps].count("2") == 1

    def test_function_argument_step_only_when_argument_needs_work(self):
        simple = solve_arithmetic("sqrt(16) + 1")
        assert simple.final_answer == "5"
        assert "Function Argument" not in rules(simple)

        compound = solve_arithmetic("sqrt(9+7)")
        assert compound.final_answer == "4"
        assert rules(compound) == ["Initial Expression", "Function Argument", "Square Root"]

    def test_percentage_conversion(self):
        res = solve_arithmetic("50%")
        assert res.final_answer == "0.5"
        conversion = [s for s in res.steps if s.rule == "Percentage Conversion"]
        assert conversion[0].expression == "(50 / 100)"

    def test_constant_substitution(self):
        res = solve_arithmetic("2pi")
        assert res.final_answer == "6.283185307179586"
        assert res.steps[1].rule == "Constant Substitution"


class TestFunctions:
    def test_factorial(self):
        assert solve_arithmetic("fact(5)").final_answer == "120"
        assert factorial(0) == 1

    def test_degree_conversion(self):
        assert solve_arithmetic("degtorad(180)").final_answer == "3.141592653589793"
        assert evaluate("radtodeg(pi)") == pytest.approx(180)

    def test_trigonometry(self):
        assert evaluate("sin(pi/2)") == pytest.approx(1)
        assert evaluate("cos(0)") == 1

    def test_logarithms(self):
        assert evaluate("log(1000)") == pytest.approx(3)
        assert evaluate("ln(e)") == pytest.approx(1)


class TestErrors:
    def test_division_by_zero(self):
        with pytest.raises(MathDomainError) as exc:
            solve_arithmetic("5/0")
        assert exc.value.code == "DIVISION_BY_ZERO"
        assert str(exc.value) == "Division by zero is not allowed."

    @pytest.mark.parametrize("text", ["sqrt(-4)", "log(0)", "ln(-1)", "fact(-1)", "fact(171)"])
    def test_domain_errors(self, text):
        with pytest.raises(MathDomainError):
            solve_arithmetic(text)

    def test_factorial_message(self):
        with pytest.raises(MathDomainError, match="too large"):
            solve_arithmetic("fact(171)")

    def test_dangling_operator(self):
        with pytest.raises(ParseError):
            solve_arithmetic("2 +")

    def test_unclosed_group(self):
        with pytest.raises(ValidationError) as exc:
            solve_arithmetic("(1+2")
        assert exc.value.code == "MISMATCHED_PARENS"

    def test_function_without_call(self):
        with pytest.raises(ValidationError) as exc:
            solve_arithmetic("sin")
        assert exc.value.code == "INVALID_FORMAT"

    def test_unknown_name(self):
        with pytest.raises(ParseError):
            solve_arithmetic("x+1")


def test_render_round_trips_spacing():
    assert render(parse_expression("2+3*sqrt(4)")) == "2 + 3 * sqrt(4)"


def test_e_after_number_is_euler_constant():
    assert evaluate("2e+1") == pytest.approx(2 * math.e + 1)
    assert evaluate("2e+1") == evaluate("2e + 1")
    assert evaluate("2e") == pytest.approx(2 * math.e)
