"""Test class Calculator and the Operation variants."""
import math

from hypothesis import given
from hypothesis import strategies as st
import pytest

from calculator_service.common.calculator import Calculator, Operation
from calculator_service.common.errors import (
    DivisionByZero,
    InvalidNumber,
    MissingParameter,
    ResultOutOfRange,
)
from calculator_service.common.operations import OperationRequest

finite_floats = st.floats(allow_nan=False, allow_infinity=False, min_value=-1e150, max_value=1e150)


@pytest.mark.parametrize("raw,expected", [
    ("2", 2.0),
    ("3.4", 3.4),
    ("-8.9", -8.9),
    (" 1e3 ", 1000.0),
    ("0", 0.0),
    (".5", 0.5),
    ("5.", 5.0),
    ("+2E-1", 0.2),
])
def test_parse_operand_valid(raw: str, expected: float) -> None:
    """parse_operand accepts integers, decimals and exponents."""
    assert Calculator.parse_operand("first", raw) == expected


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_parse_operand_missing(raw) -> None:
    """Absent or blank values raise MissingParameter naming the field."""
    with pytest.raises(MissingParameter) as exc_info:
        Calculator.parse_operand("second", raw)
    assert exc_info.value.parameter == "second"
    assert exc_info.value.code == "missing_parameter"


@pytest.mark.parametrize("raw", [
    "abc", "1,5", "nan", "inf", "-Infinity", "1e400", "0x10",
    "1_000", "\u0661\u0662", "+-1", "1e", ".",
])
def test_parse_operand_invalid(raw: str) -> None:
    """Non-numeric and non-finite values raise InvalidNumber."""
    with pytest.raises(InvalidNumber) as exc_info:
        Calculator.parse_operand("first", raw)
    assert exc_info.value.parameter == "first"
    assert exc_info.value.value == raw


def test_parse_request_checks_first_before_second() -> None:
    """The first offending parameter is reported."""
    with pytest.raises(MissingParameter) as exc_info:
        Calculator.parse_request({})
    assert exc_info.value.parameter == "first"


@pytest.mark.parametrize("operation,first,second,expected", [
    (Operation.ADD, 2.0, 3.0, 5.0),
    (Operation.SUB, 10.0, 4.0, 6.0),
    (Operation.MUL, 3.0, 4.0, 12.0),
    (Operation.DIV, 8.0, 2.0, 4.0),
    (Operation.DIV, 7.0, 2.0, 3.5),
])
def test_operation_apply(operation: Operation, first: float, second: float, expected: float) -> None:
    """Each variant computes its formula."""
    assert operation.apply(first, second) == expected


def test_sub_rounding_is_within_tolerance() -> None:
    """3.4 - 1.4 yields 2 within floating point tolerance."""
    assert math.isclose(Operation.SUB.apply(3.4, 1.4), 2.0)


@pytest.mark.parametrize("divisor", [0.0, -0.0])
def test_div_by_zero_raises(divisor: float) -> None:
    """Division by zero (either sign) raises DivisionByZero."""
    with pytest.raises(DivisionByZero):
        Operation.DIV.apply(10.0, divisor)


def test_overflow_raises_out_of_range() -> None:
    """Finite operands whose product overflows are rejected."""
    with pytest.raises(ResultOutOfRange):
        Operation.MUL.apply(1e200, 1e200)


@pytest.mark.parametrize("name", ["add", "sub", "mul", "div"])
def test_operation_from_route_name(name: str) -> None:
    """Operations are looked up by their route name."""
    assert Operation(name).value == name


def test_unknown_operation() -> None:
    """Unknown route names are not operations."""
    with pytest.raises(ValueError):
        Operation("pow")


def test_evaluate_returns_result_model() -> None:
    """evaluate wraps the computed value in an OperationResult."""
    result = Calculator.evaluate(Operation.ADD, OperationRequest(first=2, second=3))
    assert result.result == 5.0


@given(finite_floats, finite_floats)
def test_add_sub_mul_match_python(a: float, b: float) -> None:
    """add, sub and mul agree with Python's float arithmetic."""
    assert Operation.ADD.apply(a, b) == a + b
    assert Operation.SUB.apply(a, b) == a - b
    assert Operation.MUL.apply(a, b) == a * b


@given(finite_floats, finite_floats.filter(lambda b: abs(b) > 1e-100))
def test_div_matches_python(a: float, b: float) -> None:
    """div agrees with Python's true division for non-zero divisors."""
    assert Operation.DIV.apply(a, b) == a / b


@given(finite_floats)
def test_div_by_zero_never_returns_a_value(a: float) -> None:
    """No dividend divided by zero yields a value."""
    with pytest.raises(DivisionByZero):
        Operation.DIV.apply(a, 0.0)
