"""Client-input errors raised while handling a calculator request."""
from http import HTTPStatus
from typing import Optional


class CalculatorError(Exception):
    """
    Base class for errors caused by the caller's input.

    Each subclass carries the HTTP status and the machine-readable code
    rendered in the JSON error payload.
    """

    status_code: int = HTTPStatus.BAD_REQUEST
    code: str = "calculator_error"

    def __init__(self, message: str, parameter: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.parameter = parameter


class MissingParameter(CalculatorError):
    """A required query parameter is absent or blank."""

    code = "missing_parameter"

    def __init__(self, parameter: str):
        super().__init__(f"Missing required query parameter '{parameter}'", parameter)


class InvalidNumber(CalculatorError):
    """A query parameter does not hold a finite number."""

    code = "invalid_number"

    def __init__(self, parameter: str, value: str):
        super().__init__(
            f"Query parameter '{parameter}' must be a finite number, got {value!r}",
            parameter,
        )
        self.value = value


class DivisionByZero(CalculatorError):
    code = "division_by_zero"

    def __init__(self):
        super().__init__("Division by zero is not allowed", "second")


class ResultOutOfRange(CalculatorError):
    """The operands are finite but the result overflows a double."""

    code = "result_out_of_range"

    def __init__(self, operation: str):
        super().__init__(f"Result of '{operation}' is out of the floating point range")
