"""Parse operands and evaluate the four calculator operations."""
from enum import Enum
import math
import operator
import re
from typing import Callable, Dict, Mapping, Optional

from calculator_service.common.errors import (
    DivisionByZero,
    InvalidNumber,
    MissingParameter,
    ResultOutOfRange,
)
from calculator_service.common.operations import OperationRequest, OperationResult


# Plain decimal or exponent notation, e.g. "2", "-3.4", ".5", "1e3"
NUMBER_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)

# Type alias for operator functions (taking two floats, returning a float)
OperatorFn = Callable[[float, float], float]


class Operation(str, Enum):
    """Closed set of operations, valued by their route name."""

    ADD = "add"
    SUB = "sub"
    MUL = "mul"
    DIV = "div"

    @property
    def symbol(self) -> str:
        return SYMBOLS[self]

    def apply(self, first: float, second: float) -> float:
        """
        Evaluate the operation on two finite operands.

        :param float first: Left operand
        :param float second: Right operand

        :return: Computed value
        :rtype: float
        :raises DivisionByZero: If dividing by zero
        :raises ResultOutOfRange: If the result overflows to infinity
        """
        if self is Operation.DIV and second == 0:
            raise DivisionByZero()
        result: float = OPERATORS[self](first, second)
        if not math.isfinite(result):
            raise ResultOutOfRange(self.value)
        return result


OPERATORS: Dict[Operation, OperatorFn] = {
    Operation.ADD: operator.add,
    Operation.SUB: operator.sub,
    Operation.MUL: operator.mul,
    Operation.DIV: operator.truediv,
}

SYMBOLS: Dict[Operation, str] = {
    Operation.ADD: "+",
    Operation.SUB: "-",
    Operation.MUL: "*",
    Operation.DIV: "/",
}


class Calculator:
    """
    Turn raw query parameters into a computed result.

    Steps:
        1. Read ``first`` and ``second`` from the query mapping.
        2. Parse each as a finite float.
        3. Apply the requested operation.
    """

    @staticmethod
    def parse_operand(name: str, raw: Optional[str]) -> float:
        """
        Parse a single query parameter as a finite float.

        :param str name: Query parameter name
        :param raw: Raw query parameter value, None when absent

        :return: Parsed operand
        :rtype: float
        :raises MissingParameter: If the value is absent or blank
        :raises InvalidNumber: If the value is not a finite number
        """
        if raw is None or not raw.strip():
            raise MissingParameter(name)
        if not NUMBER_PATTERN.fullmatch(raw.strip()):
            raise InvalidNumber(name, raw)
        value = float(raw)
        if not math.isfinite(value):
            raise InvalidNumber(name, raw)
        return value

    @staticmethod
    def parse_request(args: Mapping[str, str]) -> OperationRequest:
        """
        Build an OperationRequest from query parameters.

        :param Mapping args: Query parameters of the request

        :return: Validated request
        :rtype: OperationRequest
        """
        return OperationRequest(
            first=Calculator.parse_operand("first", args.get("first")),
            second=Calculator.parse_operand("second", args.get("second")),
        )

    @staticmethod
    def evaluate(operation: Operation, request: OperationRequest) -> OperationResult:
        """Apply the operation to a validated request."""
        return OperationResult(result=operation.apply(request.first, request.second))
