"""Pydantic models for calculator requests, results and errors."""
import math
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OperationRequest(BaseModel):
    """Represents the two operands of a single calculator request."""

    model_config = ConfigDict(frozen=True)

    first: float = Field(..., description="Left operand")
    second: float = Field(..., description="Right operand")

    @field_validator("first", "second")
    def operand_must_be_finite(cls, v: float) -> float:
        """Reject NaN and infinities."""
        if not math.isfinite(v):
            raise ValueError("Operand must be a finite number")
        return v


class OperationResult(BaseModel):
    """Represents the result of an evaluated operation."""

    result: float = Field(..., description="Computed value of the operation")


class ErrorResponse(BaseModel):
    """Represents the JSON payload returned when a request cannot be fulfilled."""

    error: str = Field(..., description="Human readable reason")
    code: str = Field(..., description="Machine readable error code")
    parameter: Optional[str] = Field(default=None, description="Offending query parameter, if any")
