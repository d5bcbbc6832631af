"""Pydantic schema for API error responses."""

from typing import Optional

from pydantic import BaseModel, Field

from chainkit.domain.exceptions import DomainException


class ErrorResponseSchema(BaseModel):
    """Error body of the admin API; the chain's default renderer emits the same fields."""
    error: str = Field(..., description="Error code", examples=["BUILDER_NOT_FOUND"])
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["No middleware builder for type: gzip"],
    )
    request_id: Optional[str] = Field(None, description="Request ID for tracing")

    @classmethod
    def from_exception(
        cls,
        exc: DomainException,
        request_id: Optional[str] = None,
    ) -> "ErrorResponseSchema":
        return cls(error=exc.code, message=exc.message, request_id=request_id)
