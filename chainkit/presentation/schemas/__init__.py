"""Pydantic schemas for API request/response validation."""

from .middleware import (
    BuilderListSchema,
    MiddlewareCreateSchema,
    MiddlewareListSchema,
    MiddlewareSchema,
)
from .error import ErrorResponseSchema

__all__ = [
    "BuilderListSchema",
    "MiddlewareCreateSchema",
    "MiddlewareListSchema",
    "MiddlewareSchema",
    "ErrorResponseSchema",
]
