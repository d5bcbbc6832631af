"""Middleware and chain-related domain exceptions."""

from .base import DomainException


class MiddlewareConfigurationError(DomainException):
    """
    Raised when a middleware unit is constructed with invalid arguments.

    This is a programmer error (a missing decorator or context handler)
    and is never expected to be caught by request-serving code.
    """

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="MIDDLEWARE_CONFIGURATION_ERROR",
        )


class MiddlewareNotFoundException(DomainException):
    """Raised when a middleware cannot be found in a manager."""

    def __init__(self, name: str):
        super().__init__(
            message=f"Middleware not found: {name}",
            code="MIDDLEWARE_NOT_FOUND",
        )
        self.name = name
