"""Request-scoped context handler errors."""

from typing import Sequence

from .base import DomainException


class ContextHandlerError(DomainException):
    """
    Error raised by a context handler to reject a request.

    Carries the HTTP status the error-reporting stage should use.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str = "CONTEXT_HANDLER_ERROR",
    ):
        super().__init__(message=message, code=code)
        self.status_code = status_code


class ContextErrors(DomainException):
    """Aggregate of several errors recorded on one request context."""

    def __init__(self, errors: Sequence[BaseException]):
        self.errors = list(errors)
        super().__init__(
            message="; ".join(str(e) for e in self.errors),
            code="MULTIPLE_ERRORS",
        )

    @property
    def status_code(self) -> int | None:
        """Status of the most recent error that carries one."""
        for error in reversed(self.errors):
            status = getattr(error, "status_code", None)
            if status is not None:
                return status
        return None


class PanicError(DomainException):
    """Wraps an exception caught by the recover middleware."""

    def __init__(self, cause: BaseException, stacks: list[str] | None = None):
        super().__init__(
            message=f"panic: {cause}",
            code="PANIC",
        )
        self.cause = cause
        self.stacks = stacks or []
        self.status_code = 500
