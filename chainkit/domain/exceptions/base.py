"""Base domain exception."""


class DomainException(Exception):
    """
    Base exception for all domain-level errors.

    Domain exceptions represent misconfigured chains, registry
    conflicts, or request-scoped handler failures. ``code`` is the
    machine-readable identifier rendered in error bodies.
    """

    # HTTP status used when the error is rendered for a request, if any.
    status_code: int | None = None

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"
