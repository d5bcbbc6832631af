"""Domain Exceptions - Chain misconfiguration and request-scoped errors."""

from .base import DomainException
from .middleware import (
    MiddlewareConfigurationError,
    MiddlewareNotFoundException,
)
from .builder import (
    BuilderAlreadyExistsException,
    BuilderNotFoundException,
    InvalidBuilderConfigException,
)
from .context import (
    ContextErrors,
    ContextHandlerError,
    PanicError,
)

__all__ = [
    "DomainException",
    "MiddlewareConfigurationError",
    "MiddlewareNotFoundException",
    "BuilderAlreadyExistsException",
    "BuilderNotFoundException",
    "InvalidBuilderConfigException",
    "ContextErrors",
    "ContextHandlerError",
    "PanicError",
]
