"""Application services: chain management, builders, combinators."""

from .builder_registry import Builder, BuilderRegistry
from .combinators import (
    MISSING_CONTEXT_BODY,
    ExecutionMode,
    and_,
    combine,
    context_handler,
    or_,
)
from .manager import MiddlewareManager

__all__ = [
    "Builder",
    "BuilderRegistry",
    "MISSING_CONTEXT_BODY",
    "ExecutionMode",
    "and_",
    "combine",
    "context_handler",
    "or_",
    "MiddlewareManager",
]
