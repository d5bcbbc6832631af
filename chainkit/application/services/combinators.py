"""
Context handler combinators.

Fold several fallible request-context checks into one middleware with
short-circuit AND/OR semantics:

- AND runs the handlers in order and stops at the first failure.
- OR runs the handlers in order and stops at the first success; when
  all fail, the last failure is the outcome.

A failed outcome is recorded on the request context and the rest of
the chain is skipped. Handler errors never escape the combinator.
"""

import inspect
from enum import Enum
from typing import Iterable, Optional, Sequence

import structlog
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from chainkit.core.metrics import record_context_outcome
from chainkit.domain.entities import Middleware, RequestContext, get_context
from chainkit.domain.exceptions import MiddlewareConfigurationError
from chainkit.domain.interfaces import ContextHandler, Handler

logger = structlog.get_logger(__name__)

MISSING_CONTEXT_BODY = "missing request context"


class ExecutionMode(str, Enum):
    """How a combinator folds the outcomes of its handlers."""

    AND = "and"
    OR = "or"


def missing_context_response() -> Response:
    """Response for a request that reached a context unit without a context."""
    return PlainTextResponse(MISSING_CONTEXT_BODY, status_code=500)


async def _invoke(
    handler: ContextHandler,
    context: RequestContext,
) -> Optional[Exception]:
    try:
        result = handler(context)
        if inspect.isawaitable(result):
            await result
    except Exception as e:
        return e
    return None


async def _run_all(
    handlers: Sequence[ContextHandler],
    context: RequestContext,
) -> Optional[Exception]:
    for handler in handlers:
        err = await _invoke(handler, context)
        if err is not None:
            return err
    return None


async def _run_any(
    handlers: Sequence[ContextHandler],
    context: RequestContext,
) -> Optional[Exception]:
    err: Optional[Exception] = None
    for handler in handlers:
        err = await _invoke(handler, context)
        if err is None:
            return None
    return err


def combine(
    name: str,
    priority: int,
    handlers: Iterable[ContextHandler],
    mode: ExecutionMode = ExecutionMode.AND,
) -> Middleware:
    """
    Build a middleware from context handlers.

    With no handlers the middleware passes every request through.

    Raises:
        MiddlewareConfigurationError: If any handler is None or not callable
    """
    handlers = tuple(handlers)
    for handler in handlers:
        if handler is None or not callable(handler):
            raise MiddlewareConfigurationError(
                f"middleware '{name}': context handler must not be None"
            )

    run = _run_all if mode is ExecutionMode.AND else _run_any

    def decorate(next_handler: Handler) -> Handler:
        if not handlers:
            return next_handler

        async def handle(request: Request) -> Response:
            context = get_context(request)
            if context is None:
                record_context_outcome(name, "missing_context")
                logger.error(
                    "missing_request_context",
                    middleware=name,
                    method=request.method,
                    path=request.url.path,
                )
                return missing_context_response()

            err = await run(handlers, context)
            if err is not None:
                context.append_error(err)
                record_context_outcome(name, "rejected")
                logger.debug(
                    "context_handler_rejected",
                    middleware=name,
                    mode=mode.value,
                    error=str(err),
                    error_type=type(err).__name__,
                )
                return context.error_response()

            record_context_outcome(name, "passed")
            return await next_handler(request)

        return handle

    return Middleware(name=name, priority=priority, decorate=decorate)


def and_(name: str, priority: int, *handlers: ContextHandler) -> Middleware:
    """Middleware that passes only if every handler succeeds."""
    return combine(name, priority, handlers, ExecutionMode.AND)


def or_(name: str, priority: int, *handlers: ContextHandler) -> Middleware:
    """Middleware that passes if any handler succeeds."""
    return combine(name, priority, handlers, ExecutionMode.OR)


def context_handler(name: str, priority: int, handler: ContextHandler) -> Middleware:
    """Middleware running a single context handler."""
    if handler is None:
        raise MiddlewareConfigurationError(
            f"middleware '{name}': context handler must not be None"
        )
    return combine(name, priority, (handler,), ExecutionMode.AND)
