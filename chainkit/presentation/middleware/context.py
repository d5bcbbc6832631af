"""Request context allocation middleware."""

from typing import Callable

from starlette.requests import Request
from starlette.responses import Response

from chainkit.domain.entities import (
    Middleware,
    RequestContext,
    get_context,
    render_error,
    set_context,
)
from chainkit.domain.interfaces import Handler


def context_middleware(
    priority: int = 30,
    renderer: Callable[[RequestContext], Response] = render_error,
    name: str = "context",
) -> Middleware:
    """
    Middleware that installs a RequestContext on every request.

    Must run before any context handler combinator. A request that
    already carries a context keeps it. If the inner chain records an
    error but still answers with a success status, the error is
    rendered instead.
    """

    def decorate(next_handler: Handler) -> Handler:
        async def handle(request: Request) -> Response:
            if get_context(request) is not None:
                return await next_handler(request)

            context = RequestContext(request=request, renderer=renderer)
            set_context(request, context)

            response = await next_handler(request)
            if context.err is not None and response.status_code < 400:
                return context.error_response()
            return response

        return handle

    return Middleware(name=name, priority=priority, decorate=decorate)
