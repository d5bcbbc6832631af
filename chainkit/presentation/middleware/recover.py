"""Exception recovery middleware."""

import traceback

import structlog
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from chainkit.domain.entities import Middleware, get_context
from chainkit.domain.exceptions import PanicError
from chainkit.domain.interfaces import Handler

logger = structlog.get_logger(__name__)

PANIC_HEADER = "X-Panic"


def recover_middleware(priority: int = 40, name: str = "recover") -> Middleware:
    """
    Middleware that turns exceptions from the inner chain into a 500.

    With a request context the exception is recorded as a PanicError
    and rendered by the context; without one it is logged here.
    """

    def decorate(next_handler: Handler) -> Handler:
        async def handle(request: Request) -> Response:
            try:
                return await next_handler(request)
            except Exception as e:
                stacks = traceback.format_exception(type(e), e, e.__traceback__)
                context = get_context(request)
                if context is not None:
                    context.append_error(PanicError(e, stacks))
                    response = context.error_response()
                else:
                    logger.exception(
                        "unhandled_exception",
                        method=request.method,
                        path=request.url.path,
                        error=str(e),
                        error_type=type(e).__name__,
                    )
                    response = PlainTextResponse(
                        "Internal Server Error", status_code=500
                    )

                response.headers[PANIC_HEADER] = "1"
                return response

        return handle

    return Middleware(name=name, priority=priority, decorate=decorate)
