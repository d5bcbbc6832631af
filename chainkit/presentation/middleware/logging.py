"""Request/response logging middleware with timing."""

import time
from typing import Callable, Optional

import structlog
from starlette.requests import Request
from starlette.responses import Response

from chainkit.core.metrics import record_http_request
from chainkit.domain.entities import Middleware, get_context, get_request_id
from chainkit.domain.exceptions import PanicError
from chainkit.domain.interfaces import Handler

logger = structlog.get_logger(__name__)


def logger_middleware(
    priority: int = 20,
    enabled: Optional[Callable[[Request], bool]] = None,
    name: str = "logger",
) -> Middleware:
    """
    Middleware that logs request completion and duration.

    Reads the status code from the response and the error, if any,
    from the request context. ``enabled`` can skip logging per request.
    """

    def decorate(next_handler: Handler) -> Handler:
        async def handle(request: Request) -> Response:
            if enabled is not None and not enabled(request):
                return await next_handler(request)

            start_time = time.perf_counter()
            method = request.method
            path = request.url.path

            try:
                response = await next_handler(request)
            except Exception as e:
                duration = time.perf_counter() - start_time
                record_http_request(method, 500, duration)
                logger.error(
                    "request_failed",
                    request_id=get_request_id(request),
                    method=method,
                    path=path,
                    error=str(e),
                    error_type=type(e).__name__,
                    duration_ms=round(duration * 1000, 2),
                )
                raise

            duration = time.perf_counter() - start_time
            record_http_request(method, response.status_code, duration)

            log = logger.bind(
                request_id=get_request_id(request),
                method=method,
                path=path,
            )

            context = get_context(request)
            err = context.err if context is not None else None
            if err is not None:
                extra = {"error": str(err)}
                if isinstance(err, PanicError):
                    extra["stacks"] = err.stacks
                log = log.bind(**extra)

            log.info(
                "request_completed",
                status_code=response.status_code,
                duration_ms=round(duration * 1000, 2),
            )
            return response

        return handle

    return Middleware(name=name, priority=priority, decorate=decorate)
