"""Request identification middleware for tracing."""

import secrets
import string
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Callable, Optional

import structlog
from starlette.requests import Request
from starlette.responses import Response

from chainkit.domain.entities import REQUEST_ID_HEADER, Middleware
from chainkit.domain.interfaces import Handler

# Context variable for request ID
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def get_current_request_id() -> Optional[str]:
    """Get the current request ID from context."""
    return request_id_var.get()


@dataclass(frozen=True)
class RequestIdGenerator:
    """Generates random alphanumeric request ids."""

    length: int = 24
    charset: str = string.ascii_letters + string.digits

    def __call__(self, request: Request) -> str:
        return "".join(secrets.choice(self.charset) for _ in range(self.length))


def request_id_middleware(
    priority: int = 10,
    generator: Optional[Callable[[Request], str]] = None,
    header: str = REQUEST_ID_HEADER,
    name: str = "request_id",
) -> Middleware:
    """
    Middleware that assigns a request id.

    Keeps the id the client sent in ``header``, otherwise generates one.
    The id is stored on the request state, bound to the structlog
    context, and echoed in the response headers.
    """
    generate = generator or RequestIdGenerator()

    def decorate(next_handler: Handler) -> Handler:
        async def handle(request: Request) -> Response:
            request_id = request.headers.get(header) or generate(request)
            request.state.request_id = request_id

            token = request_id_var.set(request_id)
            structlog.contextvars.bind_contextvars(request_id=request_id)
            try:
                response = await next_handler(request)
                response.headers[header] = request_id
                return response
            finally:
                structlog.contextvars.unbind_contextvars("request_id")
                request_id_var.reset(token)

        return handle

    return Middleware(name=name, priority=priority, decorate=decorate)
