"""Fixed-path short-circuit middleware."""

from starlette.requests import Request
from starlette.responses import Response

from chainkit.domain.entities import Middleware
from chainkit.domain.interfaces import Handler


def respond204_middleware(
    path: str,
    priority: int = 0,
    name: str = "respond204",
) -> Middleware:
    """Middleware that answers 204 for one exact path, e.g. a health probe."""
    path = path.rstrip("/") or "/"

    def decorate(next_handler: Handler) -> Handler:
        async def handle(request: Request) -> Response:
            if request.url.path == path:
                return Response(status_code=204)
            return await next_handler(request)

        return handle

    return Middleware(name=name, priority=priority, decorate=decorate)
