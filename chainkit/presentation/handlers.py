"""Terminal handlers served at the end of the chain."""

from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from chainkit.domain.entities import get_request_id


async def not_found_handler(request: Request) -> Response:
    """Default terminal handler until one is set."""
    return JSONResponse(
        status_code=404,
        content={
            "error": "NOT_FOUND",
            "message": f"No handler for {request.method} {request.url.path}",
            "request_id": get_request_id(request),
        },
    )
