"""Domain Entities - Middleware units and the request context."""

from .context import (
    REQUEST_ID_HEADER,
    RequestContext,
    get_context,
    get_request_id,
    render_error,
    set_context,
)
from .middleware import (
    Middleware,
    compose,
    sort_middlewares,
    sorted_middlewares,
)

__all__ = [
    "Middleware",
    "compose",
    "sort_middlewares",
    "sorted_middlewares",
    "REQUEST_ID_HEADER",
    "RequestContext",
    "get_context",
    "get_request_id",
    "render_error",
    "set_context",
]
