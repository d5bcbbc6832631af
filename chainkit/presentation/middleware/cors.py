"""Cross-Origin Resource Sharing middleware."""

from pydantic import BaseModel, Field
from starlette.requests import Request
from starlette.responses import Response

from chainkit.domain.entities import Middleware
from chainkit.domain.interfaces import Handler

DEFAULT_ALLOW_METHODS = ["HEAD", "GET", "POST", "PUT", "PATCH", "DELETE"]

# Longest authority accepted for wildcard subdomain matching.
_MAX_AUTHORITY_LENGTH = 253


class CORSConfig(BaseModel):
    """CORS policy. Empty origins and methods fall back to the defaults."""

    model_config = {"extra": "forbid"}

    allow_origins: list[str] = Field(default_factory=lambda: ["*"])
    allow_methods: list[str] = Field(default_factory=lambda: list(DEFAULT_ALLOW_METHODS))
    allow_headers: list[str] = Field(default_factory=list)
    expose_headers: list[str] = Field(default_factory=list)
    allow_credentials: bool = False
    max_age: int = 0


def match_subdomain(origin: str, pattern: str) -> bool:
    """
    Report whether origin matches a wildcard pattern.

    The pattern is compared label by label from the top-level domain;
    a ``*`` label matches the rest, e.g. ``https://*.example.com``.
    """
    origin_scheme, sep, origin_auth = origin.partition("://")
    pattern_scheme, pattern_sep, pattern_auth = pattern.partition("://")
    if not sep or not pattern_sep or origin_scheme != pattern_scheme:
        return False
    if len(origin_auth) > _MAX_AUTHORITY_LENGTH:
        return False

    origin_labels = origin_auth.split(".")[::-1]
    pattern_labels = pattern_auth.split(".")[::-1]
    for i, label in enumerate(origin_labels):
        if i >= len(pattern_labels):
            return False
        if pattern_labels[i] == "*":
            return True
        if pattern_labels[i] != label:
            return False
    return False


def _allowed_origin(config: CORSConfig, origin: str) -> str:
    for allowed in config.allow_origins:
        if allowed == "*":
            return origin if config.allow_credentials else allowed
        if allowed == origin:
            return allowed
        if match_subdomain(origin, allowed):
            return origin
    return ""


def cors_middleware(
    priority: int = 25,
    config: CORSConfig | None = None,
    name: str = "cors",
) -> Middleware:
    """Middleware that answers preflights and adds CORS response headers."""
    config = (config or CORSConfig()).model_copy()
    if not config.allow_origins:
        config.allow_origins = ["*"]
    if not config.allow_methods:
        config.allow_methods = list(DEFAULT_ALLOW_METHODS)

    allow_methods = ",".join(config.allow_methods)
    allow_headers = ",".join(config.allow_headers)
    expose_headers = ",".join(config.expose_headers)

    def decorate(next_handler: Handler) -> Handler:
        async def handle(request: Request) -> Response:
            origin = request.headers.get("origin", "")
            allow_origin = _allowed_origin(config, origin)
            if not allow_origin:
                return await next_handler(request)

            # Simple request
            if request.method != "OPTIONS":
                response = await next_handler(request)
                response.headers.add_vary_header("Origin")
                response.headers["Access-Control-Allow-Origin"] = allow_origin
                if config.allow_credentials:
                    response.headers["Access-Control-Allow-Credentials"] = "true"
                if expose_headers:
                    response.headers["Access-Control-Expose-Headers"] = expose_headers
                return response

            # Preflight request
            response = Response(status_code=204)
            headers = response.headers
            headers.add_vary_header("Origin")
            headers.add_vary_header("Access-Control-Request-Method")
            headers.add_vary_header("Access-Control-Request-Headers")
            headers["Access-Control-Allow-Origin"] = allow_origin
            headers["Access-Control-Allow-Methods"] = allow_methods
            if config.allow_credentials:
                headers["Access-Control-Allow-Credentials"] = "true"

            requested = request.headers.get("access-control-request-headers", "")
            if allow_headers:
                headers["Access-Control-Allow-Headers"] = allow_headers
            elif requested:
                headers["Access-Control-Allow-Headers"] = requested

            if config.max_age > 0:
                headers["Access-Control-Max-Age"] = str(config.max_age)

            return response

        return handle

    return Middleware(name=name, priority=priority, decorate=decorate)
