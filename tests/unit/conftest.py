"""
Fixtures for unit tests.

Provides:
- Request factory building bare Starlette requests
- Call recorder shared by tracing middlewares and the terminal handler
- Tracing middleware factory recording pre/post execution
"""

from typing import Callable, Dict, List, Optional

import pytest
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from chainkit.domain.entities import Middleware, RequestContext, set_context


def build_request(
    path: str = "/",
    method: str = "GET",
    headers: Optional[Dict[str, str]] = None,
) -> Request:
    """Build a Starlette request from a minimal HTTP scope."""
    scope = {
        "type": "http",
        "http_version": "1.1",
        "method": method,
        "scheme": "http",
        "path": path,
        "raw_path": path.encode(),
        "root_path": "",
        "query_string": b"",
        "headers": [
            (key.lower().encode("latin-1"), value.encode("latin-1"))
            for key, value in (headers or {}).items()
        ],
        "server": ("testserver", 80),
        "client": ("127.0.0.1", 50000),
    }
    return Request(scope)


@pytest.fixture
def make_request() -> Callable[..., Request]:
    """Factory for bare requests without a request context."""
    return build_request


@pytest.fixture
def make_context_request() -> Callable[..., Request]:
    """Factory for requests with a RequestContext already installed."""

    def factory(**kwargs) -> Request:
        request = build_request(**kwargs)
        set_context(request, RequestContext(request=request))
        return request

    return factory


@pytest.fixture
def calls() -> List[str]:
    """Ordered record of pre/post/terminal executions."""
    return []


@pytest.fixture
def terminal(calls: List[str]):
    """Terminal handler that records "T" and answers 200."""

    async def handler(request: Request) -> Response:
        calls.append("T")
        return PlainTextResponse("ok")

    return handler


@pytest.fixture
def tracing(calls: List[str]) -> Callable[[str, int], Middleware]:
    """Factory for middlewares recording "<name>.pre" and "<name>.post"."""

    def factory(name: str, priority: int) -> Middleware:
        def decorate(next_handler):
            async def handle(request: Request) -> Response:
                calls.append(f"{name}.pre")
                response = await next_handler(request)
                calls.append(f"{name}.post")
                return response

            return handle

        return Middleware(name=name, priority=priority, decorate=decorate)

    return factory
