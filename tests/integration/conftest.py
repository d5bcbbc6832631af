"""
Fixtures for integration tests.

Provides:
- Settings declaring a built-in middleware stack
- Test terminal handler echoing the request
- Test client for the FastAPI app
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from chainkit.application.services import MiddlewareManager
from chainkit.core.config import Settings
from chainkit.domain.entities import get_context, get_request_id
from chainkit.main import create_app


# =============================================================================
# Terminal Handler
# =============================================================================

async def echo_handler(request: Request) -> Response:
    """Echo the path, request id and context datas; ``/boom`` raises."""
    if request.url.path == "/boom":
        raise RuntimeError("terminal exploded")

    context = get_context(request)
    return JSONResponse(
        {
            "path": request.url.path,
            "request_id": get_request_id(request),
            "datas": dict(context.datas) if context is not None else None,
        }
    )


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest.fixture
def test_settings() -> Settings:
    """Settings declaring the standard built-in stack."""
    return Settings(
        metrics_enabled=True,
        middlewares=[
            {"type": "respond204", "name": "ping", "config": {"path": "/ping"}},
            {"type": "request_id", "name": "request_id"},
            {"type": "logger", "name": "logger"},
            {"type": "context", "name": "context"},
            {"type": "recover", "name": "recover"},
        ],
    )


@pytest.fixture
def app(test_settings: Settings) -> FastAPI:
    return create_app(settings=test_settings, terminal=echo_handler)


@pytest.fixture
def manager(app: FastAPI) -> MiddlewareManager:
    return app.state.manager


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create test client for the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
