"""
chainkit - Main Application Entry Point

Serves every request through a mutable, prioritized middleware chain
and exposes an admin API to inspect and change that chain at runtime.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import structlog
from fastapi import FastAPI, Response

from chainkit import __version__
from chainkit.application.services import MiddlewareManager
from chainkit.core.config import Settings, get_settings
from chainkit.core.logging import setup_logging
from chainkit.core.metrics import get_metrics, get_metrics_content_type
from chainkit.domain.interfaces import Handler
from chainkit.presentation.api import api_router
from chainkit.presentation.handlers import not_found_handler
from chainkit.presentation.middleware import (
    default_builder_registry,
    error_handler_middleware,
)


def create_app(
    settings: Optional[Settings] = None,
    terminal: Optional[Handler] = None,
) -> FastAPI:
    """
    Build the application.

    The middlewares declared in ``settings.middlewares`` are built
    through the default builder registry and loaded into the manager,
    which serves every path not claimed by the admin API.
    """
    settings = settings or get_settings()

    registry = default_builder_registry(settings)
    manager = MiddlewareManager(
        terminal=terminal or not_found_handler,
        middlewares=registry.build_all(settings.middlewares),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        Application lifespan manager.

        Sets up logging on startup and reports the loaded chain.
        """
        setup_logging(settings)

        logger = structlog.get_logger(__name__)
        logger.info(
            "application_started",
            version=__version__,
            middlewares=[mw.name for mw in manager.list()],
        )

        yield

        logger.info("application_stopped")

    app = FastAPI(
        title="chainkit",
        description="Prioritized, runtime-mutable middleware chains",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.settings = settings
    app.state.manager = manager
    app.state.builder_registry = registry

    error_handler_middleware(app)

    app.include_router(api_router)

    if settings.metrics_enabled:
        @app.get("/metrics", include_in_schema=False)
        async def metrics() -> Response:
            """Prometheus metrics endpoint."""
            return Response(
                content=get_metrics(),
                media_type=get_metrics_content_type(),
            )

    # Everything else goes through the chain.
    app.mount("/", manager)

    return app


app = create_app()
