"""Health check endpoint for service monitoring."""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from chainkit import __version__
from chainkit.application.services import MiddlewareManager
from chainkit.core.dependencies import get_manager

health_router = APIRouter()


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str
    middlewares: int
    has_terminal: bool


@health_router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Returns the service status and the size of the published chain.",
)
async def health_check(
    manager: Annotated[MiddlewareManager, Depends(get_manager)],
) -> HealthResponse:
    return HealthResponse(
        version=__version__,
        middlewares=len(manager),
        has_terminal=manager.get_terminal() is not None,
    )
