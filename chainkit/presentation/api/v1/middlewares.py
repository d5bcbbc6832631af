"""API endpoints for inspecting and changing the middleware chain."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Path, Response

from chainkit.application.dto import MiddlewareInfo
from chainkit.application.services import BuilderRegistry, MiddlewareManager
from chainkit.core.dependencies import get_builder_registry, get_manager
from chainkit.domain.exceptions import MiddlewareNotFoundException
from chainkit.presentation.schemas import (
    ErrorResponseSchema,
    MiddlewareCreateSchema,
    MiddlewareListSchema,
    MiddlewareSchema,
)

logger = structlog.get_logger(__name__)

middleware_router = APIRouter(prefix="/middlewares")


def _to_list_schema(manager: MiddlewareManager) -> MiddlewareListSchema:
    infos = MiddlewareInfo.from_chain(manager.list())
    return MiddlewareListSchema(
        middlewares=[
            MiddlewareSchema(name=i.name, priority=i.priority, position=i.position)
            for i in infos
        ],
        count=len(infos),
    )


@middleware_router.get(
    "",
    response_model=MiddlewareListSchema,
    summary="List Middlewares",
    description="Returns the published middleware chain in execution order.",
)
async def list_middlewares(
    manager: Annotated[MiddlewareManager, Depends(get_manager)],
) -> MiddlewareListSchema:
    return _to_list_schema(manager)


@middleware_router.get(
    "/{name}",
    response_model=MiddlewareSchema,
    summary="Get Middleware",
    responses={
        404: {"model": ErrorResponseSchema, "description": "Middleware not found"},
    },
)
async def get_middleware(
    name: Annotated[str, Path(description="Middleware name")],
    manager: Annotated[MiddlewareManager, Depends(get_manager)],
) -> MiddlewareSchema:
    middleware = manager.get(name)
    if middleware is None:
        raise MiddlewareNotFoundException(name)

    positions = {m.name: i for i, m in enumerate(manager.list())}
    if name not in positions:
        # Removed concurrently.
        raise MiddlewareNotFoundException(name)
    return MiddlewareSchema(
        name=middleware.name,
        priority=middleware.priority,
        position=positions[name],
    )


@middleware_router.post(
    "",
    response_model=MiddlewareListSchema,
    status_code=201,
    summary="Add Middleware",
    description="""
    Build a middleware through the builder registry and add it to the chain.

    A middleware with the same name is replaced.
    """,
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid builder config"},
        404: {"model": ErrorResponseSchema, "description": "Unknown builder type"},
    },
)
async def add_middleware(
    body: MiddlewareCreateSchema,
    manager: Annotated[MiddlewareManager, Depends(get_manager)],
    registry: Annotated[BuilderRegistry, Depends(get_builder_registry)],
) -> MiddlewareListSchema:
    middleware = registry.build(body.type, body.name, body.config)
    manager.add(middleware)

    logger.info(
        "middleware_added",
        type=body.type,
        name=middleware.name,
        priority=middleware.priority,
    )
    return _to_list_schema(manager)


@middleware_router.delete(
    "/{name}",
    status_code=204,
    summary="Remove Middleware",
    description="Remove a middleware by name. Removing an absent name succeeds.",
)
async def remove_middleware(
    name: Annotated[str, Path(description="Middleware name")],
    manager: Annotated[MiddlewareManager, Depends(get_manager)],
) -> Response:
    manager.remove(name)
    logger.info("middleware_removed", name=name)
    return Response(status_code=204)
