"""API endpoint for listing middleware builder types."""

from typing import Annotated

from fastapi import APIRouter, Depends

from chainkit.application.services import BuilderRegistry
from chainkit.core.dependencies import get_builder_registry
from chainkit.presentation.schemas import BuilderListSchema

builder_router = APIRouter(prefix="/builders")


@builder_router.get(
    "",
    response_model=BuilderListSchema,
    summary="List Builder Types",
)
async def list_builders(
    registry: Annotated[BuilderRegistry, Depends(get_builder_registry)],
) -> BuilderListSchema:
    return BuilderListSchema(types=[b.type for b in registry.list_builders()])
