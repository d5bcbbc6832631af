from fastapi import APIRouter

from .builders import builder_router
from .health import health_router
from .middlewares import middleware_router

router = APIRouter()

router.include_router(health_router, tags=["Health"])
router.include_router(middleware_router, tags=["Middlewares"])
router.include_router(builder_router, tags=["Builders"])
