"""Dependency injection for FastAPI."""

from fastapi import Request

from chainkit.application.services import BuilderRegistry, MiddlewareManager


def get_manager(request: Request) -> MiddlewareManager:
    """Get the middleware manager the app serves through."""
    return request.app.state.manager


def get_builder_registry(request: Request) -> BuilderRegistry:
    """Get the app's middleware builder registry."""
    return request.app.state.builder_registry
