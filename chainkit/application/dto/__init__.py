"""Data Transfer Objects for application layer."""

from .middleware import MiddlewareInfo, MiddlewareSpec

__all__ = [
    "MiddlewareInfo",
    "MiddlewareSpec",
]
