"""
Domain Interfaces (Ports)
"""

from .handlers import BuilderFunc, ContextHandler, Decorator, Handler

__all__ = [
    "BuilderFunc",
    "ContextHandler",
    "Decorator",
    "Handler",
]
