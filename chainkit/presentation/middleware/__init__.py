"""Built-in middlewares and their builders."""

from .builders import DEFAULT_PRIORITIES, default_builder_registry
from .context import context_middleware
from .cors import CORSConfig, cors_middleware
from .error_handler import error_handler_middleware
from .logging import logger_middleware
from .path import respond204_middleware
from .recover import recover_middleware
from .request_context import (
    RequestIdGenerator,
    get_current_request_id,
    request_id_middleware,
)

__all__ = [
    "DEFAULT_PRIORITIES",
    "default_builder_registry",
    "context_middleware",
    "CORSConfig",
    "cors_middleware",
    "error_handler_middleware",
    "logger_middleware",
    "respond204_middleware",
    "recover_middleware",
    "RequestIdGenerator",
    "get_current_request_id",
    "request_id_middleware",
]
