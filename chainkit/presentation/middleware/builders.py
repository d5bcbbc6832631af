"""Builders for the built-in middlewares, keyed by type name."""

from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError

from chainkit.application.services import BuilderRegistry
from chainkit.core.config import Settings
from chainkit.domain.entities import Middleware
from chainkit.domain.exceptions import InvalidBuilderConfigException

from .context import context_middleware
from .cors import CORSConfig, cors_middleware
from .logging import logger_middleware
from .path import respond204_middleware
from .recover import recover_middleware
from .request_context import RequestIdGenerator, request_id_middleware

ConfigT = TypeVar("ConfigT", bound=BaseModel)

# Default priorities, outermost first.
DEFAULT_PRIORITIES = {
    "respond204": 0,
    "request_id": 10,
    "logger": 20,
    "cors": 25,
    "context": 30,
    "recover": 40,
}


class PriorityConfig(BaseModel):
    model_config = {"extra": "forbid"}

    priority: int | None = None


class CORSBuilderConfig(CORSConfig, PriorityConfig):
    pass


class Respond204Config(PriorityConfig):
    path: str


class RequestIdConfig(PriorityConfig):
    header: str | None = None
    length: int | None = None


def _parse(builder_type: str, model: Type[ConfigT], config: dict[str, Any]) -> ConfigT:
    try:
        return model.model_validate(config)
    except ValidationError as e:
        raise InvalidBuilderConfigException(builder_type, str(e)) from e


def _priority(builder_type: str, parsed: PriorityConfig) -> int:
    if parsed.priority is None:
        return DEFAULT_PRIORITIES[builder_type]
    return parsed.priority


def build_context(name: str, config: dict[str, Any]) -> Middleware:
    parsed = _parse("context", PriorityConfig, config)
    return context_middleware(priority=_priority("context", parsed), name=name)


def build_logger(name: str, config: dict[str, Any]) -> Middleware:
    parsed = _parse("logger", PriorityConfig, config)
    return logger_middleware(priority=_priority("logger", parsed), name=name)


def build_recover(name: str, config: dict[str, Any]) -> Middleware:
    parsed = _parse("recover", PriorityConfig, config)
    return recover_middleware(priority=_priority("recover", parsed), name=name)


def build_cors(name: str, config: dict[str, Any]) -> Middleware:
    parsed = _parse("cors", CORSBuilderConfig, config)
    cors_config = CORSConfig.model_validate(parsed.model_dump(exclude={"priority"}))
    return cors_middleware(
        priority=_priority("cors", parsed),
        config=cors_config,
        name=name,
    )


def build_respond204(name: str, config: dict[str, Any]) -> Middleware:
    parsed = _parse("respond204", Respond204Config, config)
    return respond204_middleware(
        parsed.path,
        priority=_priority("respond204", parsed),
        name=name,
    )


def request_id_builder(settings: Settings):
    """Return a request id builder whose defaults come from settings."""

    def build_request_id(name: str, config: dict[str, Any]) -> Middleware:
        parsed = _parse("request_id", RequestIdConfig, config)
        length = parsed.length or settings.request_id_length
        return request_id_middleware(
            priority=_priority("request_id", parsed),
            generator=RequestIdGenerator(length=length),
            header=parsed.header or settings.request_id_header,
            name=name,
        )

    return build_request_id


def default_builder_registry(settings: Settings) -> BuilderRegistry:
    """Create a registry with builders for every built-in middleware."""
    registry = BuilderRegistry()
    registry.add_builder("context", build_context)
    registry.add_builder("logger", build_logger)
    registry.add_builder("recover", build_recover)
    registry.add_builder("cors", build_cors)
    registry.add_builder("respond204", build_respond204)
    registry.add_builder("request_id", request_id_builder(settings))
    return registry
