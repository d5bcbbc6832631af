"""Builder registry - construct middlewares by type name from config."""

import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional

import structlog

from chainkit.application.dto import MiddlewareSpec
from chainkit.core.metrics import record_build
from chainkit.domain.entities import Middleware
from chainkit.domain.exceptions import (
    BuilderAlreadyExistsException,
    BuilderNotFoundException,
    MiddlewareConfigurationError,
)
from chainkit.domain.interfaces import BuilderFunc

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Builder:
    """A middleware constructor registered under a type name."""

    type: str
    build: BuilderFunc

    def __post_init__(self) -> None:
        if self.build is None or not callable(self.build):
            raise MiddlewareConfigurationError(
                f"builder '{self.type}' must have a callable constructor"
            )

    def build_middleware(
        self,
        name: str,
        config: Optional[dict[str, Any]] = None,
    ) -> Middleware:
        return self.build(name, config if config is not None else {})


class BuilderRegistry:
    """
    Concurrency-safe map from middleware type to its builder.

    Lookups read an immutable snapshot of the map; registrations
    replace it under a lock.

    Example:
        registry = BuilderRegistry()
        registry.add_builder("cors", build_cors)
        mw = registry.build("cors", "cors-public", {"allow_origins": ["*"]})
    """

    def __init__(self, builders: Iterable[Builder] = ()):
        self._lock = threading.Lock()
        self._builders: Mapping[str, Builder] = MappingProxyType({})
        for builder in builders:
            self.add(builder)

    def add(self, builder: Builder) -> None:
        """
        Register a builder.

        Raises:
            BuilderAlreadyExistsException: If the type is already registered
        """
        with self._lock:
            if builder.type in self._builders:
                raise BuilderAlreadyExistsException(builder.type)

            builders = dict(self._builders)
            builders[builder.type] = builder
            self._builders = MappingProxyType(builders)

        logger.debug("middleware_builder_registered", type=builder.type)

    def add_builder(self, builder_type: str, build: BuilderFunc) -> Builder:
        """Register a constructor function under a type name."""
        builder = Builder(type=builder_type, build=build)
        self.add(builder)
        return builder

    def remove_builder(self, builder_type: str) -> Optional[Builder]:
        """Remove and return the builder, or None if absent."""
        with self._lock:
            builder = self._builders.get(builder_type)
            if builder is None:
                return None

            builders = dict(self._builders)
            del builders[builder_type]
            self._builders = MappingProxyType(builders)

        logger.debug("middleware_builder_removed", type=builder_type)
        return builder

    def get_builder(self, builder_type: str) -> Optional[Builder]:
        return self._builders.get(builder_type)

    def list_builders(self) -> list[Builder]:
        """Return all builders ordered by type name."""
        builders = self._builders
        return [builders[typ] for typ in sorted(builders)]

    def __contains__(self, builder_type: object) -> bool:
        return builder_type in self._builders

    def build(
        self,
        builder_type: str,
        name: str,
        config: Optional[dict[str, Any]] = None,
    ) -> Middleware:
        """
        Build a middleware named name using the builder for builder_type.

        Errors raised by the builder propagate unchanged.

        Raises:
            BuilderNotFoundException: If no builder is registered for the type
        """
        builder = self.get_builder(builder_type)
        if builder is None:
            record_build(builder_type, success=False)
            raise BuilderNotFoundException(builder_type)

        try:
            middleware = builder.build_middleware(name, config)
            if not isinstance(middleware, Middleware):
                raise MiddlewareConfigurationError(
                    f"builder '{builder_type}' returned {type(middleware).__name__}, not a Middleware"
                )
        except Exception as e:
            record_build(builder_type, success=False)
            logger.warning(
                "middleware_build_failed",
                type=builder_type,
                name=name,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise

        record_build(builder_type, success=True)
        logger.info(
            "middleware_built",
            type=builder_type,
            name=name,
            priority=middleware.priority,
        )
        return middleware

    def build_all(self, specs: Iterable[MiddlewareSpec]) -> list[Middleware]:
        """Build every middleware described by specs, in order."""
        return [self.build(spec.type, spec.name, dict(spec.config)) for spec in specs]
