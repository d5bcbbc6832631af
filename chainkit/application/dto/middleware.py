"""Data transfer objects for middleware chain operations."""

from dataclasses import dataclass, field
from typing import Any, List


@dataclass(frozen=True)
class MiddlewareSpec:
    """Declarative description of a middleware to build by type."""

    type: str
    name: str
    config: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class MiddlewareInfo:
    """Read-only view of one middleware in a chain."""

    name: str
    priority: int
    position: int

    @classmethod
    def from_chain(cls, middlewares) -> List["MiddlewareInfo"]:
        return [
            cls(name=mw.name, priority=mw.priority, position=index)
            for index, mw in enumerate(middlewares)
        ]
