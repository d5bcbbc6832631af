"""Middleware entity, ordering policy, and chain composition."""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from starlette.requests import Request
from starlette.responses import Response

from chainkit.domain.exceptions import MiddlewareConfigurationError
from chainkit.domain.interfaces import Decorator, Handler


@dataclass(frozen=True)
class Middleware:
    """
    A named, prioritized decorator around a request handler.

    The smaller the priority, the earlier (outer) the middleware runs.
    Names are unique only by convention; the manager keys on them.
    """

    name: str
    priority: int
    decorate: Decorator

    def __post_init__(self) -> None:
        if self.decorate is None or not callable(self.decorate):
            raise MiddlewareConfigurationError(
                f"middleware '{self.name}' must have a callable decorator"
            )

    def handler(self, next_handler: Handler) -> Handler:
        """Wrap the next handler and return the new one."""
        return self.decorate(next_handler)


async def _noop_handler(request: Request) -> Response:
    return Response(status_code=204)


def sort_middlewares(middlewares: List[Middleware]) -> List[Middleware]:
    """Stable in-place sort by ascending priority. Returns the same list."""
    middlewares.sort(key=lambda m: m.priority)
    return middlewares


def sorted_middlewares(middlewares: Iterable[Middleware]) -> List[Middleware]:
    """Return a new list stably sorted by ascending priority."""
    return sorted(middlewares, key=lambda m: m.priority)


def compose(
    middlewares: Iterable[Middleware],
    terminal: Optional[Handler],
) -> Handler:
    """
    Wrap the terminal handler with the middlewares.

    The first middleware becomes the outermost layer:
        middlewares[0](middlewares[1](...(terminal)))

    The middlewares must already be in execution order.
    """
    handler: Handler = terminal if terminal is not None else _noop_handler
    for middleware in reversed(list(middlewares)):
        handler = middleware.handler(handler)
    return handler
