"""Middleware manager - owns a mutable chain and serves through it."""

import threading
from dataclasses import dataclass
from typing import Iterable, Optional

import structlog
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import Receive, Scope, Send

from chainkit.core.metrics import record_chain_rebuild
from chainkit.domain.entities import Middleware, compose, sort_middlewares
from chainkit.domain.interfaces import Handler

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class _Snapshot:
    """A published chain: the sorted units and the handler composed from them."""

    middlewares: tuple[Middleware, ...]
    terminal: Optional[Handler]
    handler: Handler


class MiddlewareManager:
    """
    Concurrency-safe holder of a terminal handler and its middlewares.

    Every mutation copies the middleware collection, sorts it, composes
    a new handler and publishes the result as one immutable snapshot.
    Requests read the published snapshot once and never take the lock,
    so an in-flight request keeps the chain it started with while new
    requests observe the whole update or none of it.

    The manager is itself an ASGI application.

    Example:
        manager = MiddlewareManager(terminal=handle_order)
        manager.add(
            logger_middleware(priority=10),
            context_middleware(priority=20),
        )
        response = await manager.serve(request)
    """

    def __init__(
        self,
        terminal: Optional[Handler] = None,
        middlewares: Iterable[Middleware] = (),
        name: str = "default",
    ):
        self.name = name
        self._lock = threading.Lock()
        self._units: dict[str, Middleware] = {}
        for middleware in middlewares:
            self._units.pop(middleware.name, None)
            self._units[middleware.name] = middleware
        self._snapshot = self._build(self._units, terminal)

    # -------------------------------------------------------------------------
    # Publication
    # -------------------------------------------------------------------------

    def _build(
        self,
        units: dict[str, Middleware],
        terminal: Optional[Handler],
    ) -> _Snapshot:
        ordered = sort_middlewares(list(units.values()))
        snapshot = _Snapshot(
            middlewares=tuple(ordered),
            terminal=terminal,
            handler=compose(ordered, terminal),
        )

        record_chain_rebuild(self.name, len(ordered))
        logger.info(
            "middleware_chain_rebuilt",
            manager=self.name,
            middlewares=[mw.name for mw in ordered],
            has_terminal=terminal is not None,
        )
        return snapshot

    def _publish(
        self,
        units: dict[str, Middleware],
        terminal: Optional[Handler],
    ) -> None:
        # Caller holds the lock. Assigning the snapshot is the only step
        # visible to readers.
        snapshot = self._build(units, terminal)
        self._units = units
        self._snapshot = snapshot

    # -------------------------------------------------------------------------
    # Terminal handler
    # -------------------------------------------------------------------------

    def set_terminal(self, handler: Optional[Handler]) -> None:
        """Replace the terminal handler and recompose the chain."""
        with self._lock:
            self._publish(self._units, handler)

    def swap_terminal(self, handler: Optional[Handler]) -> Optional[Handler]:
        """Replace the terminal handler and return the previous one."""
        with self._lock:
            old = self._snapshot.terminal
            self._publish(self._units, handler)
        return old

    def get_terminal(self) -> Optional[Handler]:
        return self._snapshot.terminal

    # -------------------------------------------------------------------------
    # Middlewares
    # -------------------------------------------------------------------------

    def add(self, *middlewares: Middleware) -> None:
        """
        Add middlewares, replacing any existing ones with the same name.

        A replaced middleware moves behind the others of equal priority,
        as if it had been added for the first time.
        """
        if not middlewares:
            return

        with self._lock:
            units = dict(self._units)
            for middleware in middlewares:
                units.pop(middleware.name, None)
                units[middleware.name] = middleware
            self._publish(units, self._snapshot.terminal)

    def remove(self, *names: str) -> None:
        """Remove middlewares by name. Unknown names are ignored."""
        with self._lock:
            if not any(name in self._units for name in names):
                return

            units = {
                name: mw for name, mw in self._units.items() if name not in names
            }
            self._publish(units, self._snapshot.terminal)

    def reset(self, *middlewares: Middleware) -> None:
        """Replace the whole middleware collection in a single publish."""
        units: dict[str, Middleware] = {}
        for middleware in middlewares:
            units.pop(middleware.name, None)
            units[middleware.name] = middleware

        with self._lock:
            self._publish(units, self._snapshot.terminal)

    def get(self, name: str) -> Optional[Middleware]:
        """Return the middleware in the published chain named name."""
        for middleware in self._snapshot.middlewares:
            if middleware.name == name:
                return middleware
        return None

    def list(self) -> list[Middleware]:
        """Return a copy of the published chain in execution order."""
        return list(self._snapshot.middlewares)

    def __len__(self) -> int:
        return len(self._snapshot.middlewares)

    def __contains__(self, name: object) -> bool:
        return any(mw.name == name for mw in self._snapshot.middlewares)

    # -------------------------------------------------------------------------
    # Serving
    # -------------------------------------------------------------------------

    def wrap(self, handler: Optional[Handler]) -> Handler:
        """Compose the published middlewares around another handler."""
        return compose(self._snapshot.middlewares, handler)

    async def serve(self, request: Request) -> Response:
        """Serve a request through the currently published chain."""
        handler = self._snapshot.handler
        return await handler(request)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            raise RuntimeError(
                f"middleware manager cannot serve '{scope['type']}' scopes"
            )

        request = Request(scope, receive, send)
        response = await self.serve(request)
        await response(scope, receive, send)
