"""Handler and decorator call signatures shared across the chain."""

from typing import TYPE_CHECKING, Any, Awaitable, Callable, Union

from starlette.requests import Request
from starlette.responses import Response

if TYPE_CHECKING:
    from chainkit.domain.entities.context import RequestContext
    from chainkit.domain.entities.middleware import Middleware


# The innermost unit of request work, and everything wrapped around it.
Handler = Callable[[Request], Awaitable[Response]]

# A middleware body: takes the next handler, returns the wrapped one.
Decorator = Callable[[Handler], Handler]

# A fallible request-scoped check. Failure is signalled by raising.
ContextHandler = Callable[["RequestContext"], Union[None, Awaitable[None]]]

# Builds a middleware unit from an instance name and a free-form config.
BuilderFunc = Callable[[str, dict[str, Any]], "Middleware"]
