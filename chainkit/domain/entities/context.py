"""Per-request mutable context shared by context handlers."""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from chainkit.domain.exceptions import ContextErrors, DomainException

# Key of the context inside the ASGI scope state.
_CONTEXT_STATE_KEY = "chainkit_context"

REQUEST_ID_HEADER = "X-Request-ID"


def render_error(context: "RequestContext") -> Response:
    """
    Default error renderer.

    Maps the recorded error to a JSON body and picks the status from the
    error's ``status_code`` attribute, falling back to 500.
    """
    err = context.err
    status_code = getattr(err, "status_code", None) or 500

    if isinstance(err, DomainException):
        code, message = err.code, err.message
    else:
        code, message = "INTERNAL_ERROR", str(err) if err else "unknown error"

    return JSONResponse(
        status_code=status_code,
        content={
            "error": code,
            "message": message,
            "request_id": context.request_id,
        },
    )


@dataclass
class RequestContext:
    """
    Request-scoped record passed to context handlers.

    Handlers communicate through ``datas``; the outcome of the
    request-scoped checks is recorded in ``err``.
    """

    request: Request
    datas: dict[str, Any] = field(default_factory=dict)
    err: Optional[BaseException] = None
    renderer: Callable[["RequestContext"], Response] = render_error

    def append_error(self, err: BaseException) -> None:
        """Record an error, merging with any already recorded."""
        if self.err is None:
            self.err = err
        elif isinstance(self.err, ContextErrors):
            self.err = ContextErrors([*self.err.errors, err])
        else:
            self.err = ContextErrors([self.err, err])

    def get(self, key: str, default: Any = None) -> Any:
        return self.datas.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.datas[key] = value

    @property
    def request_id(self) -> Optional[str]:
        return get_request_id(self.request)

    def error_response(self) -> Response:
        """Render the recorded error into a response."""
        return self.renderer(self)


def get_request_id(request: Request) -> Optional[str]:
    """Return the request id assigned upstream, or the one the client sent."""
    return getattr(request.state, "request_id", None) or request.headers.get(
        REQUEST_ID_HEADER
    )


def get_context(request: Request) -> Optional[RequestContext]:
    """Return the context installed on the request, if any."""
    return getattr(request.state, _CONTEXT_STATE_KEY, None)


def set_context(request: Request, context: RequestContext) -> None:
    """Install the context on the request's scope state."""
    setattr(request.state, _CONTEXT_STATE_KEY, context)
