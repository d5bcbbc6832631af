"""Exception handlers for the admin API."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog

from chainkit.domain.entities import get_request_id
from chainkit.domain.exceptions import (
    BuilderAlreadyExistsException,
    BuilderNotFoundException,
    DomainException,
    InvalidBuilderConfigException,
    MiddlewareConfigurationError,
    MiddlewareNotFoundException,
)
from chainkit.presentation.schemas import ErrorResponseSchema

logger = structlog.get_logger(__name__)


def _error_response(request: Request, status_code: int, exc: DomainException) -> JSONResponse:
    body = ErrorResponseSchema.from_exception(exc, get_request_id(request))
    return JSONResponse(status_code=status_code, content=body.model_dump())


def error_handler_middleware(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI app.

    Maps domain exceptions to appropriate HTTP responses.
    """

    @app.exception_handler(BuilderNotFoundException)
    async def builder_not_found_handler(
        request: Request,
        exc: BuilderNotFoundException,
    ) -> JSONResponse:
        """Handle unknown builder type errors."""
        return _error_response(request, 404, exc)

    @app.exception_handler(MiddlewareNotFoundException)
    async def middleware_not_found_handler(
        request: Request,
        exc: MiddlewareNotFoundException,
    ) -> JSONResponse:
        """Handle middleware not found errors."""
        return _error_response(request, 404, exc)

    @app.exception_handler(BuilderAlreadyExistsException)
    async def builder_exists_handler(
        request: Request,
        exc: BuilderAlreadyExistsException,
    ) -> JSONResponse:
        """Handle duplicate builder registration."""
        return _error_response(request, 409, exc)

    @app.exception_handler(InvalidBuilderConfigException)
    async def invalid_config_handler(
        request: Request,
        exc: InvalidBuilderConfigException,
    ) -> JSONResponse:
        """Handle builder config validation errors."""
        return _error_response(request, 400, exc)

    @app.exception_handler(MiddlewareConfigurationError)
    async def configuration_error_handler(
        request: Request,
        exc: MiddlewareConfigurationError,
    ) -> JSONResponse:
        """Handle a builder that produced an invalid middleware."""
        logger.error(
            "middleware_configuration_error",
            request_id=get_request_id(request),
            message=exc.message,
        )
        return _error_response(request, 500, exc)

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle generic domain exceptions."""
        logger.warning(
            "domain_exception",
            request_id=get_request_id(request),
            code=exc.code,
            message=exc.message,
        )
        return _error_response(request, 400, exc)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unhandled_exception",
            request_id=get_request_id(request),
            error=str(exc),
            error_type=type(exc).__name__,
        )
        body = ErrorResponseSchema(
            error="INTERNAL_ERROR",
            message="An unexpected error occurred.",
            request_id=get_request_id(request),
        )
        return JSONResponse(status_code=500, content=body.model_dump())
