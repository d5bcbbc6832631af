"""
Unit tests for the built-in middlewares.

These tests verify:
1. Context allocation and error rendering
2. Exception recovery with and without a context
3. Request id generation and propagation
4. CORS origin matching, simple and preflight requests
5. Fixed-path 204 responses
"""

import json

import pytest
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from chainkit.domain.entities import compose, get_context
from chainkit.domain.exceptions import ContextHandlerError, PanicError
from chainkit.presentation.middleware import (
    CORSConfig,
    RequestIdGenerator,
    context_middleware,
    cors_middleware,
    get_current_request_id,
    logger_middleware,
    recover_middleware,
    request_id_middleware,
    respond204_middleware,
)
from chainkit.presentation.middleware.cors import match_subdomain


async def ok_handler(request: Request) -> Response:
    return PlainTextResponse("ok")


async def raising_handler(request: Request) -> Response:
    raise RuntimeError("boom")


# =============================================================================
# Context
# =============================================================================

class TestContextMiddleware:

    @pytest.mark.asyncio
    async def test_installs_context(self, make_request):
        seen = []

        async def handler(request: Request) -> Response:
            seen.append(get_context(request))
            return PlainTextResponse("ok")

        await context_middleware().handler(handler)(make_request())

        assert seen[0] is not None

    @pytest.mark.asyncio
    async def test_keeps_existing_context(self, make_context_request):
        request = make_context_request()
        existing = get_context(request)

        await context_middleware().handler(ok_handler)(request)

        assert get_context(request) is existing

    @pytest.mark.asyncio
    async def test_renders_error_left_by_handler(self, make_request):
        async def handler(request: Request) -> Response:
            get_context(request).append_error(ContextHandlerError("bad input"))
            return PlainTextResponse("ok")

        response = await context_middleware().handler(handler)(make_request())

        assert response.status_code == 400
        assert json.loads(response.body)["message"] == "bad input"


# =============================================================================
# Recover
# =============================================================================

class TestRecoverMiddleware:

    @pytest.mark.asyncio
    async def test_without_context(self, make_request):
        response = await recover_middleware().handler(raising_handler)(make_request())

        assert response.status_code == 500
        assert response.headers["X-Panic"] == "1"

    @pytest.mark.asyncio
    async def test_with_context_records_panic(self, make_context_request):
        request = make_context_request()

        response = await recover_middleware().handler(raising_handler)(request)

        err = get_context(request).err
        assert isinstance(err, PanicError)
        assert str(err.cause) == "boom"
        assert err.stacks
        assert response.status_code == 500
        assert response.headers["X-Panic"] == "1"
        assert json.loads(response.body)["error"] == "PANIC"

    @pytest.mark.asyncio
    async def test_passes_successful_responses(self, make_request):
        response = await recover_middleware().handler(ok_handler)(make_request())

        assert response.status_code == 200
        assert "X-Panic" not in response.headers


# =============================================================================
# Logger
# =============================================================================

class TestLoggerMiddleware:

    @pytest.mark.asyncio
    async def test_returns_inner_response(self, make_request):
        response = await logger_middleware().handler(ok_handler)(make_request())

        assert response.body == b"ok"

    @pytest.mark.asyncio
    async def test_reraises_inner_exception(self, make_request):
        with pytest.raises(RuntimeError):
            await logger_middleware().handler(raising_handler)(make_request())

    @pytest.mark.asyncio
    async def test_disabled_requests_are_passed_through(self, make_request):
        mw = logger_middleware(enabled=lambda request: False)

        response = await mw.handler(ok_handler)(make_request())

        assert response.body == b"ok"


# =============================================================================
# Request ID
# =============================================================================

class TestRequestIdMiddleware:

    @pytest.mark.asyncio
    async def test_generates_id(self, make_request):
        seen = []

        async def handler(request: Request) -> Response:
            seen.append((request.state.request_id, get_current_request_id()))
            return PlainTextResponse("ok")

        response = await request_id_middleware().handler(handler)(make_request())

        request_id = response.headers["X-Request-ID"]
        assert len(request_id) == 24
        assert request_id.isalnum()
        assert seen == [(request_id, request_id)]
        assert get_current_request_id() is None

    @pytest.mark.asyncio
    async def test_keeps_client_id(self, make_request):
        request = make_request(headers={"X-Request-ID": "client-id"})

        response = await request_id_middleware().handler(ok_handler)(request)

        assert response.headers["X-Request-ID"] == "client-id"

    @pytest.mark.asyncio
    async def test_injected_generator_and_header(self, make_request):
        mw = request_id_middleware(generator=lambda request: "fixed", header="X-Trace-ID")

        response = await mw.handler(ok_handler)(make_request())

        assert response.headers["X-Trace-ID"] == "fixed"

    def test_generator_length(self, make_request):
        assert len(RequestIdGenerator(length=8)(make_request())) == 8


# =============================================================================
# CORS
# =============================================================================

class TestMatchSubdomain:

    @pytest.mark.parametrize(
        "origin, pattern, expected",
        [
            ("https://api.example.com", "https://*.example.com", True),
            ("https://a.b.example.com", "https://*.example.com", True),
            ("http://api.example.com", "https://*.example.com", False),
            ("https://example.org", "https://*.example.com", False),
            ("https://example.com", "https://*.example.com", False),
            ("example.com", "https://*.example.com", False),
        ],
    )
    def test_match(self, origin, pattern, expected):
        assert match_subdomain(origin, pattern) is expected


class TestCORSMiddleware:

    @pytest.mark.asyncio
    async def test_simple_request_with_wildcard(self, make_request):
        request = make_request(headers={"Origin": "https://app.test"})

        response = await cors_middleware().handler(ok_handler)(request)

        assert response.headers["Access-Control-Allow-Origin"] == "*"
        assert "Origin" in response.headers["Vary"]

    @pytest.mark.asyncio
    async def test_credentials_echo_origin(self, make_request):
        mw = cors_middleware(config=CORSConfig(allow_credentials=True, expose_headers=["X-Total"]))
        request = make_request(headers={"Origin": "https://app.test"})

        response = await mw.handler(ok_handler)(request)

        assert response.headers["Access-Control-Allow-Origin"] == "https://app.test"
        assert response.headers["Access-Control-Allow-Credentials"] == "true"
        assert response.headers["Access-Control-Expose-Headers"] == "X-Total"

    @pytest.mark.asyncio
    async def test_disallowed_origin_gets_no_headers(self, make_request):
        mw = cors_middleware(config=CORSConfig(allow_origins=["https://*.example.com"]))
        request = make_request(headers={"Origin": "https://evil.test"})

        response = await mw.handler(ok_handler)(request)

        assert response.body == b"ok"
        assert "Access-Control-Allow-Origin" not in response.headers

    @pytest.mark.asyncio
    async def test_preflight(self, make_request):
        calls = []

        async def handler(request: Request) -> Response:
            calls.append(request)
            return PlainTextResponse("ok")

        mw = cors_middleware(
            config=CORSConfig(allow_origins=["https://*.example.com"], max_age=600)
        )
        request = make_request(
            method="OPTIONS",
            headers={
                "Origin": "https://api.example.com",
                "Access-Control-Request-Method": "PUT",
                "Access-Control-Request-Headers": "X-Token",
            },
        )

        response = await mw.handler(handler)(request)

        assert calls == []
        assert response.status_code == 204
        assert response.headers["Access-Control-Allow-Origin"] == "https://api.example.com"
        assert response.headers["Access-Control-Allow-Methods"] == "HEAD,GET,POST,PUT,PATCH,DELETE"
        assert response.headers["Access-Control-Allow-Headers"] == "X-Token"
        assert response.headers["Access-Control-Max-Age"] == "600"


# =============================================================================
# Respond 204
# =============================================================================

class TestRespond204Middleware:

    @pytest.mark.asyncio
    async def test_matching_path(self, make_request):
        mw = respond204_middleware("/ping/")

        response = await mw.handler(ok_handler)(make_request(path="/ping"))

        assert response.status_code == 204

    @pytest.mark.asyncio
    async def test_other_path(self, make_request):
        mw = respond204_middleware("/ping")

        response = await mw.handler(ok_handler)(make_request(path="/orders"))

        assert response.body == b"ok"


# =============================================================================
# Stack
# =============================================================================

class TestBuiltinStack:

    @pytest.mark.asyncio
    async def test_recover_inside_context_reports_through_logger(self, make_request):
        handler = compose(
            [
                request_id_middleware(10),
                logger_middleware(20),
                context_middleware(30),
                recover_middleware(40),
            ],
            raising_handler,
        )

        response = await handler(make_request())

        assert response.status_code == 500
        assert response.headers["X-Panic"] == "1"
        body = json.loads(response.body)
        assert body["request_id"] == response.headers["X-Request-ID"]
