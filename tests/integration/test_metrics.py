"""
Integration tests for metrics tracking.

These tests verify:
1. Metrics endpoint returns valid Prometheus format
2. Chain recompositions and builds are counted
3. Requests served through the chain are counted
4. Context handler outcomes are counted
"""

import pytest
from httpx import AsyncClient
from prometheus_client import REGISTRY

from chainkit.application.services import context_handler
from chainkit.domain.exceptions import ContextHandlerError


def sample(name: str, labels: dict) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


# =============================================================================
# Metrics Endpoint Tests
# =============================================================================

class TestMetricsEndpoint:
    """Tests for GET /metrics endpoint."""

    @pytest.mark.asyncio
    async def test_metrics_endpoint_returns_prometheus_format(self, client: AsyncClient):
        response = await client.get("/metrics")

        assert response.status_code == 200
        assert "text/plain" in response.headers.get("content-type", "")
        assert "# HELP" in response.text

    @pytest.mark.asyncio
    async def test_metrics_include_chain_metrics(self, client: AsyncClient):
        await client.get("/orders")

        content = (await client.get("/metrics")).text

        assert "chainkit_chain_rebuilds_total" in content
        assert "chainkit_chain_length" in content
        assert "chainkit_builds_total" in content
        assert "chainkit_http_requests_total" in content


# =============================================================================
# Metric Tracking Tests
# =============================================================================

class TestMetricTracking:

    @pytest.mark.asyncio
    async def test_add_through_api_counts_build_and_rebuild(self, client: AsyncClient, manager):
        rebuilds = sample("chainkit_chain_rebuilds_total", {"manager": manager.name})
        builds = sample("chainkit_builds_total", {"type": "cors", "status": "success"})

        await client.post("/admin/v1/middlewares", json={"type": "cors", "name": "cors"})

        assert sample("chainkit_chain_rebuilds_total", {"manager": manager.name}) == rebuilds + 1
        assert sample("chainkit_builds_total", {"type": "cors", "status": "success"}) == builds + 1
        assert sample("chainkit_chain_length", {"manager": manager.name}) == 6

    @pytest.mark.asyncio
    async def test_failed_build_is_counted(self, client: AsyncClient):
        failures = sample("chainkit_builds_total", {"type": "respond204", "status": "failure"})

        await client.post("/admin/v1/middlewares", json={"type": "respond204", "name": "x"})

        assert sample(
            "chainkit_builds_total", {"type": "respond204", "status": "failure"}
        ) == failures + 1

    @pytest.mark.asyncio
    async def test_chain_requests_are_counted(self, client: AsyncClient):
        before = sample("chainkit_http_requests_total", {"method": "GET", "status": "200"})

        await client.get("/orders")

        assert sample(
            "chainkit_http_requests_total", {"method": "GET", "status": "200"}
        ) == before + 1

    @pytest.mark.asyncio
    async def test_context_handler_outcomes(self, client: AsyncClient, manager):
        def require_token(context):
            if context.request.headers.get("X-Token") != "secret":
                raise ContextHandlerError("invalid token", status_code=401)

        manager.add(context_handler("metrics-auth", 35, require_token))
        passed = sample(
            "chainkit_context_handler_outcomes_total",
            {"unit": "metrics-auth", "outcome": "passed"},
        )
        rejected = sample(
            "chainkit_context_handler_outcomes_total",
            {"unit": "metrics-auth", "outcome": "rejected"},
        )

        await client.get("/orders", headers={"X-Token": "secret"})
        await client.get("/orders")

        assert sample(
            "chainkit_context_handler_outcomes_total",
            {"unit": "metrics-auth", "outcome": "passed"},
        ) == passed + 1
        assert sample(
            "chainkit_context_handler_outcomes_total",
            {"unit": "metrics-auth", "outcome": "rejected"},
        ) == rejected + 1
