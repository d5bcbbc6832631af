"""Prometheus metrics for the chainkit service.

Chain Metrics:
- chainkit_chain_rebuilds_total: Chain recompositions by manager
- chainkit_chain_length: Number of middlewares in the published chain
- chainkit_builds_total: Builder registry builds by type and status

Request Metrics:
- chainkit_http_requests_total: HTTP requests by method and status
- chainkit_http_request_latency_seconds: HTTP request latency
- chainkit_context_handler_outcomes_total: Combinator outcomes by unit
"""

from prometheus_client import Counter, Histogram, Gauge, REGISTRY, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST


# =============================================================================
# Chain Metrics
# =============================================================================

chain_rebuilds_total = Counter(
    "chainkit_chain_rebuilds_total",
    "Total number of middleware chain recompositions",
    ["manager"],
)

chain_length = Gauge(
    "chainkit_chain_length",
    "Number of middlewares in the currently published chain",
    ["manager"],
)

builds_total = Counter(
    "chainkit_builds_total",
    "Total number of middlewares built through the builder registry",
    ["type", "status"],  # success, failure
)


# =============================================================================
# Request Metrics
# =============================================================================

http_requests_total = Counter(
    "chainkit_http_requests_total",
    "Total HTTP requests served through the chain by method and status",
    ["method", "status"],
)

http_request_latency = Histogram(
    "chainkit_http_request_latency_seconds",
    "HTTP request latency through the chain",
    ["method"],
    buckets=[0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

context_handler_outcomes = Counter(
    "chainkit_context_handler_outcomes_total",
    "Context handler combinator outcomes",
    ["unit", "outcome"],  # passed, rejected, missing_context
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_chain_rebuild(manager: str, length: int) -> None:
    """Record a chain recomposition."""
    chain_rebuilds_total.labels(manager=manager).inc()
    chain_length.labels(manager=manager).set(length)


def record_build(builder_type: str, success: bool) -> None:
    """Record a builder registry build."""
    status = "success" if success else "failure"
    builds_total.labels(type=builder_type, status=status).inc()


def record_context_outcome(unit: str, outcome: str) -> None:
    """Record the outcome of a context handler combinator."""
    context_handler_outcomes.labels(unit=unit, outcome=outcome).inc()


def record_http_request(method: str, status: int, duration: float) -> None:
    """Record an HTTP request."""
    http_requests_total.labels(method=method, status=str(status)).inc()
    http_request_latency.labels(method=method).observe(duration)


def get_metrics() -> bytes:
    """Get current metrics in Prometheus format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST
