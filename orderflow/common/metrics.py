"""Prometheus metric definitions shared across services."""

from prometheus_client import Counter, Histogram, generate_latest
from starlette.responses import Response


http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["service", "route", "method", "status_code"],
)
http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration seconds",
    ["service", "route", "method"],
)
orders_created_total = Counter("orders_created_total", "Total orders created", ["service"])
order_status_transitions_total = Counter(
    "order_status_transitions_total",
    "Order status transitions applied",
    ["service", "from_status", "to_status"],
)
payment_requests_total = Counter(
    "payment_requests_total",
    "Payment initiation attempts made during order creation",
    ["service", "outcome"],
)
webhooks_processed_total = Counter(
    "webhooks_processed_total",
    "Payment webhooks handled",
    ["service", "outcome"],
)
external_call_duration_seconds = Histogram(
    "external_call_duration_seconds",
    "Latency of outbound HTTP calls to dependent services",
    ["service", "dependency"],
)


def metrics_response() -> Response:
    """Expose all registered Prometheus metrics in text format."""

    return Response(content=generate_latest(), media_type="text/plain")
