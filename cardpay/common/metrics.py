"""Prometheus metric definitions for the payment pipeline."""

from prometheus_client import Counter, Histogram, generate_latest
from starlette.responses import Response


payment_requests_total = Counter("payment_requests_total", "Total payment requests", ["service"])
payment_success_total = Counter("payment_success_total", "Total successful payments", ["service"])
payment_failure_total = Counter(
    "payment_failure_total",
    "Total payments that were not confirmed",
    ["service", "outcome"],
)
payment_latency_seconds = Histogram("payment_latency_seconds", "Payment latency seconds", ["service"])
validation_rejections_total = Counter(
    "validation_rejections_total",
    "Payment requests rejected by validation",
    ["service", "reason"],
)
authorization_decisions_total = Counter(
    "authorization_decisions_total",
    "Authorizer decisions",
    ["service", "decision"],
)
ledger_write_failures_total = Counter(
    "ledger_write_failures_total",
    "Transaction inserts that failed",
    ["service"],
)
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


def metrics_response() -> Response:
    """Expose all registered Prometheus metrics in text format."""

    return Response(content=generate_latest(), media_type="text/plain")
