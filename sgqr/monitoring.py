"""Monitoring helpers and Prometheus metrics exporters."""
from __future__ import annotations

from typing import Final

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

_HTTP_REQUEST_TOTAL: Final = Counter(
    "sgqr_http_requests_total",
    "Total HTTP requests",
    labelnames=("method", "route", "status"),
)
_HTTP_REQUEST_LATENCY: Final = Histogram(
    "sgqr_http_request_duration_seconds",
    "Latency of HTTP requests",
    labelnames=("method", "route"),
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1),
)
_SERVICE_ERRORS_TOTAL: Final = Counter(
    "sgqr_service_errors_total",
    "Service-level errors by code",
    labelnames=("code", "route"),
)
_DECODE_TOTAL: Final = Counter(
    "sgqr_decode_total",
    "Scanned payloads decoded, by outcome",
    labelnames=("outcome",),
)
_COMPOSED_METHODS: Final = Histogram(
    "sgqr_composed_payment_methods",
    "Payment methods per composed QR payload",
    buckets=(1, 2, 3, 4, 6, 8, 12, 26),
)


def observe_request(method: str, route: str, status_code: int, duration_ms: float) -> None:
    _HTTP_REQUEST_TOTAL.labels(method=method, route=route, status=str(status_code)).inc()
    _HTTP_REQUEST_LATENCY.labels(method=method, route=route).observe(duration_ms / 1000)


def record_service_error(code: str, route: str) -> None:
    _SERVICE_ERRORS_TOTAL.labels(code=code, route=route).inc()


def record_decode(outcome: str) -> None:
    _DECODE_TOTAL.labels(outcome=outcome).inc()


def record_composed(method_count: int) -> None:
    _COMPOSED_METHODS.observe(method_count)


def metrics_payload() -> tuple[bytes, str]:
    """Return Prometheus exposition payload and content type."""

    return generate_latest(), CONTENT_TYPE_LATEST
