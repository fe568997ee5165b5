# routes_metrics.py

"""Prometheus metrics and /metrics endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest

# Counters
http_requests_total = Counter(
    "http_requests_total", "Total HTTP requests", ["path", "method", "status"]
)

http_errors_total = Counter("http_errors_total", "Total HTTP errors", ["status"])

tickets_closed_total = Counter(
    "tickets_closed_total", "Tickets closed, by SLA outcome", ["on_time"]
)
tickets_closed_total.labels(on_time="true").inc(0)
tickets_closed_total.labels(on_time="false").inc(0)

order_status_changes_total = Counter(
    "order_status_changes_total", "Order status transitions", ["status"]
)

ops_alerts_total = Counter(
    "ops_alerts_total", "Alerts raised by the ops sweep", ["signal"]
)
ops_alerts_total.labels(signal="ai_budget").inc(0)
ops_alerts_total.labels(signal="late_closures").inc(0)

ops_notify_failures_total = Counter(
    "ops_notify_failures_total", "Alert notifications that could not be delivered"
)
ops_notify_failures_total.inc(0)

vouchers_issued_total = Counter("vouchers_issued_total", "Reward vouchers issued")
vouchers_issued_total.inc(0)

router = APIRouter()


@router.get("/metrics")
async def metrics_endpoint() -> Response:
    """Expose Prometheus metrics."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
