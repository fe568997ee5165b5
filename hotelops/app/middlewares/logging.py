import json
import logging
import os
import random
import time
from datetime import datetime, timezone

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from .request_id import hotel_ctx, request_id_ctx

# Request fields that never reach the logs
SENSITIVE_KEYS = {"authorization", "token", "email", "phone", "otp", "code"}
LOG_SAMPLE_2XX = float(os.getenv("LOG_SAMPLE_2XX", "0.1"))


logger = logging.getLogger("hotelops.access")


def _redact(obj):
    if isinstance(obj, dict):
        return {
            k: ("***" if k.lower() in SENSITIVE_KEYS else _redact(v))
            for k, v in obj.items()
        }
    if isinstance(obj, list):
        return [_redact(v) for v in obj]
    return obj


class LoggingMiddleware(BaseHTTPMiddleware):
    """Emit structured inbound/outbound request logs.

    Successful responses are sampled with ``LOG_SAMPLE_2XX``; every 4xx and
    5xx is logged. JSON bodies are logged with sensitive keys masked.
    """

    async def dispatch(self, request: Request, call_next):
        body_bytes = await request.body()

        async def receive() -> dict:
            return {"type": "http.request", "body": body_bytes, "more_body": False}

        request._receive = receive

        body = None
        if body_bytes:
            try:
                body = json.loads(body_bytes)
            except ValueError:
                body = None

        start = time.perf_counter()
        response = await call_next(request)
        dur_ms = int((time.perf_counter() - start) * 1000)
        status = response.status_code

        if 200 <= status < 300 and random.random() >= LOG_SAMPLE_2XX:
            return response

        entry = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "req_id": request_id_ctx.get(None)
            or getattr(request.state, "request_id", None),
            "hotel": hotel_ctx.get(None) or request.headers.get("X-Hotel-ID"),
            "method": request.method,
            "route": request.url.path,
            "status": status,
            "latency_ms": dur_ms,
            "ip": request.client.host if request.client else None,
        }
        query = dict(request.query_params)
        if query:
            entry["query"] = _redact(query)
        if body is not None:
            entry["body"] = _redact(body)

        log_fn = logger.error if status >= 500 else logger.info
        log_fn(json.dumps(entry))
        return response
