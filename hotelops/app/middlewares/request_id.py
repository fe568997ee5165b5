"""Per-request context: request id and the hotel the caller acts on."""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

# Read by the log filter and the error envelope
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
hotel_ctx: ContextVar[str | None] = ContextVar("hotel", default=None)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Ensure every request carries a request id and echo it back."""

    async def dispatch(self, request: Request, call_next):
        req_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        rid_token = request_id_ctx.set(req_id)
        hotel_token = hotel_ctx.set(request.headers.get("X-Hotel-ID"))
        request.state.request_id = req_id
        try:
            response = await call_next(request)
        finally:
            hotel_ctx.reset(hotel_token)
            request_id_ctx.reset(rid_token)
        response.headers["X-Request-ID"] = req_id
        return response
