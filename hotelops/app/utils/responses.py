"""Response envelopes shared by every route and exception handler.

Success: ``{"ok": true, "data": ...}``.
Failure: ``{"ok": false, "request_id": ..., "error": {"code", "message", ...}}``.
"""

from typing import Any, Dict

from fastapi.responses import JSONResponse
from starlette.status import HTTP_429_TOO_MANY_REQUESTS

from ..errors import AppError, RateLimited


def ok(data: Any) -> Dict[str, Any]:
    """Return a success envelope."""
    return {"ok": True, "data": data}


def err(
    code: int | str,
    message: str,
    details: Dict[str, Any] | None = None,
    hint: str | None = None,
) -> Dict[str, Any]:
    """Return an error envelope tagged with the current request id."""
    from ..middlewares.request_id import request_id_ctx

    error: Dict[str, Any] = {"code": code, "message": message}
    if hint:
        error["hint"] = hint
    if details:
        error["details"] = details

    return {"ok": False, "request_id": request_id_ctx.get(None), "error": error}


def rate_limited(message: str, retry_after: int) -> JSONResponse:
    """429 envelope with a ``Retry-After`` header."""
    retry_after = max(retry_after, 0)
    body = err("RATE_LIMIT", message, hint=f"retry in {retry_after}s")
    return JSONResponse(
        body,
        status_code=HTTP_429_TOO_MANY_REQUESTS,
        headers={"Retry-After": str(retry_after)},
    )


def error_response(exc: AppError) -> JSONResponse:
    if isinstance(exc, RateLimited):
        return rate_limited(exc.message, exc.retry_after)
    return JSONResponse(
        err(exc.code, exc.message, exc.details), status_code=exc.status_code
    )
