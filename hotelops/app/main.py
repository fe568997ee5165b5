"""FastAPI application for HotelOps."""

from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from redis.asyncio import from_url
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import get_settings

from .errors import AppError
from .middlewares import LoggingMiddleware, PrometheusMiddleware, RequestIdMiddleware
from .obs import capture_exception, init_sentry
from .obs.logging import configure_logging
from .routes_catalog import router as catalog_router
from .routes_metrics import router as metrics_router
from .routes_ops import router as ops_router
from .routes_orders import router as orders_router
from .routes_rewards import router as rewards_router
from .routes_tickets import router as tickets_router
from .utils.responses import err, error_response, ok

settings = get_settings()
app = FastAPI(
    title="HotelOps API",
    version="1.0.0",
    servers=[{"url": "/"}],
    openapi_url="/openapi.json",
)
app.state.redis = from_url(settings.redis_url, decode_responses=True)
app.add_middleware(PrometheusMiddleware)
app.add_middleware(RequestIdMiddleware)
app.add_middleware(LoggingMiddleware)


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
configure_logging(getattr(logging, LOG_LEVEL, logging.INFO))
logger = logging.getLogger("hotelops")
init_sentry(env=os.getenv("APP_ENV"))


def _log_extra(request: Request, status: int) -> dict:
    return {
        "status": status,
        "route": request.url.path,
        "hotel": request.headers.get("X-Hotel-ID"),
    }


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    logger.warning(exc.message, extra=_log_extra(request, exc.status_code))
    return error_response(exc)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.info("invalid request", extra=_log_extra(request, 400))
    fields = [".".join(str(p) for p in e["loc"]) for e in exc.errors()]
    return JSONResponse(
        err("BAD_REQUEST", "Invalid request", {"fields": fields}), status_code=400
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    logger.warning(exc.detail, extra=_log_extra(request, exc.status_code))
    return JSONResponse(err(exc.status_code, exc.detail), status_code=exc.status_code)


@app.exception_handler(Exception)
async def general_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled_error", extra=_log_extra(request, 500))
    capture_exception(exc)
    return JSONResponse(err(500, "Internal Server Error"), status_code=500)


@app.get("/health")
async def health() -> dict:
    return ok({"status": "ok"})


app.include_router(tickets_router)
app.include_router(orders_router)
app.include_router(ops_router)
app.include_router(catalog_router)
app.include_router(rewards_router)
app.include_router(metrics_router)
