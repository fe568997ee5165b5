"""Application error taxonomy.

Every failure raised by services and routes derives from :class:`AppError`.
The exception handlers in :mod:`hotelops.app.main` render them with the
standard error envelope and the class' ``status_code``.
"""

from __future__ import annotations

from typing import Any, Dict


class AppError(Exception):
    """Base class carrying an HTTP status and a machine-readable code."""

    status_code = 500
    code = "INTERNAL"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        details: Dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.details = details


class NotFound(AppError):
    status_code = 404
    code = "NOT_FOUND"


class BadRequest(AppError):
    status_code = 400
    code = "BAD_REQUEST"


class Unauthorized(AppError):
    status_code = 401
    code = "UNAUTHORIZED"


class Forbidden(Unauthorized):
    """Authenticated caller without the required role."""

    status_code = 403
    code = "FORBIDDEN"


class RateLimited(AppError):
    status_code = 429
    code = "RATE_LIMIT"

    def __init__(self, message: str, *, retry_after: int) -> None:
        super().__init__(message, details={"retry_after": retry_after})
        self.retry_after = retry_after


class StoreFailure(AppError):
    """The store rejected an otherwise valid request."""

    status_code = 409
    code = "STORE_REJECTED"


__all__ = [
    "AppError",
    "NotFound",
    "BadRequest",
    "Unauthorized",
    "Forbidden",
    "RateLimited",
    "StoreFailure",
]
