# auth.py

"""Bearer token verification and role checks for FastAPI routes.

Tokens are issued by the identity provider in front of this service; this
module only verifies them. Claims used: ``sub`` (user id), ``role`` and
``hotels``, the ids of the hotels the caller works for. Admins are not
bound to a hotel.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from config import get_settings

from .errors import Forbidden, Unauthorized

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60

bearer_scheme = HTTPBearer(auto_error=False)


class User(BaseModel):
    """Authenticated caller with an associated role."""

    id: str
    role: str
    hotels: list[str] = []

    def can_access(self, hotel_id: str) -> bool:
        return self.role == "admin" or hotel_id in self.hotels


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed JWT containing the provided claims."""

    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, get_settings().secret_key, algorithm=ALGORITHM)


def get_current_user(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> User:
    """Resolve the user from a bearer token or raise :class:`Unauthorized`."""

    if creds is None or not creds.credentials:
        raise Unauthorized("Missing bearer token")
    try:
        payload = jwt.decode(
            creds.credentials, get_settings().secret_key, algorithms=[ALGORITHM]
        )
    except jwt.PyJWTError as exc:
        logger.info("rejected token: %s", exc)
        raise Unauthorized("Could not validate credentials") from exc
    user_id = payload.get("sub")
    role = payload.get("role")
    if not user_id or not role:
        raise Unauthorized("Could not validate credentials")
    hotels = payload.get("hotels") or []
    if not isinstance(hotels, list):
        raise Unauthorized("Could not validate credentials")
    return User(id=str(user_id), role=str(role), hotels=[str(h) for h in hotels])


def role_required(*roles: str):
    """Dependency factory enforcing that the current user has one of ``roles``."""

    def dependency(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            raise Forbidden("Insufficient privileges")
        return user

    return dependency


def require_hotel(user: User, hotel_id: str) -> None:
    """Raise :class:`Forbidden` unless ``user`` may act for ``hotel_id``."""

    if not user.can_access(hotel_id):
        logger.info("user %s denied for hotel %s", user.id, hotel_id)
        raise Forbidden("Not permitted for this hotel")


__all__ = [
    "User",
    "create_access_token",
    "get_current_user",
    "require_hotel",
    "role_required",
]
