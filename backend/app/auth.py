"""Caller identity resolution.

The caller is identified by a bearer JWT whose ``sub`` claim is the integer
user ID. Routers resolve it once through ``get_current_user_id`` and pass it
explicitly to the services.
"""
import time
from typing import Any, Optional

import jwt  # PyJWT
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.config import settings
from app.errors import Unauthorized

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(user_id: int, ttl_seconds: Optional[int] = None) -> str:
    now = int(time.time())
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + (ttl_seconds or settings.ACCESS_TOKEN_TTL_SECONDS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> int:
    """Return the user ID carried by ``token``; raise Unauthorized if it is not valid."""
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
        user_id = int(payload["sub"])
    except (jwt.PyJWTError, ValueError):
        raise Unauthorized("unauthorized")
    if user_id <= 0:
        raise Unauthorized("unauthorized")
    return user_id


def get_optional_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[int]:
    """Caller ID when a bearer token is sent, otherwise None."""
    if credentials is None:
        return None
    return decode_access_token(credentials.credentials)


def get_current_user_id(user_id: Optional[int] = Depends(get_optional_user_id)) -> int:
    if user_id is None:
        raise Unauthorized("unauthorized")
    return user_id
