"""JWT tokens for the operator API.

Operators authenticate with a bearer token carrying their ``uid``.
Tokens are minted out of band (``matchrecorder --print-token UID``).

Usage::

    from matchrecorder.network.jwt_auth import create_token, get_current_uid

    @app.get("/api/status")
    async def status(uid: int = Depends(get_current_uid)):
        ...
"""

from __future__ import annotations

import logging
import os
import time
from typing import Optional

import jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

log = logging.getLogger(__name__)

# Secret key: read from env, with a local default
JWT_SECRET: str = os.environ.get("MATCHRECORDER_JWT_SECRET", "matchrecorder-secret-change-me")
JWT_ALGORITHM: str = "HS256"
JWT_EXPIRY_SECONDS: int = 7 * 86400

_bearer_scheme = HTTPBearer(auto_error=False)


def create_token(uid: int, expiry_seconds: int = JWT_EXPIRY_SECONDS) -> str:
    """Create a signed JWT token for an operator uid."""
    now = int(time.time())
    payload = {
        "uid": uid,
        "iat": now,
        "exp": now + expiry_seconds,
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def verify_token(token: str) -> int:
    """Verify a JWT token and return the uid.

    Raises:
        ValueError: If the token is invalid or expired.
    """
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
        uid = payload.get("uid")
        if uid is None:
            raise ValueError("Token missing uid claim")
        return int(uid)
    except jwt.ExpiredSignatureError:
        raise ValueError("Token expired")
    except jwt.InvalidTokenError as e:
        raise ValueError(f"Invalid token: {e}")


async def get_current_uid(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
) -> int:
    """FastAPI dependency that extracts the uid from the Authorization header.

    Raises:
        HTTPException(401): If the token is missing, invalid, or expired.
    """
    if credentials is None:
        raise HTTPException(status_code=401, detail="Authorization header required")
    try:
        return verify_token(credentials.credentials)
    except ValueError as e:
        raise HTTPException(status_code=401, detail=str(e))
