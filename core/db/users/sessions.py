"""
Stateless session tokens (signed JWTs).

Nothing is stored server-side: a token is valid while its signature checks out
and it has not expired. Resolving the live user is the caller's job.
"""
from __future__ import annotations

import logging
import os
from datetime import datetime, timedelta
from typing import Dict, Optional

import jwt

from core.db.base import utc_now

log = logging.getLogger("core.sessions")

SESSION_TOKEN_DAYS = 7
JWT_ALGORITHM = "HS256"
_DEV_SECRET = "dev-only-insecure-secret-change-me"

_warned_dev_secret = False


def _secret_key() -> str:
    global _warned_dev_secret
    secret = os.getenv("JWT_SECRET")
    if secret:
        return secret
    if not _warned_dev_secret:
        log.warning("JWT_SECRET is not set; using an insecure development key")
        _warned_dev_secret = True
    return _DEV_SECRET


def issue_session_token(user_id: str, email: str, now: Optional[datetime] = None) -> str:
    """Create a signed token for the given user, valid for SESSION_TOKEN_DAYS."""
    now = now or utc_now()
    payload = {
        "userId": user_id,
        "email": email,
        "iat": now,
        "exp": now + timedelta(days=SESSION_TOKEN_DAYS),
    }
    return jwt.encode(payload, _secret_key(), algorithm=JWT_ALGORITHM)


def verify_session_token(token: Optional[str]) -> Optional[Dict]:
    """
    Check signature and expiry.
    Returns {"user_id", "email"} or None; never raises on bad input.
    """
    if not token or not isinstance(token, str):
        return None
    try:
        payload = jwt.decode(
            token,
            _secret_key(),
            algorithms=[JWT_ALGORITHM],
            options={"require": ["exp", "iat"]},
        )
    except jwt.PyJWTError:
        return None

    user_id = payload.get("userId")
    email = payload.get("email")
    if not user_id or not email:
        return None
    return {"user_id": user_id, "email": email}


__all__ = [
    "SESSION_TOKEN_DAYS",
    "JWT_ALGORITHM",
    "issue_session_token",
    "verify_session_token",
]
