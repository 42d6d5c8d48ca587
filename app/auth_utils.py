"""
Helpers for the session cookie and current-user lookup.
"""
from __future__ import annotations

import os

from fastapi import Request
from fastapi.responses import Response

from core.accounts import get_current_user as resolve_current_user
from core.database import SESSION_TOKEN_DAYS

SESSION_COOKIE_NAME = "auth-token"
SESSION_COOKIE_MAX_AGE = SESSION_TOKEN_DAYS * 24 * 60 * 60


def secure_cookies() -> bool:
    return (
        os.getenv("COOKIE_SECURE", "").lower() in ("1", "true", "yes")
        or os.getenv("PUBLIC_BASE_URL", "").lower().startswith("https://")
    )


def get_session_token(request: Request) -> str | None:
    return request.cookies.get(SESSION_COOKIE_NAME) or None


def get_current_user(request: Request):
    """
    Read the session cookie and return (user_dict, session_token) or (None, token).
    """
    token = get_session_token(request)
    if not token:
        return None, None

    result = resolve_current_user(token)
    if not result.ok:
        return None, token
    return result.value, token


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        max_age=SESSION_COOKIE_MAX_AGE,
        samesite="lax",
        secure=secure_cookies(),
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value="",
        httponly=True,
        max_age=0,
        expires=0,
        samesite="lax",
        secure=secure_cookies(),
        path="/",
    )
