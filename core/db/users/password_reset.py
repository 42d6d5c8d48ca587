"""
Password reset token storage.

A reset token lives on the user record itself (``reset_token`` plus
``reset_token_expiry``); both keys are always set and cleared together.
"""
from __future__ import annotations

import secrets
from datetime import datetime, timedelta
from typing import Dict, Optional, Union

from core.db.base import parse_iso, read_database, store_lock, to_iso, utc_now, write_database
from core.db.users.user_store import normalize_email

RESET_TOKEN_MINUTES = 60

Timestamp = Union[str, datetime]


def generate_reset_token() -> str:
    return secrets.token_urlsafe(32)


def reset_token_expiry(now: Optional[datetime] = None) -> str:
    now = now or utc_now()
    return to_iso(now + timedelta(minutes=RESET_TOKEN_MINUTES))


def is_expired(expiry: Timestamp, now: Optional[datetime] = None) -> bool:
    """True once ``now`` is strictly past ``expiry``; the expiry instant itself is still valid."""
    if isinstance(expiry, str):
        expiry = parse_iso(expiry)
    now = now or utc_now()
    return now > expiry


def set_reset_token(email: str, token: str, expiry: str) -> bool:
    normalized = normalize_email(email)
    with store_lock():
        db = read_database()
        for user in db["users"]:
            if user.get("email") == normalized:
                user["reset_token"] = token
                user["reset_token_expiry"] = expiry
                write_database(db)
                return True
    return False


def create_password_reset_token(email: str, now: Optional[datetime] = None) -> Optional[str]:
    """Issue a fresh token for ``email``, replacing any outstanding one. None if no such user."""
    token = generate_reset_token()
    if not set_reset_token(email, token, reset_token_expiry(now)):
        return None
    return token


def get_user_by_reset_token(token: str, now: Optional[datetime] = None) -> Optional[Dict]:
    """
    Look up the user holding ``token``.
    - Returns None if no user holds it or it has expired.
    - If expired (or the expiry is unreadable), the token is cleared from the record.
    """
    if not token:
        return None

    with store_lock():
        db = read_database()
        user = next((u for u in db["users"] if u.get("reset_token") == token), None)
        if not user:
            return None

        expiry = user.get("reset_token_expiry")
        try:
            expired = not expiry or is_expired(expiry, now)
        except ValueError:
            expired = True

        if expired:
            user.pop("reset_token", None)
            user.pop("reset_token_expiry", None)
            write_database(db)
            return None

        return dict(user)


def complete_password_reset(user_id: str, token: str, password_hash: str) -> Optional[Dict]:
    """
    Replace the password hash and consume the reset token in a single write.
    Returns None if the user no longer holds ``token`` (already used or replaced).
    """
    with store_lock():
        db = read_database()
        user = next((u for u in db["users"] if u.get("id") == user_id), None)
        if not user or not token or user.get("reset_token") != token:
            return None
        user["password_hash"] = password_hash
        user.pop("reset_token", None)
        user.pop("reset_token_expiry", None)
        write_database(db)
        return dict(user)


__all__ = [
    "RESET_TOKEN_MINUTES",
    "generate_reset_token",
    "reset_token_expiry",
    "is_expired",
    "set_reset_token",
    "create_password_reset_token",
    "get_user_by_reset_token",
    "complete_password_reset",
]
