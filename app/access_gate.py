"""
Route-level access control.

``decide`` classifies a navigation and says whether to let it through, send
the visitor to the login page, or bounce an already signed-in visitor away
from login/register. It only verifies the token signature; it never touches
the user store.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Tuple
from urllib.parse import quote

from core.database import verify_session_token

ALLOW = "allow"
REDIRECT_TO_LOGIN = "redirect_to_login"
REDIRECT_AWAY = "redirect_away"

LOGIN_PATH = "/login"
PUBLIC_PATHS = ("/login", "/register", "/forgot-password", "/reset-password")
AUTH_REDIRECT_PATHS = ("/login", "/register")
DEFAULT_PROTECTED_PATHS = ("/dashboard", "/profile", "/demo-auth")
DEFAULT_LANDING_PATH = "/dashboard"


@dataclass(frozen=True)
class Decision:
    action: str
    location: Optional[str] = None
    clear_token: bool = False


def protected_paths() -> Tuple[str, ...]:
    raw = os.getenv("PROTECTED_PATHS")
    if not raw:
        return DEFAULT_PROTECTED_PATHS
    return tuple(p.strip() for p in raw.split(",") if p.strip() and p.strip() != "/")


def landing_path() -> str:
    path = os.getenv("DEFAULT_LANDING_PATH") or DEFAULT_LANDING_PATH
    return path if is_safe_return_url(path) else DEFAULT_LANDING_PATH


def is_public(path: str) -> bool:
    return any(path == p or path.startswith(p) for p in PUBLIC_PATHS)


def is_auth_redirect(path: str) -> bool:
    return path in AUTH_REDIRECT_PATHS


def is_protected(path: str) -> bool:
    if is_public(path):
        return False
    return path == "/" or any(path.startswith(p) for p in protected_paths())


def is_safe_return_url(url: Optional[str]) -> bool:
    """Only same-origin relative paths; '//host' and '/\\host' point elsewhere."""
    if not url or not url.startswith("/"):
        return False
    return not url.startswith("//") and not url.startswith("/\\")


def login_redirect_url(return_path: str) -> str:
    return f"{LOGIN_PATH}?returnUrl={quote(return_path, safe='')}"


def decide(path: str, token: Optional[str] = None, return_url: Optional[str] = None) -> Decision:
    authenticated = bool(token) and verify_session_token(token) is not None

    if is_protected(path) and not authenticated:
        # a present-but-rejected token is stale; have the caller drop it
        return Decision(REDIRECT_TO_LOGIN, login_redirect_url(path), clear_token=bool(token))

    if is_auth_redirect(path) and authenticated:
        destination = return_url if is_safe_return_url(return_url) else landing_path()
        return Decision(REDIRECT_AWAY, destination)

    return Decision(ALLOW)


__all__ = [
    "ALLOW",
    "REDIRECT_TO_LOGIN",
    "REDIRECT_AWAY",
    "Decision",
    "decide",
    "is_public",
    "is_auth_redirect",
    "is_protected",
    "is_safe_return_url",
    "landing_path",
    "protected_paths",
]
