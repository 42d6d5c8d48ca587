"""
Account operations: register, login, logout, current user and the password
reset flow.

Every operation returns a ``Result``. Expected failures (bad input, bad
credentials, unknown tokens, storage I/O errors) come back as
``Result(error=AccountError(...))`` instead of being raised, so the HTTP layer
can map each kind to a response without try/except around every call.
"""
from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional

from core.database import (
    DuplicateEmailError,
    StoreError,
    complete_password_reset,
    create_password_reset_token,
    create_user,
    get_user_by_email,
    get_user_by_id,
    get_user_by_reset_token,
    hash_password,
    issue_session_token,
    normalize_email,
    public_user,
    update_last_login,
    verify_password,
    verify_session_token,
)
from core.validation import is_valid_email, password_policy_errors

log = logging.getLogger("accounts")

RESET_REQUEST_MESSAGE = "If the email exists, a reset link has been sent"
RESET_DONE_MESSAGE = "Password has been successfully reset"
LOGOUT_MESSAGE = "Successfully logged out"
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
STORE_FAILURE_MESSAGE = "An error occurred while processing your request"

ResetDelivery = Callable[[str, str], None]


class ErrorKind(str, Enum):
    MISSING_FIELDS = "MISSING_FIELDS"
    INVALID_EMAIL = "INVALID_EMAIL"
    INVALID_PASSWORD = "INVALID_PASSWORD"
    PASSWORD_MISMATCH = "PASSWORD_MISMATCH"
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    NO_TOKEN = "NO_TOKEN"
    INVALID_TOKEN = "INVALID_TOKEN"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    INVALID_OR_EXPIRED_TOKEN = "INVALID_OR_EXPIRED_TOKEN"
    STORE_FAILURE = "STORE_FAILURE"
    RATE_LIMITED = "RATE_LIMITED"


@dataclass(frozen=True)
class AccountError:
    kind: ErrorKind
    message: str
    field: Optional[str] = None


@dataclass(frozen=True)
class Result:
    value: Any = None
    error: Optional[AccountError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _fail(kind: ErrorKind, message: str, field: Optional[str] = None) -> Result:
    return Result(error=AccountError(kind, message, field))


def _store_guarded(func):
    """Turn storage I/O errors into a STORE_FAILURE result; details go to the log only."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except StoreError:
            log.exception("Store failure in %s", func.__name__)
            return _fail(ErrorKind.STORE_FAILURE, STORE_FAILURE_MESSAGE)

    return wrapper


@_store_guarded
def register(email: str, password: str, confirm_password: str) -> Result:
    """Create an account. Does not log the user in."""
    if not email or not password or not confirm_password:
        return _fail(
            ErrorKind.MISSING_FIELDS,
            "Email, password, and confirm password are required",
        )
    if not is_valid_email(email):
        return _fail(ErrorKind.INVALID_EMAIL, "Please enter a valid email address", "email")

    problems = password_policy_errors(password)
    if problems:
        return _fail(ErrorKind.INVALID_PASSWORD, problems[0], "password")
    if password != confirm_password:
        return _fail(ErrorKind.PASSWORD_MISMATCH, "Passwords do not match", "confirm_password")

    try:
        record = create_user(normalize_email(email), hash_password(password))
    except DuplicateEmailError:
        return _fail(ErrorKind.DUPLICATE_EMAIL, "Email already registered", "email")

    log.info("Registered user_id=%s", record["id"])
    return Result(value=public_user(record))


@_store_guarded
def login(email: str, password: str) -> Result:
    """
    Check credentials and issue a session token.
    A malformed email, an unknown email and a wrong password all give the
    same INVALID_CREDENTIALS result.
    """
    if not email or not password:
        return _fail(ErrorKind.MISSING_FIELDS, "Email and password are required")
    if not is_valid_email(email):
        return _fail(ErrorKind.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE)

    record = get_user_by_email(normalize_email(email))
    if not record or not verify_password(password, record.get("password_hash", "")):
        return _fail(ErrorKind.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE)

    updated = update_last_login(record["id"])
    if not updated:
        # deleted between lookup and update
        return _fail(ErrorKind.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE)

    token = issue_session_token(updated["id"], updated["email"])
    log.info("Login user_id=%s", updated["id"])
    return Result(value={"user": public_user(updated), "token": token})


def logout(token: Optional[str] = None) -> Result:
    """Tokens are stateless, so there is nothing to revoke; the caller drops the cookie."""
    return Result(value={"message": LOGOUT_MESSAGE})


@_store_guarded
def get_current_user(token: Optional[str]) -> Result:
    if not token:
        return _fail(ErrorKind.NO_TOKEN, "Authentication token not found")

    payload = verify_session_token(token)
    if not payload:
        return _fail(ErrorKind.INVALID_TOKEN, "Authentication token is invalid or expired")

    record = get_user_by_id(payload["user_id"])
    if not record:
        return _fail(ErrorKind.USER_NOT_FOUND, "User account no longer exists")
    return Result(value=public_user(record))


@_store_guarded
def request_password_reset(
    email: str,
    deliver: Optional[ResetDelivery] = None,
    now: Optional[datetime] = None,
) -> Result:
    """
    Start a reset for ``email``. The response is the same whether or not the
    account exists; only a known account gets a token stored and delivered.
    """
    if not email:
        return _fail(ErrorKind.MISSING_FIELDS, "Email is required", "email")
    if not is_valid_email(email):
        return _fail(ErrorKind.INVALID_EMAIL, "Please enter a valid email address", "email")

    user = get_user_by_email(normalize_email(email))
    if user:
        token = create_password_reset_token(user["email"], now=now)
        if token and deliver:
            try:
                deliver(user["email"], token)
            except Exception:
                log.exception("Failed to deliver reset link for user_id=%s", user["id"])
        log.info("Reset token issued for user_id=%s", user["id"])
    else:
        log.info("Reset requested for unknown email")

    return Result(value={"message": RESET_REQUEST_MESSAGE})


@_store_guarded
def confirm_password_reset(
    token: str,
    new_password: str,
    confirm_password: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Result:
    """
    Set a new password from a reset token. ``confirm_password`` is checked
    only when the caller collected one.
    """
    if not token:
        return _fail(ErrorKind.MISSING_FIELDS, "Reset token is required", "token")
    if not new_password:
        return _fail(ErrorKind.MISSING_FIELDS, "New password is required", "newPassword")

    problems = password_policy_errors(new_password)
    if problems:
        return _fail(ErrorKind.INVALID_PASSWORD, problems[0], "newPassword")
    if confirm_password is not None and confirm_password != new_password:
        return _fail(ErrorKind.PASSWORD_MISMATCH, "Passwords do not match", "confirm_password")

    user = get_user_by_reset_token(token, now=now)
    if not user:
        return _fail(ErrorKind.INVALID_OR_EXPIRED_TOKEN, "Reset link is invalid or expired")

    if not complete_password_reset(user["id"], token, hash_password(new_password)):
        return _fail(ErrorKind.INVALID_OR_EXPIRED_TOKEN, "Reset link is invalid or expired")

    log.info("Password reset completed for user_id=%s", user["id"])
    return Result(value={"message": RESET_DONE_MESSAGE})


__all__ = [
    "ErrorKind",
    "AccountError",
    "Result",
    "RESET_REQUEST_MESSAGE",
    "RESET_DONE_MESSAGE",
    "LOGOUT_MESSAGE",
    "register",
    "login",
    "logout",
    "get_current_user",
    "request_password_reset",
    "confirm_password_reset",
]
