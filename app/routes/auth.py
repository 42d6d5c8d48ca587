"""
JSON endpoints for the auth flow under /api/auth.
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from app.auth_utils import clear_session_cookie, get_session_token, set_session_cookie
from app.email_utils import build_reset_link, send_reset_email
from app.security import allow_request, allow_request_with_remaining, client_key
from core import accounts
from core.accounts import AccountError, ErrorKind
from core.db.base import to_iso, utc_now

router = APIRouter(prefix="/api/auth")

STATUS_BY_KIND = {
    ErrorKind.MISSING_FIELDS: 400,
    ErrorKind.INVALID_EMAIL: 400,
    ErrorKind.INVALID_PASSWORD: 400,
    ErrorKind.PASSWORD_MISMATCH: 400,
    ErrorKind.DUPLICATE_EMAIL: 409,
    ErrorKind.INVALID_CREDENTIALS: 401,
    ErrorKind.NO_TOKEN: 401,
    ErrorKind.INVALID_TOKEN: 401,
    ErrorKind.USER_NOT_FOUND: 404,
    ErrorKind.INVALID_OR_EXPIRED_TOKEN: 400,
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.STORE_FAILURE: 500,
}


class _Payload(BaseModel):
    # Missing fields must reach the account layer as None, not fail validation
    model_config = ConfigDict(populate_by_name=True)


class RegisterRequest(_Payload):
    email: Optional[str] = None
    password: Optional[str] = None
    confirm_password: Optional[str] = Field(None, alias="confirmPassword")


class LoginRequest(_Payload):
    email: Optional[str] = None
    password: Optional[str] = None


class ForgotPasswordRequest(_Payload):
    email: Optional[str] = None


class ResetPasswordRequest(_Payload):
    token: Optional[str] = None
    new_password: Optional[str] = Field(None, alias="newPassword")
    confirm_password: Optional[str] = Field(None, alias="confirmPassword")


def error_response(error: AccountError) -> JSONResponse:
    status_code = STATUS_BY_KIND.get(error.kind, 500)
    return JSONResponse(
        {
            "error": error.kind.value,
            "message": error.message,
            "field": error.field,
            "statusCode": status_code,
            "timestamp": to_iso(utc_now()),
        },
        status_code=status_code,
    )


def _rate_limited() -> JSONResponse:
    return error_response(
        AccountError(ErrorKind.RATE_LIMITED, "Too many requests. Please wait a moment before trying again.")
    )


@router.post("/register")
def register(request: Request, payload: RegisterRequest):
    if not allow_request(client_key(request, "register"), limit=10, window_seconds=300):
        return _rate_limited()

    result = accounts.register(payload.email, payload.password, payload.confirm_password)
    if not result.ok:
        return error_response(result.error)

    user = result.value
    return JSONResponse(
        {
            "message": "User created successfully",
            "user": {"id": user["id"], "email": user["email"], "createdAt": user["created_at"]},
        },
        status_code=201,
    )


@router.post("/login")
def login(request: Request, payload: LoginRequest):
    allowed, _ = allow_request_with_remaining(client_key(request, "login"), limit=10, window_seconds=300)
    if not allowed:
        return _rate_limited()

    result = accounts.login(payload.email, payload.password)
    if not result.ok:
        return error_response(result.error)

    user = result.value["user"]
    response = JSONResponse(
        {
            "message": "Login successful",
            "user": {"id": user["id"], "email": user["email"], "lastLoginAt": user["last_login_at"]},
        }
    )
    set_session_cookie(response, result.value["token"])
    return response


@router.post("/logout")
def logout(request: Request):
    result = accounts.logout(get_session_token(request))
    response = JSONResponse(result.value)
    clear_session_cookie(response)
    return response


@router.get("/me")
def me(request: Request):
    result = accounts.get_current_user(get_session_token(request))
    if not result.ok:
        return error_response(result.error)

    user = result.value
    return JSONResponse(
        {
            "user": {
                "id": user["id"],
                "email": user["email"],
                "createdAt": user["created_at"],
                "lastLoginAt": user["last_login_at"],
            }
        }
    )


@router.post("/forgot-password")
def forgot_password(request: Request, payload: ForgotPasswordRequest):
    # 5 per 6 hours
    allowed, _ = allow_request_with_remaining(client_key(request, "pwdreset"), limit=5, window_seconds=21600)
    if not allowed:
        return _rate_limited()

    base_url = str(request.base_url)

    def deliver(email: str, token: str) -> None:
        send_reset_email(email, build_reset_link(token, base_url))

    result = accounts.request_password_reset(payload.email, deliver=deliver)
    if not result.ok:
        return error_response(result.error)
    return JSONResponse(result.value)


@router.post("/reset-password")
def reset_password(request: Request, payload: ResetPasswordRequest):
    if not allow_request(client_key(request, "pwdreset_conf"), limit=5, window_seconds=300):
        return _rate_limited()

    result = accounts.confirm_password_reset(payload.token, payload.new_password, payload.confirm_password)
    if not result.ok:
        return error_response(result.error)
    return JSONResponse(result.value)
