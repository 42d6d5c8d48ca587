"""
Placeholder HTML pages for the auth screens and the canvas shell.

Access control for these routes is done by the access-gate middleware. Login
and forgot-password post JSON to /api/auth; register and reset-password post
back here so the form-level checks run on the server and each field gets its
own message.
"""
import html
from typing import Dict, Optional

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from app.access_gate import is_safe_return_url, landing_path
from app.auth_utils import get_current_user
from app.layout import render_page
from app.routes.auth import STATUS_BY_KIND
from app.security import allow_request, client_key
from core import accounts
from core.accounts import ErrorKind
from core.validation import validate_auth_form

router = APIRouter()

INVALID_RESET_LINK = """
<div class="card">
  <p>Reset link is invalid or expired.</p>
  <p><a href="/forgot-password">Request a new reset link</a></p>
</div>
"""


def _form(action: str, fields: str, submit: str, redirect: str = "") -> str:
    redirect_attr = f' data-redirect="{html.escape(redirect, quote=True)}"' if redirect else ""
    return f"""
    <div class="card">
      <form method="post" action="{action}" data-auth-form="1"{redirect_attr}>
        {fields}
        <p class="error" role="alert"></p>
        <button type="submit">{submit}</button>
      </form>
    </div>
    """


def _field(label: str, name: str, kind: str, value: str = "", error: Optional[str] = None) -> str:
    value_attr = f' value="{html.escape(value, quote=True)}"' if value else ""
    out = f'<label>{label}</label><input type="{kind}" name="{name}"{value_attr} required />'
    if error:
        out += f'<p class="error" data-field="{name}">{html.escape(error)}</p>'
    return out


def _plain_form(action: str, fields: str, submit: str, message: Optional[str] = None) -> str:
    notice = f'<p class="error" role="alert">{html.escape(message)}</p>' if message else ""
    return f"""
    <div class="card">
      <form method="post" action="{action}">
        {fields}
        {notice}
        <button type="submit">{submit}</button>
      </form>
    </div>
    """


_EMAIL = '<label>Email</label><input type="email" name="email" required />'


def _register_form(email: str = "", errors: Optional[Dict[str, str]] = None, message: Optional[str] = None) -> str:
    errors = errors or {}
    fields = (
        _field("Email", "email", "email", email, errors.get("email"))
        + _field("Password", "password", "password", error=errors.get("password"))
        + _field("Confirm password", "confirmPassword", "password", error=errors.get("confirm_password"))
    )
    return _plain_form("/register", fields, "Create account", message)


def _reset_form(token: str, errors: Optional[Dict[str, str]] = None, message: Optional[str] = None) -> str:
    errors = errors or {}
    fields = (
        f'<input type="hidden" name="token" value="{html.escape(token, quote=True)}" />'
        + _field("New password", "newPassword", "password", error=errors.get("password"))
        + _field("Confirm password", "confirmPassword", "password", error=errors.get("confirm_password"))
    )
    return _plain_form("/reset-password", fields, "Set new password", message)


def _too_many() -> HTMLResponse:
    return HTMLResponse("Too many attempts. Please try again later.", status_code=429)


@router.get("/login", response_class=HTMLResponse)
def login_page(request: Request, returnUrl: str = ""):
    redirect = returnUrl if is_safe_return_url(returnUrl) else landing_path()
    body = _form(
        "/api/auth/login",
        _EMAIL + '<label>Password</label><input type="password" name="password" required />',
        "Login",
        redirect,
    )
    body += '<p class="muted"><a href="/forgot-password">Forgot password?</a> · <a href="/register">Create an account</a></p>'
    return render_page("Login", body)


@router.get("/register", response_class=HTMLResponse)
def register_page(request: Request):
    return render_page("Register", _register_form())


@router.post("/register", response_class=HTMLResponse)
def register_submit(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    confirmPassword: str = Form(""),
):
    if not allow_request(client_key(request, "register"), limit=10, window_seconds=300):
        return _too_many()

    errors = validate_auth_form(email=email, password=password, confirm_password=confirmPassword)
    if errors:
        return render_page("Register", _register_form(email, errors), status_code=400)

    result = accounts.register(email, password, confirmPassword)
    if not result.ok:
        error = result.error
        if error.field:
            body = _register_form(email, {error.field: error.message})
        else:
            body = _register_form(email, message=error.message)
        return render_page("Register", body, status_code=STATUS_BY_KIND.get(error.kind, 500))

    return RedirectResponse(url="/login", status_code=303)


@router.get("/forgot-password", response_class=HTMLResponse)
def forgot_password_page(request: Request):
    body = '<p class="muted">Enter your email to get a password reset link.</p>'
    body += _form("/api/auth/forgot-password", _EMAIL, "Send reset link")
    return render_page("Forgot password", body)


@router.get("/reset-password", response_class=HTMLResponse)
def reset_password_page(request: Request, token: str = ""):
    if not token:
        return render_page("Reset password", INVALID_RESET_LINK)
    return render_page("Reset password", _reset_form(token))


@router.post("/reset-password", response_class=HTMLResponse)
def reset_password_submit(
    request: Request,
    token: str = Form(""),
    newPassword: str = Form(""),
    confirmPassword: str = Form(""),
):
    if not allow_request(client_key(request, "pwdreset_conf"), limit=5, window_seconds=300):
        return _too_many()
    if not token:
        return render_page("Reset password", INVALID_RESET_LINK, status_code=400)

    errors = validate_auth_form(password=newPassword, confirm_password=confirmPassword)
    if errors:
        return render_page("Reset password", _reset_form(token, errors), status_code=400)

    result = accounts.confirm_password_reset(token, newPassword, confirmPassword)
    if not result.ok:
        error = result.error
        if error.kind is ErrorKind.INVALID_OR_EXPIRED_TOKEN:
            return render_page("Reset password", INVALID_RESET_LINK, status_code=400)
        return render_page(
            "Reset password",
            _reset_form(token, message=error.message),
            status_code=STATUS_BY_KIND.get(error.kind, 500),
        )

    return RedirectResponse(url="/login", status_code=303)


def _shell(request: Request, title: str, text: str) -> HTMLResponse:
    user, _ = get_current_user(request)
    return render_page(title, f'<div class="card"><p>{text}</p></div>', user=user)


@router.get("/", response_class=HTMLResponse)
def canvas(request: Request):
    return _shell(request, "Strategy canvas", "Drag objectives from the palette onto the board.")


@router.get("/dashboard", response_class=HTMLResponse)
def dashboard(request: Request):
    return _shell(request, "Dashboard", "Your strategy boards.")


@router.get("/profile", response_class=HTMLResponse)
def profile(request: Request):
    return _shell(request, "Profile", "Account details.")


@router.get("/demo-auth", response_class=HTMLResponse)
def demo_auth(request: Request):
    return _shell(request, "Auth demo", "You are signed in.")
