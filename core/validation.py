"""
Input validation for credentials.
"""
from __future__ import annotations

import re
from typing import Dict, List, Optional

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
SYMBOL_RE = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")

PASSWORD_MIN_LENGTH = 8
# bcrypt only looks at the first 72 bytes
PASSWORD_MAX_BYTES = 72

MSG_TOO_SHORT = f"Password must be at least {PASSWORD_MIN_LENGTH} characters long"
MSG_TOO_LONG = f"Password must be at most {PASSWORD_MAX_BYTES} bytes long"
MSG_NO_LOWER = "Password must contain at least one lowercase letter"
MSG_NO_UPPER = "Password must contain at least one uppercase letter"
MSG_NO_DIGIT = "Password must contain at least one number"
MSG_NO_SYMBOL = "Password must contain at least one special character"


def is_valid_email(email: str) -> bool:
    email = (email or "").strip()
    return bool(email) and EMAIL_RE.match(email) is not None


def password_policy_errors(password: str) -> List[str]:
    """Minimum policy used by the account operations."""
    password = password or ""
    errors = []
    if len(password) < PASSWORD_MIN_LENGTH:
        errors.append(MSG_TOO_SHORT)
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        errors.append(MSG_TOO_LONG)
    return errors


def password_strength_errors(password: str) -> List[str]:
    """Stricter policy for registration-facing forms. Reports every violated rule."""
    password = password or ""
    errors = password_policy_errors(password)
    if not re.search(r"[a-z]", password):
        errors.append(MSG_NO_LOWER)
    if not re.search(r"[A-Z]", password):
        errors.append(MSG_NO_UPPER)
    if not re.search(r"\d", password):
        errors.append(MSG_NO_DIGIT)
    if not SYMBOL_RE.search(password):
        errors.append(MSG_NO_SYMBOL)
    return errors


def validate_auth_form(
    email: Optional[str] = None,
    password: Optional[str] = None,
    confirm_password: Optional[str] = None,
) -> Dict[str, str]:
    """
    Field -> message for a submitted auth form. Only fields that were passed
    (not None) are checked; at most one message per field.
    """
    errors: Dict[str, str] = {}

    if email is not None:
        if not email.strip():
            errors["email"] = "Email is required"
        elif not is_valid_email(email):
            errors["email"] = "Please enter a valid email address"

    if password is not None:
        if not password:
            errors["password"] = "Password is required"
        else:
            problems = password_strength_errors(password)
            if problems:
                errors["password"] = problems[0]

    if confirm_password is not None:
        if not confirm_password:
            errors["confirm_password"] = "Please confirm your password"
        elif password and password != confirm_password:
            errors["confirm_password"] = "Passwords do not match"

    return errors


__all__ = [
    "PASSWORD_MIN_LENGTH",
    "PASSWORD_MAX_BYTES",
    "is_valid_email",
    "password_policy_errors",
    "password_strength_errors",
    "validate_auth_form",
]
