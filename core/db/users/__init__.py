"""
User-related storage helpers, split by responsibility.
"""
from core.db.users.auth import hash_password, verify_password
from core.db.users.user_store import (
    DuplicateEmailError,
    normalize_email,
    public_user,
    create_user,
    get_user_by_email,
    get_user_by_id,
    update_user,
    update_last_login,
    delete_user,
    list_users,
)
from core.db.users.password_reset import (
    RESET_TOKEN_MINUTES,
    generate_reset_token,
    reset_token_expiry,
    is_expired,
    set_reset_token,
    create_password_reset_token,
    get_user_by_reset_token,
    complete_password_reset,
)
from core.db.users.sessions import (
    SESSION_TOKEN_DAYS,
    issue_session_token,
    verify_session_token,
)

__all__ = [
    "hash_password",
    "verify_password",
    "DuplicateEmailError",
    "normalize_email",
    "public_user",
    "create_user",
    "get_user_by_email",
    "get_user_by_id",
    "update_user",
    "update_last_login",
    "delete_user",
    "list_users",
    "RESET_TOKEN_MINUTES",
    "generate_reset_token",
    "reset_token_expiry",
    "is_expired",
    "set_reset_token",
    "create_password_reset_token",
    "get_user_by_reset_token",
    "complete_password_reset",
    "SESSION_TOKEN_DAYS",
    "issue_session_token",
    "verify_session_token",
]
