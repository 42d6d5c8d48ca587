"""
Single import point for storage and credential helpers used by the app layer.
"""
from core.db.base import StoreError, ensure_database, resolve_database_path
from core.db.users import (
    DuplicateEmailError,
    SESSION_TOKEN_DAYS,
    complete_password_reset,
    create_password_reset_token,
    create_user,
    delete_user,
    get_user_by_email,
    get_user_by_id,
    get_user_by_reset_token,
    hash_password,
    list_users,
    normalize_email,
    public_user,
    update_last_login,
    verify_password,
    verify_session_token,
    issue_session_token,
)

__all__ = [
    "StoreError",
    "ensure_database",
    "resolve_database_path",
    "DuplicateEmailError",
    "SESSION_TOKEN_DAYS",
    "complete_password_reset",
    "create_password_reset_token",
    "create_user",
    "delete_user",
    "get_user_by_email",
    "get_user_by_id",
    "get_user_by_reset_token",
    "hash_password",
    "list_users",
    "normalize_email",
    "public_user",
    "update_last_login",
    "verify_password",
    "verify_session_token",
    "issue_session_token",
]
