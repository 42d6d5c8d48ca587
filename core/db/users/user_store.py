"""
User CRUD helpers backed by the JSON user file.

Records returned from here still carry ``password_hash``; callers outside the
credential layer must go through ``public_user`` before handing data out.
"""
from __future__ import annotations

import uuid
from typing import Dict, List, Optional

from core.db.base import read_database, store_lock, to_iso, utc_now, write_database

# Fields that never change after creation.
IMMUTABLE_FIELDS = ("id", "email", "created_at")
PUBLIC_FIELDS = ("id", "email", "created_at", "last_login_at")


class DuplicateEmailError(Exception):
    """Raised when a user with the same normalised email already exists."""


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def public_user(record: Dict) -> Dict:
    """Project a stored record to the fields that may leave the store."""
    return {key: record.get(key) for key in PUBLIC_FIELDS}


def _find(users: List[Dict], key: str, value: str) -> Optional[int]:
    for index, user in enumerate(users):
        if user.get(key) == value:
            return index
    return None


def create_user(email: str, password_hash: str) -> Dict:
    normalized = normalize_email(email)
    now = to_iso(utc_now())
    with store_lock():
        db = read_database()
        if _find(db["users"], "email", normalized) is not None:
            raise DuplicateEmailError("User with this email already exists")

        record = {
            "id": str(uuid.uuid4()),
            "email": normalized,
            "password_hash": password_hash,
            "created_at": now,
            "last_login_at": now,
        }
        db["users"].append(record)
        write_database(db)
    return dict(record)


def get_user_by_email(email: str) -> Optional[Dict]:
    users = read_database()["users"]
    index = _find(users, "email", normalize_email(email))
    return dict(users[index]) if index is not None else None


def get_user_by_id(user_id: str) -> Optional[Dict]:
    """Look up a user by id. Returns dict or None."""
    if not user_id:
        return None
    users = read_database()["users"]
    index = _find(users, "id", user_id)
    return dict(users[index]) if index is not None else None


def update_user(user_id: str, **fields) -> Optional[Dict]:
    """
    Merge ``fields`` into the stored record.
    A value of None removes the key, which is how optional fields are cleared.
    """
    with store_lock():
        db = read_database()
        index = _find(db["users"], "id", user_id)
        if index is None:
            return None

        record = db["users"][index]
        for key, value in fields.items():
            if key in IMMUTABLE_FIELDS:
                continue
            if value is None:
                record.pop(key, None)
            else:
                record[key] = value
        write_database(db)
    return dict(record)


def update_last_login(user_id: str) -> Optional[Dict]:
    return update_user(user_id, last_login_at=to_iso(utc_now()))


def delete_user(user_id: str) -> bool:
    with store_lock():
        db = read_database()
        index = _find(db["users"], "id", user_id)
        if index is None:
            return False
        del db["users"][index]
        write_database(db)
    return True


def list_users() -> List[Dict]:
    return [dict(user) for user in read_database()["users"]]


__all__ = [
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
]
