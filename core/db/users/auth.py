"""
Password hashing and verification.
"""
from __future__ import annotations

import os

import bcrypt

DEFAULT_BCRYPT_ROUNDS = 12


def _rounds() -> int:
    try:
        return int(os.getenv("BCRYPT_ROUNDS", DEFAULT_BCRYPT_ROUNDS))
    except ValueError:
        return DEFAULT_BCRYPT_ROUNDS


def hash_password(raw_password: str) -> str:
    salt = bcrypt.gensalt(rounds=_rounds())
    return bcrypt.hashpw(raw_password.encode("utf-8"), salt).decode("utf-8")


def verify_password(raw_password: str, password_hash: str) -> bool:
    if not raw_password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(raw_password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # malformed hash or over-long input
        return False


__all__ = ["DEFAULT_BCRYPT_ROUNDS", "hash_password", "verify_password"]
