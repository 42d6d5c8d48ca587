"""
Low-level JSON file storage helpers.

The whole user table lives in one JSON document shaped like ``{"users": [...]}``.
Every write replaces the file atomically (temp file + os.replace), so a reader
sees either the previous document or the new one, never a partial write.
"""
from __future__ import annotations

import json
import logging
import os
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Dict

log = logging.getLogger("core.db")

DEFAULT_DATABASE_PATH = os.path.join("data", "users.json")

# Serialises read-modify-write cycles inside this process. Separate processes
# sharing the same file are NOT coordinated.
_store_lock = threading.RLock()


class StoreError(Exception):
    """Raised when the user file cannot be read or written."""


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(value: datetime) -> str:
    return value.isoformat(timespec="seconds")


def parse_iso(value: str) -> datetime:
    """Parse a stored timestamp; naive values are taken as UTC."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def resolve_database_path() -> str:
    return os.getenv("USERS_DB_PATH") or DEFAULT_DATABASE_PATH


@contextmanager
def store_lock():
    """Hold the process-wide store lock for a read-modify-write cycle."""
    with _store_lock:
        yield


def ensure_database() -> str:
    """Create the data directory and an empty user file if missing. Returns the path."""
    path = resolve_database_path()
    try:
        data_dir = os.path.dirname(path)
        if data_dir:
            os.makedirs(data_dir, exist_ok=True)
        if not os.path.exists(path):
            _write_atomic(path, {"users": []})
            log.info("Created empty user database at %s", path)
    except OSError as exc:
        raise StoreError(f"Failed to initialize database: {exc}") from exc
    return path


def read_database() -> Dict:
    path = ensure_database()
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, ValueError) as exc:
        raise StoreError(f"Failed to read database: {exc}") from exc

    if not isinstance(data, dict) or not isinstance(data.get("users"), list):
        raise StoreError("Failed to read database: unexpected document shape")
    return data


def write_database(data: Dict) -> None:
    path = ensure_database()
    try:
        _write_atomic(path, data)
    except (OSError, TypeError, ValueError) as exc:
        raise StoreError(f"Failed to write database: {exc}") from exc


def _write_atomic(path: str, data: Dict) -> None:
    tmp_path = f"{path}.tmp"
    try:
        with open(tmp_path, "w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=2)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


__all__ = [
    "DEFAULT_DATABASE_PATH",
    "StoreError",
    "utc_now",
    "to_iso",
    "parse_iso",
    "resolve_database_path",
    "store_lock",
    "ensure_database",
    "read_database",
    "write_database",
]
