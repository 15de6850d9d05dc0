from __future__ import annotations

import os
import threading
from typing import Any

import bcrypt

from ..ledger.config import DEFAULT_LEDGER_CONFIG

_users: dict[str, dict[str, Any]] = {}
_lock = threading.Lock()


def _hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def _seed_users() -> None:
    """Pre-seed the ledger administrator on import."""
    admin_password = os.environ.get("ADMIN_PASSWORD", "admin123")
    _users[DEFAULT_LEDGER_CONFIG.admin] = {
        "password_hash": _hash_password(admin_password),
        "role": "admin",
    }


def register_user(username: str, password: str, role: str = "user") -> dict[str, Any] | None:
    """Create an account. Returns ``{username, role}`` or ``None`` if the name is taken."""
    with _lock:
        if username in _users:
            return None
        _users[username] = {"password_hash": _hash_password(password), "role": role}
    return {"username": username, "role": role}


def authenticate(username: str, password: str) -> dict[str, Any] | None:
    """Verify credentials. Returns ``{username, role}`` or ``None``."""
    record = _users.get(username)
    if record and _verify_password(password, record["password_hash"]):
        return {"username": username, "role": record["role"]}
    return None


def clear_users() -> None:
    """Drop every account except the seeded administrator."""
    with _lock:
        _users.clear()
        _seed_users()


_seed_users()
