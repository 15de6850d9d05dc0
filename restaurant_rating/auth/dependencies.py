from __future__ import annotations

from fastapi import Depends, HTTPException, Request


def session_user(request: Request) -> dict | None:
    """Return the logged-in user dict from the session, or ``None``."""
    return request.session.get("user")


def require_user(user: dict | None = Depends(session_user)) -> dict:
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def require_admin(user: dict = Depends(require_user)) -> dict:
    """401 when logged out, 403 when the session user is not an administrator."""
    if user.get("role") != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return user


def caller_identity(user: dict = Depends(require_user)) -> str:
    """The identity the ledger records as owner, reviewer or verifier."""
    return user["username"]
