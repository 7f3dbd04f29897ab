"""Shared FastAPI dependencies."""
from typing import Optional

from fastapi import HTTPException, Request


def get_current_user(request: Request) -> Optional[dict]:
    """Get current admin from request state."""
    return getattr(request.state, "user", None)


def require_user(request: Request) -> dict:
    """Require an authenticated admin, raise 401 if not authenticated."""
    user = get_current_user(request)
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def get_access_token(request: Request) -> Optional[str]:
    """Session token of the current admin (used to act as them on the backend)."""
    return getattr(request.state, "access_token", None)


def get_csrf_token(request: Request) -> str:
    """Get CSRF token from request state."""
    return getattr(request.state, "csrf_token", "")
