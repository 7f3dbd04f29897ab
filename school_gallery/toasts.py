"""Toast notifications carried across redirects.

Messages are queued in a short-lived cookie and rendered (then cleared) by the
next HTML page. The browser removes each toast after ``TOAST_TIMEOUT_MS``.
"""
import base64
import binascii
import json
import time
from typing import List

from fastapi import Request, Response

from . import config

TOAST_TYPES = {"success", "error", "info"}
# Anything older is dropped; also keeps the cookie small
MAX_QUEUED_TOASTS = 10


def _encode(toasts: List[dict]) -> str:
    raw = json.dumps(toasts, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii")


def _decode(value: str) -> List[dict]:
    try:
        toasts = json.loads(base64.urlsafe_b64decode(value.encode("ascii")))
    except (ValueError, binascii.Error):
        return []
    if not isinstance(toasts, list):
        return []
    return [
        t for t in toasts
        if isinstance(t, dict) and isinstance(t.get("message"), str) and t.get("type") in TOAST_TYPES
    ]


def read_toasts(request: Request) -> List[dict]:
    """Toasts queued for this request (not cleared)."""
    value = request.cookies.get(config.TOAST_COOKIE)
    return _decode(value) if value else []


def push_toast(request: Request, response: Response, message: str, type: str = "info") -> None:
    """Queue a toast on ``response`` for the next rendered page.

    Toasts already queued on the incoming request are kept, as are toasts
    pushed earlier on the same response.
    """
    if type not in TOAST_TYPES:
        type = "info"

    queued = getattr(response, "_queued_toasts", None)
    if queued is None:
        queued = read_toasts(request)

    toast_id = int(time.time() * 1000)
    if queued:
        toast_id = max(toast_id, max(t.get("id", 0) for t in queued) + 1)
    queued.append({"id": toast_id, "message": message, "type": type})
    queued = queued[-MAX_QUEUED_TOASTS:]
    response._queued_toasts = queued

    response.set_cookie(
        key=config.TOAST_COOKIE,
        value=_encode(queued),
        httponly=True,
        samesite="lax",
        max_age=60
    )


def clear_toasts(response: Response) -> None:
    response.delete_cookie(config.TOAST_COOKIE)
