"""Jinja2 templates, filters and page rendering helpers."""
from datetime import date, datetime, timezone
from typing import List, Optional, Union
from urllib.parse import urlencode
from zoneinfo import ZoneInfo

from fastapi import Request
from fastapi.templating import Jinja2Templates

from . import config
from .toasts import clear_toasts, read_toasts

templates = Jinja2Templates(directory=config.TEMPLATES_DIR)

MONTHS_ID = [
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
]


def _to_local(value: Union[str, datetime, date, None]) -> Optional[date]:
    if not value:
        return None
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace(" ", "T", 1))
        except ValueError:
            return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(ZoneInfo(config.DISPLAY_TIMEZONE)).date()
    return value


def format_date_long(value) -> str:
    """``17 Oktober 2026``"""
    day = _to_local(value)
    if day is None:
        return ""
    return f"{day.day} {MONTHS_ID[day.month - 1]} {day.year}"


def format_date_short(value) -> str:
    """``17/10/2026``"""
    day = _to_local(value)
    if day is None:
        return ""
    return f"{day.day}/{day.month}/{day.year}"


def image_variant(url: Optional[str], width: int, height: int) -> str:
    """Image URL with a resize transform (``?width=..&height=..``)."""
    if not url:
        return ""
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{urlencode({'width': width, 'height': height})}"


templates.env.filters["tanggal"] = format_date_long
templates.env.filters["tanggal_singkat"] = format_date_short
templates.env.filters["image_variant"] = image_variant
templates.env.globals["base_url"] = config.ROOT_PATH
templates.env.globals["site_name"] = config.SITE_NAME
templates.env.globals["toast_timeout"] = config.TOAST_TIMEOUT_MS
templates.env.globals["sizes"] = {
    "album_cover": config.ALBUM_COVER_SIZE,
    "photo_thumb": config.PHOTO_THUMB_SIZE,
    "editor_thumb": config.EDITOR_THUMB_SIZE,
}


def render(
    request: Request,
    name: str,
    context: Optional[dict] = None,
    status_code: int = 200,
    errors: Optional[List[str]] = None
):
    """Render a page with the common context and hand it the queued toasts.

    ``errors`` are shown as error toasts on this page only.
    """
    toasts = read_toasts(request)
    next_id = max((t.get("id", 0) for t in toasts), default=0) + 1
    for offset, message in enumerate(errors or []):
        toasts.append({"id": next_id + offset, "message": message, "type": "error"})

    page = {
        "request": request,
        "user": getattr(request.state, "user", None),
        "csrf_token": getattr(request.state, "csrf_token", ""),
        "toasts": toasts,
        "current_year": datetime.now(ZoneInfo(config.DISPLAY_TIMEZONE)).year,
        "max_upload_size": config.MAX_UPLOAD_SIZE,
        "allowed_types": sorted(config.ALLOWED_IMAGE_TYPES),
    }
    page.update(context or {})

    response = templates.TemplateResponse(request, name, page, status_code=status_code)
    if config.TOAST_COOKIE in request.cookies:
        clear_toasts(response)
    return response
