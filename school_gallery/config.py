"""Application configuration and constants."""
import os
from pathlib import Path

# Directory paths
BASE_DIR = Path(__file__).resolve().parent.parent
PACKAGE_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = PACKAGE_DIR / "templates"
STATIC_DIR = PACKAGE_DIR / "static"

# Site identity
SITE_NAME = os.environ.get("SITE_NAME", "SMK LPPMRI 2 KEDUNGREJA")

# Base URL configuration (for running under a subpath like /galeri)
BASE_URL = os.environ.get("GALLERY_BASE_URL", "").strip("/")
ROOT_PATH = f"/{BASE_URL}" if BASE_URL else ""

# Backend selection: 'supabase' (production) or 'local' (SQLite + filesystem)
GALLERY_BACKEND = os.environ.get("GALLERY_BACKEND", "local").lower()

# Supabase settings
SUPABASE_URL = os.environ.get("SUPABASE_URL", "")
SUPABASE_KEY = os.environ.get("SUPABASE_KEY", "")

# Storage bucket holding every photo object
STORAGE_BUCKET = os.environ.get("STORAGE_BUCKET", "gallery")

# Local backend settings
DATABASE_PATH = Path(os.environ.get("GALLERY_DB_PATH", str(BASE_DIR / "gallery.db")))
STORAGE_BASE_PATH = Path(os.environ.get("STORAGE_BASE_PATH", str(BASE_DIR / "storage")))

# Upload validation
ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}
MAX_UPLOAD_SIZE = int(os.environ.get("MAX_UPLOAD_SIZE", str(10 * 1024 * 1024)))  # 10 MB
# Small files can still decode to huge bitmaps
MAX_IMAGE_PIXELS = int(os.environ.get("MAX_IMAGE_PIXELS", str(50_000_000)))

# Thumbnail transform sizes used by templates (width, height)
ALBUM_COVER_SIZE = (400, 300)
PHOTO_THUMB_SIZE = (400, 400)
EDITOR_THUMB_SIZE = (200, 200)

# Session configuration
SESSION_COOKIE = "gallery_session"
SESSION_MAX_AGE = 60 * 60 * 24 * 7  # 7 days

# Toast queue cookie (read on the next rendered page)
TOAST_COOKIE = "gallery_toasts"
TOAST_TIMEOUT_MS = 5000

# Paths that require an admin session (without BASE_URL prefix)
ADMIN_PREFIXES = ("/admin", "/api/admin")
PUBLIC_ADMIN_PATHS = {"/admin/login"}

# CSRF configuration
CSRF_TOKEN_NAME = "csrf_token"
CSRF_HEADER_NAME = "X-CSRF-Token"
CSRF_COOKIE_NAME = "gallery_csrf"

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Dates on pages are shown in the school's timezone
DISPLAY_TIMEZONE = os.environ.get("DISPLAY_TIMEZONE", "Asia/Jakarta")

# Set when served over HTTPS
COOKIE_SECURE = os.environ.get("COOKIE_SECURE", "").lower() in ("1", "true", "yes")
