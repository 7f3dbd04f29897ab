"""Application middleware."""
import secrets

from fastapi import Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware

from . import config
from .application.services import AuthService
from .infrastructure.backend import auth_provider, open_backend
from .logging_config import get_logger

logger = get_logger(__name__)


def _is_admin_path(path: str) -> bool:
    return any(path == p or path.startswith(p + "/") for p in config.ADMIN_PREFIXES)


def resolve_user(token: str):
    """Admin for a session token, or None."""
    with open_backend() as db:
        return AuthService(auth_provider(db)).current_user(token)


class AuthMiddleware(BaseHTTPMiddleware):
    """Middleware to check authentication on admin routes.

    Public pages pass through untouched. Admin pages without a valid session
    redirect to the login page; admin API calls get 401.
    """

    async def dispatch(self, request: Request, call_next):
        path = request.url.path

        if not _is_admin_path(path):
            return await call_next(request)

        # Check session cookie
        token = request.cookies.get(config.SESSION_COOKIE)
        if token:
            user = resolve_user(token)
            if user:
                # Valid session - attach admin to request state
                request.state.user = user
                request.state.access_token = token
                return await call_next(request)

        if path in config.PUBLIC_ADMIN_PATHS:
            return await call_next(request)

        if path.startswith("/api/"):
            return JSONResponse(status_code=401, content={"detail": "Not authenticated"})

        # No valid session - redirect to login (303 so form posts become GET)
        status_code = 302 if request.method == "GET" else 303
        return RedirectResponse(url=f"{config.ROOT_PATH}/admin/login", status_code=status_code)


class CSRFMiddleware(BaseHTTPMiddleware):
    """Middleware to protect against CSRF attacks."""

    # Methods that require CSRF protection
    PROTECTED_METHODS = {"POST", "PUT", "DELETE", "PATCH"}

    async def dispatch(self, request: Request, call_next):
        # Generate CSRF token if not present
        csrf_token = request.cookies.get(config.CSRF_COOKIE_NAME)
        if not csrf_token:
            csrf_token = secrets.token_urlsafe(32)

        # Store token in request state for templates
        request.state.csrf_token = csrf_token

        if request.method in self.PROTECTED_METHODS and request.url.path not in config.PUBLIC_ADMIN_PATHS:
            # Header for fetch() calls, query param for plain HTML forms
            request_token = request.headers.get(config.CSRF_HEADER_NAME)
            if not request_token:
                request_token = request.query_params.get(config.CSRF_TOKEN_NAME)

            stored_token = request.cookies.get(config.CSRF_COOKIE_NAME)
            if not stored_token or not request_token or not secrets.compare_digest(stored_token.encode(), request_token.encode()):
                logger.warning("CSRF check failed for %s %s", request.method, request.url.path)
                return JSONResponse(
                    status_code=403,
                    content={"detail": "CSRF token missing or invalid"}
                )

        response = await call_next(request)
        return self._set_csrf_cookie(response, csrf_token)

    def _set_csrf_cookie(self, response, token: str):
        """Set CSRF cookie on response."""
        response.set_cookie(
            key=config.CSRF_COOKIE_NAME,
            value=token,
            httponly=False,  # JavaScript needs to read this
            samesite="lax",
            secure=config.COOKIE_SECURE,
            max_age=60 * 60 * 24  # 24 hours
        )
        return response
