"""Authentication service - handles admin login/logout and session lookup."""
from typing import Optional

from fastapi import HTTPException

from ...infrastructure.repositories import BackendError
from ...logging_config import get_logger

logger = get_logger(__name__)


class AuthService:
    """Service for authentication operations.

    Responsibilities:
    - Email/password sign-in through the configured auth provider
    - Resolving a session token to the signed-in admin
    - Ending sessions
    """

    def __init__(self, auth_provider):
        self.provider = auth_provider

    def login(self, email: str, password: str) -> dict:
        """Sign in an admin.

        Returns:
            Dict with ``token`` (session token for the cookie) and ``user``

        Raises:
            HTTPException: 400 for missing fields, 401 with the provider's
                message when credentials are rejected
        """
        email = (email or "").strip()
        if not email or not password:
            raise HTTPException(status_code=400, detail="Email dan password wajib diisi.")

        try:
            session = self.provider.sign_in(email, password)
        except BackendError as e:
            logger.info("Failed login for %s: %s", email, e)
            raise HTTPException(status_code=401, detail=str(e))

        logger.info("Admin logged in: %s", session["user"]["email"])
        return session

    def current_user(self, token: Optional[str]) -> Optional[dict]:
        """Admin for a session token, or None if missing/invalid/expired."""
        if not token:
            return None
        try:
            return self.provider.get_user(token)
        except BackendError as e:
            logger.warning("Session lookup failed: %s", e)
            return None

    def logout(self, token: Optional[str]) -> None:
        """End a session.

        Raises:
            HTTPException: If the provider could not end the session
        """
        if not token:
            return
        try:
            self.provider.sign_out(token)
        except BackendError as e:
            logger.error("Logout failed: %s", e)
            raise HTTPException(status_code=502, detail=f"Gagal logout: {e}")
