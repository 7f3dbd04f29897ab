"""Supabase Auth provider."""
from typing import Callable, Optional

from supabase import AuthError, Client

from ..repositories.base import BackendError
from .client import new_anonymous_client


class SupabaseAuthProvider:
    """Email/password sign-in against Supabase Auth.

    The access token returned by Supabase is the session token stored in the
    admin's cookie.
    """

    def __init__(self, client: Client, client_factory: Callable[[], Client] = new_anonymous_client):
        self._client = client
        self._client_factory = client_factory

    def sign_in(self, email: str, password: str) -> dict:
        """Sign in and return ``{"token", "user"}``.

        Raises:
            BackendError: With Supabase's message when credentials are rejected
        """
        # A signed-in client switches its own requests to the user, so never
        # sign in on the shared client
        client = self._client_factory()
        try:
            response = client.auth.sign_in_with_password({"email": email, "password": password})
        except AuthError as e:
            raise BackendError(e.message) from e

        if not response.session:
            raise BackendError("Invalid login credentials")

        return {
            "token": response.session.access_token,
            "user": {"id": response.user.id, "email": response.user.email},
        }

    def get_user(self, token: str) -> Optional[dict]:
        """Resolve a session token to its user, or None if invalid/expired."""
        try:
            response = self._client.auth.get_user(token)
        except AuthError:
            return None

        if not response or not response.user:
            return None
        return {"id": response.user.id, "email": response.user.email}

    def sign_out(self, token: str) -> None:
        """Revoke the session on the Supabase side (logout with the user's JWT)."""
        try:
            self._client.auth.admin.sign_out(token)
        except AuthError as e:
            raise BackendError(e.message) from e
