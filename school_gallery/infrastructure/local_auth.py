"""Email/password auth for the local backend."""
from typing import Optional

from .. import config
from .repositories import BackendError, SessionRepository, UserRepository

# Same wording Supabase Auth uses, so admins see one message on both backends
INVALID_CREDENTIALS = "Invalid login credentials"


class LocalAuthProvider:
    """Sign-in against the users table with bcrypt hashes and DB sessions."""

    def __init__(self, user_repository: UserRepository, session_repository: SessionRepository):
        self.user_repo = user_repository
        self.session_repo = session_repository

    def sign_in(self, email: str, password: str) -> dict:
        """Sign in and return ``{"token", "user"}``.

        Raises:
            BackendError: If the email is unknown or the password is wrong
        """
        user = self.user_repo.authenticate(email, password)
        if not user:
            raise BackendError(INVALID_CREDENTIALS)

        token = self.session_repo.create(user["id"], expires_hours=config.SESSION_MAX_AGE // 3600)
        return {"token": token, "user": {"id": user["id"], "email": user["email"]}}

    def get_user(self, token: str) -> Optional[dict]:
        session = self.session_repo.get_valid(token)
        if not session:
            return None
        return {"id": session["user_id"], "email": session["email"]}

    def sign_out(self, token: str) -> None:
        self.session_repo.delete(token)
