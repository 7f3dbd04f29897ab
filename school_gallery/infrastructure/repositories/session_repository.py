"""Session repository - login sessions for the local backend.

Sessions are random tokens stored in the admin's cookie.
"""
import secrets

from .base import Repository


class SessionRepository(Repository):
    """Repository for session management.

    Examples:
        >>> repo = SessionRepository(db)
        >>> session_id = repo.create(1, expires_hours=24)
        >>> session = repo.get_valid(session_id)
        >>> repo.delete(session_id)  # logout
    """

    def create(self, user_id: int, expires_hours: int = 24 * 7) -> str:
        """Create new session for user and return its token."""
        session_id = secrets.token_urlsafe(32)

        self._execute(
            """INSERT INTO sessions (id, user_id, expires_at)
               VALUES (?, ?, datetime('now', '+' || ? || ' hours'))""",
            (session_id, user_id, expires_hours)
        )
        self._commit()
        return session_id

    def get_valid(self, session_id: str) -> dict | None:
        """Get session joined with its user if not expired."""
        cursor = self._execute(
            """SELECT s.*, u.email
               FROM sessions s
               JOIN users u ON s.user_id = u.id
               WHERE s.id = ? AND s.expires_at > datetime('now')""",
            (session_id,)
        )
        return self._row_to_dict(cursor.fetchone())

    def delete(self, session_id: str) -> bool:
        cursor = self._execute("DELETE FROM sessions WHERE id = ?", (session_id,))
        self._commit()
        return cursor.rowcount > 0

    def delete_all_for_user(self, user_id: int) -> int:
        """Delete all sessions for user (force logout everywhere)."""
        cursor = self._execute("DELETE FROM sessions WHERE user_id = ?", (user_id,))
        self._commit()
        return cursor.rowcount
