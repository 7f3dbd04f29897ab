"""User repository - admin accounts for the local backend."""
import bcrypt

from .base import Repository


class UserRepository(Repository):
    """Repository for admin accounts.

    Examples:
        >>> repo = UserRepository(db)
        >>> user_id = repo.create("admin@sekolah.sch.id", "password123")
        >>> user = repo.authenticate("admin@sekolah.sch.id", "password123")
    """

    @staticmethod
    def _normalize_email(email: str) -> str:
        return email.lower().strip()

    @staticmethod
    def _hash_password(password: str) -> str:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")

    def get_by_id(self, user_id: int) -> dict | None:
        cursor = self._execute("SELECT * FROM users WHERE id = ?", (user_id,))
        return self._row_to_dict(cursor.fetchone())

    def get_by_email(self, email: str) -> dict | None:
        """Get user by email (case-insensitive)."""
        cursor = self._execute(
            "SELECT * FROM users WHERE email = ?",
            (self._normalize_email(email),)
        )
        return self._row_to_dict(cursor.fetchone())

    def create(self, email: str, password: str) -> int:
        """Create new admin account.

        Args:
            email: Unique login email
            password: Plain text password (will be hashed)

        Returns:
            New user ID
        """
        cursor = self._execute(
            "INSERT INTO users (email, password_hash) VALUES (?, ?)",
            (self._normalize_email(email), self._hash_password(password))
        )
        self._commit()
        return cursor.lastrowid

    def update_password(self, user_id: int, new_password: str) -> bool:
        cursor = self._execute(
            "UPDATE users SET password_hash = ? WHERE id = ?",
            (self._hash_password(new_password), user_id)
        )
        self._commit()
        return cursor.rowcount > 0

    def delete(self, user_id: int) -> bool:
        """Delete user (sessions deleted via CASCADE)."""
        cursor = self._execute("DELETE FROM users WHERE id = ?", (user_id,))
        self._commit()
        return cursor.rowcount > 0

    def list_all(self) -> list[dict]:
        cursor = self._execute("SELECT id, email, created_at FROM users ORDER BY id")
        return [dict(row) for row in cursor.fetchall()]

    def authenticate(self, email: str, password: str) -> dict | None:
        """Return the user if the password matches, otherwise None."""
        user = self.get_by_email(email)
        if not user:
            return None
        if not bcrypt.checkpw(password.encode("utf-8"), user["password_hash"].encode("utf-8")):
            return None
        return user
