"""Base repository protocol and utilities.

This module defines the interface that the SQLite repositories share.
"""
from typing import Protocol
import sqlite3


class BackendError(Exception):
    """A data or auth operation failed in the backend.

    The message is the backend's own and is shown to admins as-is.
    """
    pass


class ConnectionProtocol(Protocol):
    """Protocol for database connection."""

    def execute(self, sql: str, parameters: tuple = ...) -> sqlite3.Cursor: ...
    def commit(self) -> None: ...


class Repository:
    """Base repository class.

    Example:
        class PhotoRepository(Repository):
            def get_by_id(self, photo_id: str) -> dict | None:
                cursor = self._execute("SELECT * FROM photos WHERE id = ?", (photo_id,))
                return self._row_to_dict(cursor.fetchone())
    """

    def __init__(self, connection: ConnectionProtocol):
        """Initialize repository with database connection.

        Args:
            connection: Database connection (sqlite3.Connection or compatible)
        """
        self._conn = connection

    def _execute(self, sql: str, parameters: tuple = ()) -> sqlite3.Cursor:
        """Execute SQL query with parameters.

        Raises:
            BackendError: If SQLite rejects the statement
        """
        try:
            return self._conn.execute(sql, parameters)
        except sqlite3.Error as e:
            raise BackendError(str(e)) from e

    def _execute_many(self, sql: str, parameters_list: list) -> sqlite3.Cursor:
        """Execute SQL query multiple times."""
        try:
            return self._conn.executemany(sql, parameters_list)
        except sqlite3.Error as e:
            raise BackendError(str(e)) from e

    def _commit(self) -> None:
        """Commit current transaction."""
        self._conn.commit()

    def _row_to_dict(self, row: sqlite3.Row | None) -> dict | None:
        """Convert sqlite3.Row to dictionary."""
        return dict(row) if row else None
