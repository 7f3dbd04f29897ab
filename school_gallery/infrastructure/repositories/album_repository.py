"""Album repository - SQLite implementation for the local backend."""
import uuid
from datetime import datetime, timezone
from typing import Optional, List, Dict

from .base import Repository


def utc_now_iso() -> str:
    """Timestamp in the same ISO 8601 shape Postgres timestamptz returns."""
    return datetime.now(timezone.utc).isoformat()


class AlbumRepository(Repository):
    """Repository for albums.

    Photos reference albums with ON DELETE CASCADE, so deleting an album
    removes its photo rows as well.
    """

    UPDATABLE_FIELDS = {"title", "description", "cover_image_url"}

    def list_with_photo_count(self) -> List[Dict]:
        """All albums, newest first, each with its photo_count."""
        cursor = self._execute(
            """SELECT a.*,
                (SELECT COUNT(*) FROM photos p WHERE p.album_id = a.id) AS photo_count
               FROM albums a
               ORDER BY a.created_at DESC"""
        )
        return [dict(row) for row in cursor.fetchall()]

    def get_by_id(self, album_id: str) -> Optional[Dict]:
        cursor = self._execute("SELECT * FROM albums WHERE id = ?", (album_id,))
        return self._row_to_dict(cursor.fetchone())

    def create(self, title: str, description: Optional[str] = None) -> Dict:
        """Insert an album and return the stored row."""
        album_id = str(uuid.uuid4())
        self._execute(
            """INSERT INTO albums (id, title, description, cover_image_url, created_at)
               VALUES (?, ?, ?, NULL, ?)""",
            (album_id, title, description, utc_now_iso())
        )
        self._commit()
        return self.get_by_id(album_id)

    def update(self, album_id: str, **fields) -> bool:
        """Update album fields. Unknown field names are ignored."""
        updates = {k: v for k, v in fields.items() if k in self.UPDATABLE_FIELDS}
        if not updates:
            return False

        set_clause = ", ".join(f"{k} = ?" for k in updates)
        cursor = self._execute(
            f"UPDATE albums SET {set_clause} WHERE id = ?",
            tuple(updates.values()) + (album_id,)
        )
        self._commit()
        return cursor.rowcount > 0

    def delete(self, album_id: str) -> bool:
        """Delete album (photos deleted via CASCADE)."""
        cursor = self._execute("DELETE FROM albums WHERE id = ?", (album_id,))
        self._commit()
        return cursor.rowcount > 0

    def count(self) -> int:
        cursor = self._execute("SELECT COUNT(*) AS count FROM albums")
        return cursor.fetchone()["count"]
