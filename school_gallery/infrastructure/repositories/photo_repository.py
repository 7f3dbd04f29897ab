"""Photo repository - SQLite implementation for the local backend."""
import uuid
from typing import Optional, List, Dict

from .album_repository import utc_now_iso
from .base import Repository


class PhotoRepository(Repository):
    """Repository for photos belonging to albums."""

    def list_for_album(self, album_id: str) -> List[Dict]:
        """Photos of an album, oldest first."""
        cursor = self._execute(
            "SELECT * FROM photos WHERE album_id = ? ORDER BY created_at ASC, rowid ASC",
            (album_id,)
        )
        return [dict(row) for row in cursor.fetchall()]

    def get_by_id(self, photo_id: str) -> Optional[Dict]:
        cursor = self._execute("SELECT * FROM photos WHERE id = ?", (photo_id,))
        return self._row_to_dict(cursor.fetchone())

    def image_urls_for_album(self, album_id: str) -> List[str]:
        cursor = self._execute(
            "SELECT image_url FROM photos WHERE album_id = ?",
            (album_id,)
        )
        return [row["image_url"] for row in cursor.fetchall()]

    def create_many(self, rows: List[Dict]) -> List[Dict]:
        """Insert photo rows in one transaction.

        Args:
            rows: Dicts with ``album_id``, ``image_url`` and optional ``caption``

        Returns:
            The inserted rows, including generated ids and timestamps
        """
        created = []
        for row in rows:
            created.append({
                "id": str(uuid.uuid4()),
                "album_id": row["album_id"],
                "image_url": row["image_url"],
                "caption": row.get("caption"),
                "created_at": utc_now_iso(),
            })

        self._execute_many(
            """INSERT INTO photos (id, album_id, image_url, caption, created_at)
               VALUES (:id, :album_id, :image_url, :caption, :created_at)""",
            created
        )
        self._commit()
        return created

    def update_caption(self, photo_id: str, caption: Optional[str]) -> bool:
        cursor = self._execute(
            "UPDATE photos SET caption = ? WHERE id = ?",
            (caption, photo_id)
        )
        self._commit()
        return cursor.rowcount > 0

    def delete(self, photo_id: str) -> bool:
        cursor = self._execute("DELETE FROM photos WHERE id = ?", (photo_id,))
        self._commit()
        return cursor.rowcount > 0

    def count(self) -> int:
        cursor = self._execute("SELECT COUNT(*) AS count FROM photos")
        return cursor.fetchone()["count"]
