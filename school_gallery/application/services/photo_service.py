"""Photo service - deleting photos, covers and captions."""
from typing import Dict, Optional

from fastapi import HTTPException

from ...infrastructure.repositories import BackendError
from ...infrastructure.storage import StorageError, StorageInterface, object_name_from_url
from ...logging_config import get_logger

logger = get_logger(__name__)

PHOTO_NOT_FOUND = "Foto tidak ditemukan."


class PhotoService:
    """Service for single-photo operations in the album editor."""

    def __init__(self, album_repository, photo_repository, storage: StorageInterface):
        self.album_repo = album_repository
        self.photo_repo = photo_repository
        self.storage = storage

    def _get_photo(self, photo_id: str) -> Dict:
        try:
            photo = self.photo_repo.get_by_id(photo_id)
        except BackendError as e:
            raise HTTPException(status_code=502, detail=f"Gagal memuat foto: {e}")
        if not photo:
            raise HTTPException(status_code=404, detail=PHOTO_NOT_FOUND)
        return photo

    async def delete_photo(self, photo_id: str) -> Dict:
        """Delete a photo object and row; reset the album cover if it was this photo.

        The stored object is removed first. If that fails the row is kept.
        """
        photo = self._get_photo(photo_id)

        name = object_name_from_url(photo["image_url"])
        if not name:
            raise HTTPException(status_code=400, detail="URL foto tidak valid.")

        try:
            await self.storage.delete(name)
        except StorageError as e:
            logger.error("Storage delete failed for %s: %s", name, e)
            raise HTTPException(status_code=502, detail=f"Gagal menghapus file dari storage: {e}")

        try:
            self.photo_repo.delete(photo_id)
        except BackendError as e:
            logger.error("Photo delete error for %s: %s", photo_id, e)
            raise HTTPException(status_code=502, detail=f"Gagal menghapus data foto: {e}")

        try:
            album = self.album_repo.get_by_id(photo["album_id"])
            if album and album.get("cover_image_url") == photo["image_url"]:
                self.album_repo.update(photo["album_id"], cover_image_url=None)
        except BackendError as e:
            logger.warning("Could not reset cover of album %s: %s", photo["album_id"], e)

        logger.info("Photo deleted: %s", photo_id)
        return photo

    def set_cover(self, album_id: str, photo_id: str) -> str:
        """Make a photo of the album its cover. Returns the cover URL."""
        photo = self._get_photo(photo_id)
        if photo["album_id"] != album_id:
            raise HTTPException(status_code=400, detail="Foto bukan bagian dari album ini.")

        try:
            updated = self.album_repo.update(album_id, cover_image_url=photo["image_url"])
        except BackendError as e:
            raise HTTPException(status_code=502, detail=f"Gagal mengatur foto sampul: {e}")
        if not updated:
            raise HTTPException(status_code=404, detail="Album tidak ditemukan.")

        return photo["image_url"]

    def update_caption(self, photo_id: str, caption: Optional[str]) -> None:
        caption = (caption or "").strip() or None
        try:
            updated = self.photo_repo.update_caption(photo_id, caption)
        except BackendError as e:
            raise HTTPException(status_code=502, detail=f"Gagal menyimpan caption: {e}")
        if not updated:
            raise HTTPException(status_code=404, detail=PHOTO_NOT_FOUND)
