"""Album service - album listing, editing and deletion."""
from typing import Dict, List, Optional

from fastapi import HTTPException

from ...infrastructure.repositories import BackendError
from ...infrastructure.storage import StorageError, StorageInterface, object_name_from_url
from ...logging_config import get_logger

logger = get_logger(__name__)

ALBUM_NOT_FOUND = "Album tidak ditemukan."
TITLE_REQUIRED = "Judul album tidak boleh kosong."
SAVE_FAILED = "Gagal menyimpan perubahan."


def _clean(text: Optional[str]) -> Optional[str]:
    """Strip text; blank becomes None."""
    if text is None:
        return None
    text = text.strip()
    return text or None


class AlbumService:
    """Service for managing albums.

    Responsibilities:
    - List albums with photo counts (public home and admin dashboard)
    - Create and update albums, including photo captions
    - Delete albums together with their stored photo objects
    """

    def __init__(self, album_repository, photo_repository, storage: StorageInterface):
        self.album_repo = album_repository
        self.photo_repo = photo_repository
        self.storage = storage

    # ========================================================================
    # Reading
    # ========================================================================

    def list_albums(self) -> List[Dict]:
        """Albums with photo_count, newest first."""
        try:
            return self.album_repo.list_with_photo_count()
        except BackendError as e:
            logger.error("Error fetching albums: %s", e)
            raise HTTPException(status_code=502, detail=f"Gagal memuat album: {e}")

    def get_album(self, album_id: str) -> Dict:
        try:
            album = self.album_repo.get_by_id(album_id)
        except BackendError as e:
            logger.error("Error fetching album %s: %s", album_id, e)
            raise HTTPException(status_code=502, detail=f"Gagal memuat data album: {e}")

        if not album:
            raise HTTPException(status_code=404, detail=ALBUM_NOT_FOUND)
        return album

    def get_album_with_photos(self, album_id: str) -> tuple[Dict, List[Dict]]:
        """Album and its photos in upload order."""
        album = self.get_album(album_id)
        return album, self.list_photos(album_id)

    def list_photos(self, album_id: str) -> List[Dict]:
        try:
            return self.photo_repo.list_for_album(album_id)
        except BackendError as e:
            logger.error("Error fetching photos of %s: %s", album_id, e)
            raise HTTPException(status_code=502, detail=f"Gagal memuat foto: {e}")

    def dashboard_stats(self) -> Dict:
        """Album table and totals for the admin dashboard.

        A failure in one of the two queries is reported in ``errors`` while
        the other result is still returned.
        """
        result = {"albums": [], "album_count": 0, "photo_count": 0, "errors": []}

        try:
            result["albums"] = self.album_repo.list_with_photo_count()
            result["album_count"] = len(result["albums"])
        except BackendError as e:
            logger.error("Error fetching albums for dashboard: %s", e)
            result["errors"].append(f"Gagal memuat album: {e}")

        try:
            result["photo_count"] = self.photo_repo.count() or 0
        except BackendError as e:
            logger.error("Error fetching photo count for dashboard: %s", e)
            result["errors"].append(f"Gagal menghitung total foto: {e}")

        return result

    # ========================================================================
    # Writing
    # ========================================================================

    def create_album(self, title: str, description: Optional[str] = None) -> Dict:
        title = (title or "").strip()
        if not title:
            raise HTTPException(status_code=400, detail=TITLE_REQUIRED)

        try:
            album = self.album_repo.create(title=title, description=_clean(description))
        except BackendError as e:
            logger.error("Album create error: %s", e)
            raise HTTPException(status_code=502, detail=f"Gagal membuat album: {e}")

        logger.info("Album created: %s (%s)", album["id"], title)
        return album

    def save_album(
        self,
        album_id: str,
        title: str,
        description: Optional[str] = None,
        captions: Optional[Dict[str, str]] = None
    ) -> None:
        """Save album details and every photo caption.

        All updates are attempted; if any of them fails a single error is
        raised afterwards.
        """
        title = (title or "").strip()
        if not title:
            raise HTTPException(status_code=400, detail=TITLE_REQUIRED)

        failed = False
        try:
            self.album_repo.update(album_id, title=title, description=_clean(description))
        except BackendError as e:
            logger.error("Album update error: %s", e)
            failed = True

        for photo_id, caption in (captions or {}).items():
            try:
                self.photo_repo.update_caption(photo_id, _clean(caption))
            except BackendError as e:
                logger.error("Caption update error for %s: %s", photo_id, e)
                failed = True

        if failed:
            raise HTTPException(status_code=502, detail=SAVE_FAILED)

    async def delete_album(self, album_id: str) -> tuple[Dict, List[str]]:
        """Delete album, its photo objects and (by cascade) its photo rows.

        Storage failures do not stop the deletion; they are returned as
        warnings.

        Returns:
            (deleted album, warnings)
        """
        album = self.get_album(album_id)

        try:
            urls = self.photo_repo.image_urls_for_album(album_id)
        except BackendError as e:
            raise HTTPException(status_code=502, detail=f"Gagal mendapatkan daftar foto: {e}")

        warnings = []
        names = [name for name in (object_name_from_url(u) for u in urls) if name]
        if names:
            try:
                await self.storage.delete_batch(names)
            except StorageError as e:
                logger.warning("Storage cleanup failed for album %s: %s", album_id, e)
                warnings.append(f"Gagal menghapus beberapa file: {e}")

        try:
            self.album_repo.delete(album_id)
        except BackendError as e:
            logger.error("Album delete error: %s", e)
            raise HTTPException(status_code=502, detail=f"Gagal menghapus album: {e}")

        logger.info("Album deleted: %s with %d photo(s)", album_id, len(names))
        return album, warnings
