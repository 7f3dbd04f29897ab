"""Upload service - validates photo files and stores them in an album.

Each file becomes one storage object and one photo row. In a multi-file
upload every file gets its own result, so one bad file does not fail the rest.
"""
import re
import time
from typing import Dict, List, Optional

from fastapi import HTTPException, UploadFile

from ... import config
from ...infrastructure.repositories import BackendError
from ...infrastructure.services.media import ImageTooLargeError, image_size, sniff_image_type
from ...infrastructure.storage import StorageError, StorageInterface
from ...logging_config import get_logger

logger = get_logger(__name__)

# Anything else would need escaping in a public URL
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def object_name_for(filename: str, now_ms: Optional[int] = None) -> str:
    """Storage object name: ``<epoch ms>-<filename>``.

    Whitespace and any character outside ``[A-Za-z0-9._-]`` become ``_``.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    # Directory parts from the browser are never part of the name
    base = filename.replace("\\", "/").rsplit("/", 1)[-1]
    return f"{now_ms}-{_UNSAFE_CHARS.sub('_', base)}"


class UploadService:
    """Service for handling photo uploads.

    Responsibilities:
    - File validation (declared type, size, magic bytes, pixel count)
    - Storage upload and public URL
    - Photo record creation
    """

    def __init__(
        self,
        album_repository,
        photo_repository,
        storage: StorageInterface,
        max_size: Optional[int] = None,
        allowed_types: Optional[set] = None
    ):
        self.album_repo = album_repository
        self.photo_repo = photo_repository
        self.storage = storage
        self.max_size = max_size if max_size is not None else config.MAX_UPLOAD_SIZE
        self.allowed_types = allowed_types or config.ALLOWED_IMAGE_TYPES

    def validate(self, filename: Optional[str], content_type: Optional[str], content: bytes) -> str:
        """Validate an uploaded file.

        Returns:
            The MIME type detected from the file content

        Raises:
            HTTPException: If the file is rejected
        """
        if not filename:
            raise HTTPException(status_code=400, detail="Nama file tidak boleh kosong.")

        if content_type not in self.allowed_types:
            raise HTTPException(
                status_code=400,
                detail="Hanya file gambar (jpg, png, gif, webp) yang diperbolehkan."
            )

        if not content:
            raise HTTPException(status_code=400, detail="File kosong.")

        if len(content) > self.max_size:
            limit_mb = self.max_size / (1024 * 1024)
            raise HTTPException(
                status_code=413,
                detail=f"Ukuran file melebihi batas {limit_mb:g} MB."
            )

        # Protects against non-images renamed to .jpg
        detected = sniff_image_type(content)
        if detected is None or detected not in self.allowed_types:
            raise HTTPException(status_code=400, detail="Isi file bukan gambar yang valid.")

        try:
            image_size(content)
        except ImageTooLargeError:
            raise HTTPException(status_code=400, detail="Resolusi gambar terlalu besar.")
        except ValueError:
            raise HTTPException(status_code=400, detail="Isi file bukan gambar yang valid.")

        return detected

    def _require_album(self, album_id: str) -> Dict:
        try:
            album = self.album_repo.get_by_id(album_id)
        except BackendError as e:
            raise HTTPException(status_code=502, detail=f"Gagal memuat data album: {e}")
        if not album:
            raise HTTPException(status_code=404, detail="Album tidak ditemukan.")
        return album

    async def _store(self, album_id: str, filename: str, content_type: str, content: bytes) -> Dict:
        """Validate, upload and record one file (album already checked)."""
        mime = self.validate(filename, content_type, content)
        name = object_name_for(filename)

        try:
            await self.storage.upload(name, content, mime)
        except StorageError as e:
            logger.error("Upload of %s failed: %s", name, e)
            raise HTTPException(status_code=502, detail=f"Gagal mengunggah foto: {e}")

        image_url = self.storage.get_public_url(name)

        try:
            created = self.photo_repo.create_many([{"album_id": album_id, "image_url": image_url}])
        except BackendError as e:
            logger.error("Photo insert failed for %s: %s", name, e)
            # Do not leave an object no row points to
            try:
                await self.storage.delete(name)
            except StorageError as cleanup_error:
                logger.warning("Could not remove orphaned object %s: %s", name, cleanup_error)
            raise HTTPException(status_code=502, detail=f"Gagal mengunggah foto: {e}")

        if not created:
            raise HTTPException(status_code=502, detail="Gagal mengunggah foto: data foto tidak tersimpan.")
        return created[0]

    async def upload_photo(self, album_id: str, filename: str, content_type: str, content: bytes) -> Dict:
        """Upload a single photo into an album.

        Returns:
            The created photo row

        Raises:
            HTTPException: On validation, storage or database errors
        """
        self._require_album(album_id)
        photo = await self._store(album_id, filename, content_type, content)
        logger.info("Photo uploaded to album %s: %s", album_id, photo["image_url"])
        return photo

    async def upload_batch(self, album_id: str, files: List[UploadFile]) -> List[Dict]:
        """Upload several files into an album.

        Returns:
            One result per file, in order:
            ``{"filename", "status": "success"|"error", "photo", "error"}``

        Raises:
            HTTPException: If there are no files or the album does not exist
        """
        if not files:
            raise HTTPException(status_code=400, detail="Tidak ada file yang dipilih.")

        self._require_album(album_id)

        results = []
        for file in files:
            filename = file.filename or ""
            content = await file.read()
            try:
                photo = await self._store(album_id, filename, file.content_type, content)
            except HTTPException as e:
                results.append({"filename": filename, "status": "error", "photo": None, "error": e.detail})
                continue
            results.append({"filename": filename, "status": "success", "photo": photo, "error": None})

        succeeded = sum(1 for r in results if r["status"] == "success")
        logger.info("Batch upload to album %s: %d of %d succeeded", album_id, succeeded, len(results))
        return results
