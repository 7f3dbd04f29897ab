"""Abstract storage interface."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Union, Optional
from urllib.parse import urlparse, unquote


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class FileNotFoundError(StorageError):
    """File not found in storage."""
    pass


class UploadError(StorageError):
    """Failed to upload file."""
    pass


class DownloadError(StorageError):
    """Failed to download file."""
    pass


class DeleteError(StorageError):
    """Failed to delete file."""
    pass


@dataclass
class StorageConfig:
    """Storage configuration."""
    backend: str  # 'local' or 'supabase'
    bucket: str = "gallery"

    # Local storage settings
    base_path: Optional[Path] = None
    public_prefix: str = ""


def object_name_from_url(url: str | None) -> str:
    """Return the object name of a public URL: its last path segment.

    Query strings (image transforms) are ignored. Returns an empty string when
    the URL has no usable last segment.
    """
    if not url:
        return ""
    path = urlparse(url).path
    return unquote(path.rsplit("/", 1)[-1])


class StorageInterface(ABC):
    """Abstract interface for the photo bucket.

    Every photo is one object addressed by name inside a single bucket.

    Implementations:
    - LocalStorage: Filesystem directory per bucket
    - SupabaseStorage: Supabase Storage bucket with public URLs
    """

    def __init__(self, config: StorageConfig):
        self.config = config
        self.bucket = config.bucket

    @abstractmethod
    async def upload(
        self,
        name: str,
        content: Union[bytes, BinaryIO],
        content_type: Optional[str] = None
    ) -> str:
        """Upload an object to the bucket.

        Args:
            name: Object name inside the bucket
            content: File content as bytes or file-like object
            content_type: MIME type of the file

        Returns:
            Storage key of the uploaded object

        Raises:
            UploadError: If upload fails
        """
        pass

    @abstractmethod
    async def download(self, name: str) -> bytes:
        """Download an object.

        Raises:
            FileNotFoundError: If object doesn't exist
            DownloadError: If download fails
        """
        pass

    @abstractmethod
    async def delete(self, name: str) -> bool:
        """Delete an object.

        Returns:
            True if deleted, False if didn't exist

        Raises:
            DeleteError: If deletion fails for other reasons
        """
        pass

    @abstractmethod
    def exists(self, name: str) -> bool:
        """Check if an object exists."""
        pass

    @abstractmethod
    def get_public_url(self, name: str) -> str:
        """Public URL under which browsers fetch the object."""
        pass

    async def delete_batch(self, names: list[str]) -> list[bool]:
        """Delete multiple objects.

        Returns:
            List of deletion results
        """
        results = []
        for name in names:
            result = await self.delete(name)
            results.append(result)
        return results

    @staticmethod
    def _safe_name(name: str) -> str:
        """Strip any directory part to prevent path traversal."""
        return Path(name).name
