"""Supabase Storage implementation of the photo bucket."""
from typing import BinaryIO, Optional, Union

from supabase import Client, StorageException

from .base import (
    StorageInterface,
    StorageConfig,
    StorageError,
    FileNotFoundError as StorageFileNotFoundError,
    UploadError,
    DownloadError,
    DeleteError
)


class SupabaseStorage(StorageInterface):
    """Storage backend backed by a public Supabase Storage bucket."""

    def __init__(self, config: StorageConfig, client: Client):
        if config.backend != "supabase":
            raise ValueError(f"SupabaseStorage requires backend='supabase', got '{config.backend}'")
        super().__init__(config)
        self.client = client

    def _bucket(self):
        return self.client.storage.from_(self.bucket)

    async def upload(
        self,
        name: str,
        content: Union[bytes, BinaryIO],
        content_type: Optional[str] = None
    ) -> str:
        body = content if isinstance(content, bytes) else content.read()
        file_options = {"content-type": content_type} if content_type else None

        try:
            self._bucket().upload(self._safe_name(name), body, file_options)
        except StorageException as e:
            raise UploadError(_message(e))

        return f"{self.bucket}/{self._safe_name(name)}"

    async def download(self, name: str) -> bytes:
        try:
            return self._bucket().download(self._safe_name(name))
        except StorageException as e:
            message = _message(e)
            if "not found" in message.lower():
                raise StorageFileNotFoundError(f"File not found: {name}")
            raise DownloadError(message)

    async def delete(self, name: str) -> bool:
        results = await self.delete_batch([name])
        return results[0]

    async def delete_batch(self, names: list[str]) -> list[bool]:
        """Remove objects in a single request."""
        if not names:
            return []
        safe_names = [self._safe_name(n) for n in names]

        try:
            removed = self._bucket().remove(safe_names) or []
        except StorageException as e:
            raise DeleteError(_message(e))

        removed_names = {item.get("name") for item in removed if isinstance(item, dict)}
        return [n in removed_names for n in safe_names]

    def exists(self, name: str) -> bool:
        safe_name = self._safe_name(name)
        try:
            entries = self._bucket().list(options={"search": safe_name})
        except StorageException as e:
            raise StorageError(_message(e))
        return any(entry.get("name") == safe_name for entry in entries)

    def get_public_url(self, name: str) -> str:
        return self._bucket().get_public_url(self._safe_name(name)).rstrip("?")


def _message(error: Exception) -> str:
    """Best-effort human message from a storage client error."""
    if error.args and isinstance(error.args[0], dict):
        return str(error.args[0].get("message") or error.args[0])
    return str(getattr(error, "message", None) or error)
