"""Local filesystem storage implementation."""
from pathlib import Path
from typing import BinaryIO, Optional, Union
from urllib.parse import quote

import aiofiles

from .base import (
    StorageInterface,
    StorageConfig,
    FileNotFoundError as StorageFileNotFoundError,
    UploadError,
    DownloadError,
    DeleteError
)


class LocalStorage(StorageInterface):
    """Local filesystem storage backend.

    Stores objects in directory structure:
        base_path/
            <bucket>/
                <object name>

    Public URLs point at the ``/storage/<bucket>/<name>`` route.
    """

    def __init__(self, config: StorageConfig):
        if config.backend != "local":
            raise ValueError(f"LocalStorage requires backend='local', got '{config.backend}'")
        super().__init__(config)

        self.base_path = Path(config.base_path)
        (self.base_path / self.bucket).mkdir(parents=True, exist_ok=True)

    def _get_path(self, name: str) -> Path:
        return self.base_path / self.bucket / self._safe_name(name)

    async def upload(
        self,
        name: str,
        content: Union[bytes, BinaryIO],
        content_type: Optional[str] = None
    ) -> str:
        """Upload file to local filesystem.

        Existing objects are never replaced, as in a bucket without upsert.
        """
        file_path = self._get_path(name)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            async with aiofiles.open(file_path, "xb") as f:
                if isinstance(content, bytes):
                    await f.write(content)
                else:
                    while True:
                        chunk = content.read(8192)
                        if not chunk:
                            break
                        await f.write(chunk)
        except FileExistsError:
            raise UploadError("The resource already exists")
        except (IOError, OSError) as e:
            raise UploadError(f"Failed to upload {name}: {e}")

        return f"{self.bucket}/{file_path.name}"

    async def download(self, name: str) -> bytes:
        file_path = self._get_path(name)

        if not file_path.is_file():
            raise StorageFileNotFoundError(f"File not found: {name}")

        try:
            async with aiofiles.open(file_path, "rb") as f:
                return await f.read()
        except (IOError, OSError) as e:
            raise DownloadError(f"Failed to download {name}: {e}")

    async def delete(self, name: str) -> bool:
        file_path = self._get_path(name)

        if not file_path.exists():
            return False

        try:
            file_path.unlink()
            return True
        except (IOError, OSError) as e:
            raise DeleteError(f"Failed to delete {name}: {e}")

    def exists(self, name: str) -> bool:
        file_path = self._get_path(name)
        return file_path.exists() and file_path.is_file()

    def get_public_url(self, name: str) -> str:
        return f"{self.config.public_prefix}/storage/{self.bucket}/{quote(self._safe_name(name))}"

    def get_path(self, name: str) -> Path:
        """Full filesystem path (used by the file-serving route)."""
        return self._get_path(name)
