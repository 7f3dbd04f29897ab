"""Storage abstraction layer for the photo bucket.

Supports two backends: local filesystem and Supabase Storage.
"""
from .base import (
    StorageInterface, StorageError, FileNotFoundError, UploadError,
    DownloadError, DeleteError, StorageConfig, object_name_from_url
)
from .local_storage import LocalStorage
from .factory import get_storage, get_storage_from_config, get_storage_config, reset_storage

__all__ = [
    "StorageInterface",
    "StorageError",
    "FileNotFoundError",
    "UploadError",
    "DownloadError",
    "DeleteError",
    "StorageConfig",
    "object_name_from_url",
    "LocalStorage",
    "get_storage",
    "get_storage_from_config",
    "get_storage_config",
    "reset_storage",
]
