"""Factory for creating the storage backend."""
from typing import Optional

from ... import config
from .base import StorageConfig, StorageInterface
from .local_storage import LocalStorage


# Singleton instance
_storage_instance: Optional[StorageInterface] = None


def get_storage_config() -> StorageConfig:
    """Build storage configuration from application config.

    - GALLERY_BACKEND: 'local' (default) or 'supabase'
    - STORAGE_BUCKET: bucket name (default: gallery)
    - STORAGE_BASE_PATH: root directory for local storage
    - SUPABASE_URL / SUPABASE_KEY: project credentials for Supabase
    """
    backend = config.GALLERY_BACKEND

    if backend == "local":
        return StorageConfig(
            backend="local",
            bucket=config.STORAGE_BUCKET,
            base_path=config.STORAGE_BASE_PATH,
            public_prefix=config.ROOT_PATH
        )

    elif backend == "supabase":
        return StorageConfig(
            backend="supabase",
            bucket=config.STORAGE_BUCKET
        )

    else:
        raise ValueError(f"Unknown storage backend: {backend}")


def get_storage_from_config(storage_config: StorageConfig) -> StorageInterface:
    """Create storage backend from configuration."""
    if storage_config.backend == "local":
        return LocalStorage(storage_config)

    elif storage_config.backend == "supabase":
        from ..supabase.client import get_supabase_client
        from .supabase_storage import SupabaseStorage
        return SupabaseStorage(storage_config, get_supabase_client())

    else:
        raise ValueError(f"Unknown storage backend: {storage_config.backend}")


def get_storage(client=None) -> StorageInterface:
    """Get the storage backend.

    The local backend is a cached singleton. For Supabase, passing a client
    bound to an admin's token returns storage that acts as that admin;
    without one the shared anonymous client is used.
    """
    global _storage_instance

    storage_config = get_storage_config()
    if storage_config.backend == "supabase" and client is not None:
        from .supabase_storage import SupabaseStorage
        return SupabaseStorage(storage_config, client)

    if _storage_instance is None:
        _storage_instance = get_storage_from_config(storage_config)

    return _storage_instance


def reset_storage():
    """Reset storage singleton (useful for testing)."""
    global _storage_instance
    _storage_instance = None
