"""Backend selection.

``open_backend`` yields the handle repositories are built from: a SQLite
connection for the local backend, a Supabase client for the supabase backend.
"""
from contextlib import contextmanager
from typing import Iterator, Optional

from .. import config
from ..database import create_connection
from .local_auth import LocalAuthProvider
from .repositories import AlbumRepository, PhotoRepository, SessionRepository, UserRepository
from .storage import StorageInterface, get_storage


def is_supabase() -> bool:
    return config.GALLERY_BACKEND == "supabase"


@contextmanager
def open_backend(access_token: Optional[str] = None) -> Iterator:
    """Yield a backend handle for one request.

    Args:
        access_token: Admin session token. On Supabase, requests then run as
            that admin; the local backend ignores it.
    """
    if is_supabase():
        from .supabase import get_supabase_client
        yield get_supabase_client(access_token)
        return

    db = create_connection()
    try:
        yield db
    finally:
        db.close()


def album_repository(db):
    if is_supabase():
        from .supabase import SupabaseAlbumRepository
        return SupabaseAlbumRepository(db)
    return AlbumRepository(db)


def photo_repository(db):
    if is_supabase():
        from .supabase import SupabasePhotoRepository
        return SupabasePhotoRepository(db)
    return PhotoRepository(db)


def storage_for(db) -> StorageInterface:
    return get_storage(db if is_supabase() else None)


def auth_provider(db):
    if is_supabase():
        from .supabase import SupabaseAuthProvider
        return SupabaseAuthProvider(db)
    return LocalAuthProvider(UserRepository(db), SessionRepository(db))
