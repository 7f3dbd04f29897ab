"""SQLite repositories used by the local backend.

Each entity has its own repository. The Supabase backend provides classes with
the same method names in ``infrastructure.supabase``.
"""
from .base import Repository, ConnectionProtocol, BackendError
from .album_repository import AlbumRepository
from .photo_repository import PhotoRepository
from .user_repository import UserRepository
from .session_repository import SessionRepository

__all__ = [
    "Repository",
    "ConnectionProtocol",
    "BackendError",
    "AlbumRepository",
    "PhotoRepository",
    "UserRepository",
    "SessionRepository",
]
