"""Application services - business logic layer."""

from .album_service import AlbumService
from .photo_service import PhotoService
from .upload_service import UploadService, object_name_for
from .auth_service import AuthService

__all__ = [
    "AlbumService",
    "PhotoService",
    "UploadService",
    "object_name_for",
    "AuthService",
]
