"""Shared dependencies for routes.

Factory functions building services over a backend handle from
``open_backend``.
"""
from ..application.services import AlbumService, AuthService, PhotoService, UploadService
from ..infrastructure.backend import album_repository, auth_provider, photo_repository, storage_for


def get_album_service(db) -> AlbumService:
    """Create AlbumService with repositories and storage."""
    return AlbumService(
        album_repository=album_repository(db),
        photo_repository=photo_repository(db),
        storage=storage_for(db)
    )


def get_photo_service(db) -> PhotoService:
    """Create PhotoService with repositories and storage."""
    return PhotoService(
        album_repository=album_repository(db),
        photo_repository=photo_repository(db),
        storage=storage_for(db)
    )


def get_upload_service(db) -> UploadService:
    """Create UploadService with repositories and storage."""
    return UploadService(
        album_repository=album_repository(db),
        photo_repository=photo_repository(db),
        storage=storage_for(db)
    )


def get_auth_service(db) -> AuthService:
    return AuthService(auth_provider(db))
