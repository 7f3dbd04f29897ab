"""Supabase gateway - production backend for data, auth and storage."""
from .client import get_supabase_client, new_anonymous_client, reset_supabase_client
from .repositories import SupabaseAlbumRepository, SupabasePhotoRepository
from .auth import SupabaseAuthProvider

__all__ = [
    "get_supabase_client",
    "new_anonymous_client",
    "reset_supabase_client",
    "SupabaseAlbumRepository",
    "SupabasePhotoRepository",
    "SupabaseAuthProvider",
]
