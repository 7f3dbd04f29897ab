"""Album and photo repositories over the Supabase client.

Method names and return shapes match the SQLite repositories so services do
not care which backend is configured.
"""
from typing import Optional, List, Dict

from postgrest.exceptions import APIError
from supabase import Client

from ..repositories.base import BackendError


# Postgres invalid_text_representation, raised for an id that is not a UUID
INVALID_ID_CODE = "22P02"


def _run(query):
    """Execute a query builder, translating client errors to BackendError."""
    try:
        return query.execute()
    except APIError as e:
        raise BackendError(e.message or str(e)) from e


def _run_by_id(query):
    """Like ``_run`` for queries filtered by id; a malformed id matches nothing (None)."""
    try:
        return query.execute()
    except APIError as e:
        if e.code == INVALID_ID_CODE:
            return None
        raise BackendError(e.message or str(e)) from e


class SupabaseRepository:
    """Base class holding the client."""

    table_name: str = ""

    def __init__(self, client: Client):
        self._client = client

    def _table(self):
        return self._client.table(self.table_name)


class SupabaseAlbumRepository(SupabaseRepository):
    """Albums table plus the get_albums_with_photo_count RPC."""

    table_name = "albums"
    UPDATABLE_FIELDS = {"title", "description", "cover_image_url"}

    def list_with_photo_count(self) -> List[Dict]:
        try:
            response = self._client.rpc("get_albums_with_photo_count").execute()
        except APIError as e:
            raise BackendError(e.message or str(e)) from e
        return list(response.data or [])

    def get_by_id(self, album_id: str) -> Optional[Dict]:
        response = _run_by_id(self._table().select("*").eq("id", album_id).limit(1))
        return response.data[0] if response and response.data else None

    def create(self, title: str, description: Optional[str] = None) -> Dict:
        response = _run(self._table().insert({"title": title, "description": description}))
        if not response.data:
            raise BackendError("Album was not returned after insert")
        return response.data[0]

    def update(self, album_id: str, **fields) -> bool:
        updates = {k: v for k, v in fields.items() if k in self.UPDATABLE_FIELDS}
        if not updates:
            return False
        response = _run_by_id(self._table().update(updates).eq("id", album_id))
        return bool(response and response.data)

    def delete(self, album_id: str) -> bool:
        response = _run_by_id(self._table().delete().eq("id", album_id))
        return bool(response and response.data)

    def count(self) -> int:
        response = _run(self._table().select("*", count="exact", head=True))
        return response.count or 0


class SupabasePhotoRepository(SupabaseRepository):
    """Photos table."""

    table_name = "photos"

    def list_for_album(self, album_id: str) -> List[Dict]:
        response = _run_by_id(
            self._table().select("*").eq("album_id", album_id).order("created_at", desc=False)
        )
        return list(response.data or []) if response else []

    def get_by_id(self, photo_id: str) -> Optional[Dict]:
        response = _run_by_id(self._table().select("*").eq("id", photo_id).limit(1))
        return response.data[0] if response and response.data else None

    def image_urls_for_album(self, album_id: str) -> List[str]:
        response = _run_by_id(self._table().select("image_url").eq("album_id", album_id))
        return [row["image_url"] for row in response.data or []] if response else []

    def create_many(self, rows: List[Dict]) -> List[Dict]:
        if not rows:
            return []
        response = _run(self._table().insert(rows))
        return list(response.data or [])

    def update_caption(self, photo_id: str, caption: Optional[str]) -> bool:
        response = _run_by_id(self._table().update({"caption": caption}).eq("id", photo_id))
        return bool(response and response.data)

    def delete(self, photo_id: str) -> bool:
        response = _run_by_id(self._table().delete().eq("id", photo_id))
        return bool(response and response.data)

    def count(self) -> int:
        """Exact row count without transferring rows."""
        response = _run(self._table().select("*", count="exact", head=True))
        return response.count or 0
