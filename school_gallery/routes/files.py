"""Object serving for the local storage backend.

Serves ``/storage/<bucket>/<name>`` with optional ``width``/``height`` resize
transforms, the URL shape the templates use for thumbnails.
"""
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Response
from fastapi.responses import FileResponse
from starlette.concurrency import run_in_threadpool

from ..infrastructure.backend import is_supabase
from ..infrastructure.services.media import ImageTooLargeError, resize_image_bytes, sniff_image_type
from ..infrastructure.storage import LocalStorage, StorageError, get_storage

router = APIRouter()

CACHE_HEADERS = {"Cache-Control": "public, max-age=3600"}


@router.get("/storage/{bucket}/{name}")
async def serve_object(
    bucket: str,
    name: str,
    width: Optional[int] = Query(None, ge=1),
    height: Optional[int] = Query(None, ge=1)
):
    """Serve a stored photo, resized when width/height are given."""
    if is_supabase():
        # Supabase serves its own public URLs
        raise HTTPException(status_code=404, detail="Not found")

    storage = get_storage()
    if not isinstance(storage, LocalStorage) or bucket != storage.bucket:
        raise HTTPException(status_code=404, detail="Not found")

    if not storage.exists(name):
        raise HTTPException(status_code=404, detail="Not found")

    if not width and not height:
        return FileResponse(storage.get_path(name), headers=CACHE_HEADERS)

    try:
        data = await storage.download(name)
    except StorageError:
        raise HTTPException(status_code=404, detail="Not found")

    try:
        content, media_type = await run_in_threadpool(resize_image_bytes, data, width, height)
    except ImageTooLargeError:
        raise HTTPException(status_code=422, detail="Image too large to transform")
    except ValueError:
        # Not an image Pillow can read; serve it untouched
        return Response(content=data, media_type=sniff_image_type(data) or "application/octet-stream",
                        headers=CACHE_HEADERS)

    return Response(content=content, media_type=media_type, headers=CACHE_HEADERS)
