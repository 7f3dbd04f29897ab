"""Admin panel routes - dashboard, album editor and the JSON API used by its scripts.

HTML form routes redirect back with a toast. JSON routes return the result
or ``{"detail": ...}`` with the error status.
"""
from typing import List, Optional

from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import RedirectResponse

from ..config import ROOT_PATH
from ..dependencies import get_access_token, require_user
from ..infrastructure.backend import open_backend
from ..schemas import CaptionInput, CoverInput, Photo, UploadResponse
from ..templating import render
from ..toasts import push_toast
from .deps import get_album_service, get_photo_service, get_upload_service

router = APIRouter()


def _redirect(request: Request, path: str, message: Optional[str] = None, type: str = "info"):
    response = RedirectResponse(url=f"{ROOT_PATH}{path}", status_code=303)
    if message:
        push_toast(request, response, message, type)
    return response


def _captions_from_form(form) -> dict:
    """``caption[<photo id>]`` fields -> {photo id: caption}."""
    captions = {}
    for key, value in form.multi_items():
        if key.startswith("caption[") and key.endswith("]") and isinstance(value, str):
            captions[key[len("caption["):-1]] = value
    return captions


# ============================================================================
# Pages
# ============================================================================

@router.get("/admin")
def dashboard(request: Request):
    """Dashboard with totals and the album table."""
    require_user(request)

    with open_backend(get_access_token(request)) as db:
        stats = get_album_service(db).dashboard_stats()

    return render(request, "admin_dashboard.html", stats, errors=stats["errors"])


@router.get("/admin/album/new")
def new_album_page(request: Request):
    require_user(request)
    return render(request, "admin_album_editor.html", {
        "album": {"title": "", "description": ""},
        "photos": [],
        "is_new": True,
    })


@router.post("/admin/album/new")
def create_album(request: Request, title: str = Form(""), description: str = Form("")):
    require_user(request)

    with open_backend(get_access_token(request)) as db:
        try:
            album = get_album_service(db).create_album(title, description)
        except HTTPException as e:
            return render(request, "admin_album_editor.html", {
                "album": {"title": title, "description": description},
                "photos": [],
                "is_new": True,
            }, status_code=e.status_code, errors=[e.detail])

    return _redirect(request, f"/admin/album/{album['id']}", "Album berhasil dibuat.", "success")


@router.get("/admin/album/{album_id}")
def edit_album_page(album_id: str, request: Request):
    """Album editor: details form, uploader and photo grid."""
    require_user(request)

    errors = []
    with open_backend(get_access_token(request)) as db:
        service = get_album_service(db)
        try:
            album = service.get_album(album_id)
        except HTTPException as e:
            message = e.detail if e.status_code != 404 else f"Gagal memuat data album: {e.detail}"
            return _redirect(request, "/admin", message, "error")

        try:
            photos = service.list_photos(album_id)
        except HTTPException as e:
            photos = []
            errors.append(e.detail)

    return render(request, "admin_album_editor.html", {
        "album": album,
        "photos": photos,
        "is_new": False,
    }, errors=errors)


@router.post("/admin/album/{album_id}")
async def save_album(album_id: str, request: Request):
    """Save title, description and every caption in one submit."""
    require_user(request)
    form = await request.form()

    with open_backend(get_access_token(request)) as db:
        try:
            get_album_service(db).save_album(
                album_id,
                title=form.get("title", ""),
                description=form.get("description", ""),
                captions=_captions_from_form(form)
            )
        except HTTPException as e:
            return _redirect(request, f"/admin/album/{album_id}", e.detail, "error")

    return _redirect(request, f"/admin/album/{album_id}", "Perubahan berhasil disimpan.", "success")


@router.post("/admin/album/{album_id}/delete")
async def delete_album(album_id: str, request: Request):
    require_user(request)

    with open_backend(get_access_token(request)) as db:
        try:
            album, warnings = await get_album_service(db).delete_album(album_id)
        except HTTPException as e:
            return _redirect(request, "/admin", e.detail, "error")

    response = _redirect(request, "/admin")
    for warning in warnings:
        push_toast(request, response, warning, "error")
    push_toast(request, response, f"Album \"{album['title']}\" berhasil dihapus.", "success")
    return response


@router.post("/admin/album/{album_id}/photos")
async def upload_photos_form(album_id: str, request: Request, files: List[UploadFile] = File(default=[])):
    """Multi-file upload from the plain form (no-JS fallback)."""
    require_user(request)

    with open_backend(get_access_token(request)) as db:
        try:
            results = await get_upload_service(db).upload_batch(album_id, files)
        except HTTPException as e:
            return _redirect(request, f"/admin/album/{album_id}", f"Gagal mengunggah foto: {e.detail}", "error")

    response = _redirect(request, f"/admin/album/{album_id}")
    uploaded = sum(1 for r in results if r["status"] == "success")
    if uploaded:
        push_toast(request, response, f"{uploaded} foto berhasil diunggah.", "success")
    for result in results:
        if result["status"] == "error":
            push_toast(request, response, f"Gagal mengunggah foto: {result['filename']}: {result['error']}", "error")
    return response


@router.post("/admin/photo/{photo_id}/delete")
async def delete_photo_form(photo_id: str, request: Request, album_id: str = Form("")):
    require_user(request)
    back = f"/admin/album/{album_id}" if album_id else "/admin"

    with open_backend(get_access_token(request)) as db:
        try:
            await get_photo_service(db).delete_photo(photo_id)
        except HTTPException as e:
            return _redirect(request, back, e.detail, "error")

    return _redirect(request, back, "Foto berhasil dihapus.", "success")


@router.post("/admin/album/{album_id}/cover")
def set_cover_form(album_id: str, request: Request, photo_id: str = Form(...)):
    require_user(request)

    with open_backend(get_access_token(request)) as db:
        try:
            get_photo_service(db).set_cover(album_id, photo_id)
        except HTTPException as e:
            return _redirect(request, f"/admin/album/{album_id}", e.detail, "error")

    return _redirect(request, f"/admin/album/{album_id}", "Foto sampul berhasil diperbarui.", "success")


# ============================================================================
# JSON API
# ============================================================================

@router.post("/api/admin/albums/{album_id}/photos", response_model=UploadResponse)
async def api_upload_photos(album_id: str, request: Request, files: List[UploadFile] = File(...)):
    """Upload one or more photos; every file gets its own result."""
    require_user(request)

    with open_backend(get_access_token(request)) as db:
        results = await get_upload_service(db).upload_batch(album_id, files)

    uploaded = sum(1 for r in results if r["status"] == "success")
    return {"results": results, "uploaded": uploaded, "failed": len(results) - uploaded}


@router.delete("/api/admin/photos/{photo_id}", response_model=Photo)
async def api_delete_photo(photo_id: str, request: Request):
    """Delete a photo; returns the deleted row."""
    require_user(request)

    with open_backend(get_access_token(request)) as db:
        return await get_photo_service(db).delete_photo(photo_id)


@router.put("/api/admin/albums/{album_id}/cover")
def api_set_cover(album_id: str, data: CoverInput, request: Request):
    require_user(request)

    with open_backend(get_access_token(request)) as db:
        cover_url = get_photo_service(db).set_cover(album_id, data.photo_id)
    return {"cover_image_url": cover_url}


@router.put("/api/admin/photos/{photo_id}/caption")
def api_update_caption(photo_id: str, data: CaptionInput, request: Request):
    require_user(request)

    with open_backend(get_access_token(request)) as db:
        get_photo_service(db).update_caption(photo_id, data.caption)
    return {"status": "ok"}
