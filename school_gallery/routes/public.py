"""Public gallery routes - home page, album pages and read-only JSON API."""
from typing import List

from fastapi import APIRouter, HTTPException, Request

from ..infrastructure.backend import open_backend
from ..schemas import Album, AlbumWithPhotos
from ..templating import render
from .deps import get_album_service

router = APIRouter()


@router.get("/")
def home(request: Request):
    """Home page with the album grid."""
    errors = []
    albums = []
    with open_backend() as db:
        try:
            albums = get_album_service(db).list_albums()
        except HTTPException as e:
            errors.append(e.detail)

    return render(request, "home.html", {"albums": albums}, errors=errors)


@router.get("/gallery/{album_id}")
def album_page(album_id: str, request: Request):
    """Album detail page with photo grid and lightbox."""
    with open_backend() as db:
        try:
            album, photos = get_album_service(db).get_album_with_photos(album_id)
        except HTTPException as e:
            if e.status_code == 404:
                return render(request, "album.html", {"album": None, "photos": []}, status_code=404)
            return render(
                request, "album.html", {"album": None, "photos": []},
                status_code=e.status_code, errors=[e.detail]
            )

    return render(request, "album.html", {"album": album, "photos": photos})


@router.get("/api/albums", response_model=List[Album])
def api_list_albums():
    """Albums with photo counts, newest first."""
    with open_backend() as db:
        return get_album_service(db).list_albums()


@router.get("/api/albums/{album_id}", response_model=AlbumWithPhotos)
def api_get_album(album_id: str):
    """One album with its photos."""
    with open_backend() as db:
        album, photos = get_album_service(db).get_album_with_photos(album_id)
    return {**album, "photos": photos}
