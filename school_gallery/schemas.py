"""Pydantic models for the JSON API."""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel


class Album(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    cover_image_url: Optional[str] = None
    created_at: datetime
    photo_count: Optional[int] = None


class Photo(BaseModel):
    id: str
    album_id: str
    image_url: str
    caption: Optional[str] = None
    created_at: datetime


class AlbumWithPhotos(Album):
    photos: list[Photo] = []


class ToastMessage(BaseModel):
    id: int
    message: str
    type: Literal["success", "error", "info"] = "info"


class UploadResult(BaseModel):
    """Outcome of one file in a multi-file upload."""
    filename: str
    status: Literal["success", "error"]
    photo: Optional[Photo] = None
    error: Optional[str] = None


class CaptionInput(BaseModel):
    caption: Optional[str] = None


class CoverInput(BaseModel):
    photo_id: str


class UploadResponse(BaseModel):
    results: list[UploadResult]
    uploaded: int
    failed: int
