from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class PhotoCreate(BaseModel):
    trip_id: int
    source: Literal["local", "remote"] = "local"
    file_path: str | None = Field(default=None, max_length=1000)
    thumbnail_path: str | None = Field(default=None, max_length=1000)
    caption: str | None = None
    taken_at: datetime | None = None
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)


class PhotoUpdate(BaseModel):
    caption: str | None = None
    taken_at: datetime | None = None
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)


class PhotoResponse(BaseModel):
    id: int
    trip_id: int
    source: str
    file_path: str | None
    thumbnail_path: str | None
    caption: str | None
    taken_at: datetime | None
    latitude: float | None
    longitude: float | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AlbumCreate(BaseModel):
    trip_id: int
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    cover_photo_id: int | None = None


class AlbumUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    cover_photo_id: int | None = None


class AlbumResponse(BaseModel):
    id: int
    trip_id: int
    name: str
    description: str | None
    cover_photo_id: int | None
    photo_count: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AlbumDetailResponse(AlbumResponse):
    photos: list[PhotoResponse] = []


class AddPhotosRequest(BaseModel):
    photo_ids: list[int] = Field(min_length=1)
