from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from captains_log.database import get_db
from captains_log.dependencies import get_current_user
from captains_log.models.user import User
from captains_log.schemas.photo import (
    AddPhotosRequest,
    AlbumCreate,
    AlbumDetailResponse,
    AlbumResponse,
    AlbumUpdate,
)
from captains_log.services.photo_service import album_service

router = APIRouter()


@router.post("", status_code=201, response_model=AlbumResponse)
async def create_album(
    req: AlbumCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    album = await album_service.create(db, user.id, req)
    return AlbumResponse.model_validate(album)


@router.get("/trip/{trip_id}", response_model=list[AlbumResponse])
async def list_albums(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    albums = await album_service.list_for_trip(db, user.id, trip_id)
    return [AlbumResponse.model_validate(a) for a in albums]


@router.get("/{album_id}", response_model=AlbumDetailResponse)
async def get_album(
    album_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Album with its photos in the order they were added."""
    album = await album_service.get(db, user.id, album_id)
    return AlbumDetailResponse.model_validate(album)


@router.put("/{album_id}", response_model=AlbumResponse)
async def update_album(
    album_id: int,
    req: AlbumUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    album = await album_service.update(db, user.id, album_id, req)
    return AlbumResponse.model_validate(album)


@router.delete("/{album_id}", status_code=204)
async def delete_album(
    album_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await album_service.delete(db, user.id, album_id)


@router.post("/{album_id}/photos")
async def add_photos_to_album(
    album_id: int,
    req: AddPhotosRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await album_service.add_photos(db, user.id, album_id, req.photo_ids)


@router.delete("/{album_id}/photos/{photo_id}")
async def remove_photo_from_album(
    album_id: int,
    photo_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await album_service.remove_photo(db, user.id, album_id, photo_id)
