from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from captains_log.database import get_db
from captains_log.dependencies import get_current_user
from captains_log.models.user import User
from captains_log.schemas.photo import PhotoCreate, PhotoResponse, PhotoUpdate
from captains_log.services.photo_service import photo_service

router = APIRouter()


@router.post("", status_code=201, response_model=PhotoResponse)
async def create_photo(
    req: PhotoCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Register photo metadata. The file itself lives wherever ``file_path`` points."""
    photo = await photo_service.create(db, user.id, req)
    return PhotoResponse.model_validate(photo)


@router.get("/trip/{trip_id}", response_model=list[PhotoResponse])
async def list_photos(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    photos = await photo_service.list_for_trip(db, user.id, trip_id)
    return [PhotoResponse.model_validate(p) for p in photos]


@router.get("/{photo_id}", response_model=PhotoResponse)
async def get_photo(
    photo_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    photo = await photo_service.get(db, user.id, photo_id)
    return PhotoResponse.model_validate(photo)


@router.put("/{photo_id}", response_model=PhotoResponse)
async def update_photo(
    photo_id: int,
    req: PhotoUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    photo = await photo_service.update(db, user.id, photo_id, req)
    return PhotoResponse.model_validate(photo)


@router.delete("/{photo_id}", status_code=204)
async def delete_photo(
    photo_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await photo_service.delete(db, user.id, photo_id)
