from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from captains_log.database import get_db
from captains_log.dependencies import get_current_user
from captains_log.models.user import User
from captains_log.schemas.tag import (
    TagCreate,
    TagDetailResponse,
    TagResponse,
    TagUpdate,
    TagWithCount,
    TripTagLink,
)
from captains_log.services.tag_service import tag_service

router = APIRouter()


@router.post("", status_code=201, response_model=TagResponse)
async def create_tag(
    req: TagCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    tag = await tag_service.create(db, user.id, req)
    return TagResponse.model_validate(tag)


@router.get("", response_model=list[TagWithCount])
async def list_tags(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """The user's tags by name, with how many trips carry each."""
    tags = await tag_service.list_for_user(db, user.id)
    return [TagWithCount.model_validate(tag).model_copy(update={"trip_count": count}) for tag, count in tags]


@router.post("/link", status_code=201)
async def link_tag_to_trip(
    req: TripTagLink,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await tag_service.link_to_trip(db, user.id, req.trip_id, req.tag_id)


@router.get("/trips/{trip_id}", response_model=list[TagResponse])
async def list_trip_tags(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    tags = await tag_service.list_for_trip(db, user.id, trip_id)
    return [TagResponse.model_validate(t) for t in tags]


@router.delete("/trips/{trip_id}/tags/{tag_id}", status_code=204)
async def unlink_tag_from_trip(
    trip_id: int,
    tag_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await tag_service.unlink_from_trip(db, user.id, trip_id, tag_id)


@router.get("/{tag_id}", response_model=TagDetailResponse)
async def get_tag(
    tag_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """One tag with the trips it is on."""
    tag = await tag_service.get(db, user.id, tag_id)
    return TagDetailResponse.model_validate(tag)


@router.put("/{tag_id}", response_model=TagResponse)
async def update_tag(
    tag_id: int,
    req: TagUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    tag = await tag_service.update(db, user.id, tag_id, req)
    return TagResponse.model_validate(tag)


@router.delete("/{tag_id}", status_code=204)
async def delete_tag(
    tag_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await tag_service.delete(db, user.id, tag_id)
