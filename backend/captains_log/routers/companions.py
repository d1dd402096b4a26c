from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from captains_log.database import get_db
from captains_log.dependencies import get_current_user
from captains_log.models.user import User
from captains_log.schemas.companion import (
    CompanionCreate,
    CompanionResponse,
    CompanionUpdate,
    TripCompanionLink,
)
from captains_log.services.companion_service import companion_service

router = APIRouter()


@router.post("", status_code=201, response_model=CompanionResponse)
async def create_companion(
    req: CompanionCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    companion = await companion_service.create(db, user.id, req)
    return CompanionResponse.model_validate(companion)


@router.get("", response_model=list[CompanionResponse])
async def list_companions(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """All of the user's companions, "Myself" first."""
    companions = await companion_service.list_for_user(db, user.id)
    return [CompanionResponse.model_validate(c) for c in companions]


@router.post("/link")
async def link_companion_to_trip(
    req: TripCompanionLink,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await companion_service.link_to_trip(db, user.id, req.trip_id, req.companion_id)


@router.get("/trips/{trip_id}", response_model=list[CompanionResponse])
async def list_trip_companions(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    companions = await companion_service.list_for_trip(db, user.id, trip_id)
    return [CompanionResponse.model_validate(c) for c in companions]


@router.delete("/trips/{trip_id}/companions/{companion_id}")
async def unlink_companion_from_trip(
    trip_id: int,
    companion_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await companion_service.unlink_from_trip(db, user.id, trip_id, companion_id)


@router.get("/{companion_id}", response_model=CompanionResponse)
async def get_companion(
    companion_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    companion = await companion_service.get(db, user.id, companion_id)
    return CompanionResponse.model_validate(companion)


@router.put("/{companion_id}", response_model=CompanionResponse)
async def update_companion(
    companion_id: int,
    req: CompanionUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    companion = await companion_service.update(db, user.id, companion_id, req)
    return CompanionResponse.model_validate(companion)


@router.delete("/{companion_id}", status_code=204)
async def delete_companion(
    companion_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await companion_service.delete(db, user.id, companion_id)
