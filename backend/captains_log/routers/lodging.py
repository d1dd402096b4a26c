from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from captains_log.database import get_db
from captains_log.dependencies import get_current_user
from captains_log.models.user import User
from captains_log.schemas.common import BulkDeleteRequest, BulkResult
from captains_log.schemas.lodging import (
    LodgingBulkUpdate,
    LodgingCreate,
    LodgingResponse,
    LodgingSort,
    LodgingUpdate,
)
from captains_log.services.lodging_service import lodging_service

router = APIRouter()


@router.post("", status_code=201, response_model=LodgingResponse)
async def create_lodging(
    req: LodgingCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    lodging = await lodging_service.create(db, user.id, req)
    return LodgingResponse.model_validate(lodging)


@router.get("/trip/{trip_id}", response_model=list[LodgingResponse])
async def list_lodging(
    trip_id: int,
    sort_by: LodgingSort = "check_in",
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Lodging for a trip. ``sort_by=type`` groups by type, then check-in."""
    items = await lodging_service.list_for_trip(db, user.id, trip_id, sort_by)
    return [LodgingResponse.model_validate(lo) for lo in items]


@router.get("/{lodging_id}", response_model=LodgingResponse)
async def get_lodging(
    lodging_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    lodging = await lodging_service.get(db, user.id, lodging_id)
    return LodgingResponse.model_validate(lodging)


@router.put("/{lodging_id}", response_model=LodgingResponse)
async def update_lodging(
    lodging_id: int,
    req: LodgingUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    lodging = await lodging_service.update(db, user.id, lodging_id, req)
    return LodgingResponse.model_validate(lodging)


@router.delete("/{lodging_id}", status_code=204)
async def delete_lodging(
    lodging_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await lodging_service.delete(db, user.id, lodging_id)


@router.post("/trip/{trip_id}/bulk-delete", response_model=BulkResult)
async def bulk_delete_lodging(
    trip_id: int,
    req: BulkDeleteRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await lodging_service.bulk_delete(db, user.id, trip_id, req.ids)


@router.patch("/trip/{trip_id}/bulk-update", response_model=BulkResult)
async def bulk_update_lodging(
    trip_id: int,
    req: LodgingBulkUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await lodging_service.bulk_update(db, user.id, trip_id, req.ids, req.updates)
