from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from captains_log.database import get_db
from captains_log.dependencies import get_current_user
from captains_log.models.user import User
from captains_log.schemas.activity import ActivityBulkUpdate, ActivityCreate, ActivityResponse, ActivityUpdate
from captains_log.schemas.common import BulkDeleteRequest, BulkResult
from captains_log.services.activity_service import activity_service

router = APIRouter()


@router.post("", status_code=201, response_model=ActivityResponse)
async def create_activity(
    req: ActivityCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    activity = await activity_service.create(db, user.id, req)
    return ActivityResponse.model_validate(activity)


@router.get("/trip/{trip_id}", response_model=list[ActivityResponse])
async def list_activities(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Activities for a trip, scheduled ones first in start order."""
    activities = await activity_service.list_for_trip(db, user.id, trip_id)
    return [ActivityResponse.model_validate(a) for a in activities]


@router.get("/{activity_id}", response_model=ActivityResponse)
async def get_activity(
    activity_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    activity = await activity_service.get(db, user.id, activity_id)
    return ActivityResponse.model_validate(activity)


@router.put("/{activity_id}", response_model=ActivityResponse)
async def update_activity(
    activity_id: int,
    req: ActivityUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    activity = await activity_service.update(db, user.id, activity_id, req)
    return ActivityResponse.model_validate(activity)


@router.delete("/{activity_id}", status_code=204)
async def delete_activity(
    activity_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await activity_service.delete(db, user.id, activity_id)


@router.post("/trip/{trip_id}/bulk-delete", response_model=BulkResult)
async def bulk_delete_activities(
    trip_id: int,
    req: BulkDeleteRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await activity_service.bulk_delete(db, user.id, trip_id, req.ids)


@router.patch("/trip/{trip_id}/bulk-update", response_model=BulkResult)
async def bulk_update_activities(
    trip_id: int,
    req: ActivityBulkUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Set category, timezone or notes on several activities at once."""
    return await activity_service.bulk_update(db, user.id, trip_id, req.ids, req.updates)
