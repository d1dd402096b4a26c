from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from captains_log.database import get_db
from captains_log.dependencies import get_current_user
from captains_log.models.user import User
from captains_log.schemas.common import BulkDeleteRequest, BulkResult
from captains_log.schemas.transportation import (
    TransportationBulkUpdate,
    TransportationCreate,
    TransportationResponse,
    TransportationUpdate,
)
from captains_log.services.transportation_service import transportation_service

router = APIRouter()


@router.post("", status_code=201, response_model=TransportationResponse)
async def create_transportation(
    req: TransportationCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    item = await transportation_service.create(db, user.id, req)
    return TransportationResponse.model_validate(item)


@router.get("/trip/{trip_id}", response_model=list[TransportationResponse])
async def list_transportation(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    items = await transportation_service.list_for_trip(db, user.id, trip_id)
    return [TransportationResponse.model_validate(t) for t in items]


@router.get("/{transportation_id}", response_model=TransportationResponse)
async def get_transportation(
    transportation_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    item = await transportation_service.get(db, user.id, transportation_id)
    return TransportationResponse.model_validate(item)


@router.put("/{transportation_id}", response_model=TransportationResponse)
async def update_transportation(
    transportation_id: int,
    req: TransportationUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    item = await transportation_service.update(db, user.id, transportation_id, req)
    return TransportationResponse.model_validate(item)


@router.delete("/{transportation_id}", status_code=204)
async def delete_transportation(
    transportation_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await transportation_service.delete(db, user.id, transportation_id)


@router.post("/trip/{trip_id}/bulk-delete", response_model=BulkResult)
async def bulk_delete_transportation(
    trip_id: int,
    req: BulkDeleteRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await transportation_service.bulk_delete(db, user.id, trip_id, req.ids)


@router.patch("/trip/{trip_id}/bulk-update", response_model=BulkResult)
async def bulk_update_transportation(
    trip_id: int,
    req: TransportationBulkUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await transportation_service.bulk_update(db, user.id, trip_id, req.ids, req.updates)
