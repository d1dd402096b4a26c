from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from captains_log.database import get_db
from captains_log.dependencies import get_current_user
from captains_log.models.user import User
from captains_log.schemas.location import LocationCreate, LocationResponse, LocationUpdate
from captains_log.services.location_service import location_service

router = APIRouter()


@router.post("", status_code=201, response_model=LocationResponse)
async def create_location(
    req: LocationCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    location = await location_service.create(db, user.id, req)
    return LocationResponse.model_validate(location)


@router.get("/trip/{trip_id}", response_model=list[LocationResponse])
async def list_locations(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    locations = await location_service.list_for_trip(db, user.id, trip_id)
    return [LocationResponse.model_validate(loc) for loc in locations]


@router.get("/trip/{trip_id}/categories")
async def list_location_categories(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Distinct categories used by the trip's locations."""
    return {"categories": await location_service.list_categories(db, user.id, trip_id)}


@router.get("/{location_id}", response_model=LocationResponse)
async def get_location(
    location_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    location = await location_service.get(db, user.id, location_id)
    return LocationResponse.model_validate(location)


@router.put("/{location_id}", response_model=LocationResponse)
async def update_location(
    location_id: int,
    req: LocationUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    location = await location_service.update(db, user.id, location_id, req)
    return LocationResponse.model_validate(location)


@router.delete("/{location_id}", status_code=204)
async def delete_location(
    location_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Delete a location. Transportation that pointed at it keeps the name."""
    await location_service.delete(db, user.id, location_id)
