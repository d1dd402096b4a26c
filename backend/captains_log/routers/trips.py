import logging
from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from captains_log.database import get_db
from captains_log.dependencies import get_current_user
from captains_log.models.user import User
from captains_log.schemas.trip import (
    DuplicateTripRequest,
    TripCreate,
    TripListResponse,
    TripResponse,
    TripStatusLiteral,
    TripUpdate,
)
from captains_log.services.dashboard import build_dashboard, build_day_view, build_itinerary
from captains_log.services.entity_link_service import entity_link_service
from captains_log.services.trip_service import SORT_OPTIONS, trip_service
from captains_log.services.trip_validator import validate_trip
from captains_log.services.weather_service import weather_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", status_code=201, response_model=TripResponse)
async def create_trip(
    req: TripCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    trip = await trip_service.create(db, user, req)
    return TripResponse.model_validate(trip)


@router.get("", response_model=TripListResponse)
async def list_trips(
    status: TripStatusLiteral | None = None,
    search: str | None = None,
    sort: str = Query("startDate-desc", pattern="^(" + "|".join(SORT_OPTIONS) + ")$"),
    start_date_from: date | None = None,
    start_date_to: date | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """List the user's trips with filtering, search, sorting, and pagination."""
    result = await trip_service.list_trips(
        db,
        user.id,
        status=status,
        search=search,
        sort=sort,
        start_date_from=start_date_from,
        start_date_to=start_date_to,
        page=page,
        limit=limit,
    )
    return TripListResponse(
        trips=[TripResponse.model_validate(t) for t in result["trips"]],
        total=result["total"],
        page=result["page"],
        limit=result["limit"],
        total_pages=result["total_pages"],
    )


@router.get("/{trip_id}", response_model=TripResponse)
async def get_trip(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    trip = await trip_service.get(db, user.id, trip_id)
    return TripResponse.model_validate(trip)


@router.put("/{trip_id}", response_model=TripResponse)
async def update_trip(
    trip_id: int,
    req: TripUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    trip = await trip_service.update(db, user.id, trip_id, req)
    return TripResponse.model_validate(trip)


@router.delete("/{trip_id}", status_code=204)
async def delete_trip(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Delete a trip and everything that belongs to it."""
    await trip_service.delete(db, user.id, trip_id)


@router.post("/{trip_id}/duplicate", status_code=201, response_model=TripResponse)
async def duplicate_trip(
    trip_id: int,
    req: DuplicateTripRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    trip = await trip_service.duplicate(db, user.id, trip_id, req)
    return TripResponse.model_validate(trip)


# ─── Dashboard and day views ───


@router.get("/{trip_id}/dashboard")
async def get_trip_dashboard(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Countdown, next-up, today's itinerary, budget, recent activity, and checklist progress."""
    trip = await trip_service.get_with_items(db, user.id, trip_id)
    dashboard = build_dashboard(trip, datetime.now(timezone.utc))
    dashboard["trip"] = TripResponse.model_validate(trip)
    return dashboard


@router.get("/{trip_id}/days/{day}")
async def get_trip_day(
    trip_id: int,
    day: date,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Everything on one local calendar day of the trip, all-day items first."""
    trip = await trip_service.get_with_items(db, user.id, trip_id)
    return build_day_view(
        trip, day, trip.activities, trip.transportation, trip.lodging, trip.journal_entries
    )


@router.get("/{trip_id}/itinerary")
async def get_trip_itinerary(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    trip = await trip_service.get_with_items(db, user.id, trip_id)
    return {
        "trip_id": trip.id,
        "timezone": trip.timezone,
        "days": build_itinerary(
            trip, trip.activities, trip.transportation, trip.lodging, trip.journal_entries
        ),
    }


@router.get("/{trip_id}/validate")
async def validate_trip_plan(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Health report: lodging gaps, overlaps, out-of-range activities, tight connections, and a 0..100 score."""
    trip = await trip_service.get_with_items(db, user.id, trip_id)
    activity_locations = await entity_link_service.get_activity_locations(db, trip.id)
    return validate_trip(trip, activity_locations).to_dict()


@router.get("/{trip_id}/weather")
async def get_trip_weather(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Daily forecast at the trip's first located place. ``available`` is false when none can be had."""
    return await weather_service.get_trip_forecast(db, user.id, trip_id)
