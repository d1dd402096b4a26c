"""Trip weather: forecast at the trip's first located place over its dates."""

import logging
from datetime import timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from captains_log.config import settings
from captains_log.models.location import Location
from captains_log.services.cache_service import cache_service
from captains_log.services.crud import verify_trip_access
from captains_log.services.weather_client import weather_client
from captains_log.utils.timezone import current_time_in_timezone

logger = logging.getLogger(__name__)


def _unavailable(reason: str, location: Location | None = None) -> dict:
    return {"available": False, "reason": reason, "location": _location_dict(location), "days": []}


def _location_dict(location: Location | None) -> dict | None:
    if location is None:
        return None
    return {
        "id": location.id,
        "name": location.name,
        "latitude": location.latitude,
        "longitude": location.longitude,
    }


class WeatherService:

    async def _first_located_place(self, db: AsyncSession, trip_id: int) -> Location | None:
        result = await db.execute(
            select(Location)
            .where(
                Location.trip_id == trip_id,
                Location.latitude.is_not(None),
                Location.longitude.is_not(None),
            )
            .order_by(Location.visit_datetime.asc().nulls_last(), Location.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_trip_forecast(self, db: AsyncSession, user_id: int, trip_id: int) -> dict:
        trip = await verify_trip_access(db, user_id, trip_id)
        location = await self._first_located_place(db, trip.id)
        if location is None:
            return _unavailable("no_location")

        # Open-Meteo only forecasts a fixed window ahead of today
        today = current_time_in_timezone(trip.timezone).date()
        horizon = today + timedelta(days=settings.weather_max_forecast_days - 1)
        start = max(trip.start_date or today, today)
        end = min(trip.end_date or trip.start_date or horizon, horizon)
        if start > end:
            return _unavailable("out_of_range", location)

        start_key, end_key = start.isoformat(), end.isoformat()
        cached = await cache_service.get_weather(location.latitude, location.longitude, start_key, end_key)
        if cached is not None:
            return cached

        days = await weather_client.fetch_daily_forecast(location.latitude, location.longitude, start, end)
        if days is None:
            return _unavailable("unavailable", location)

        forecast = {
            "available": True,
            "reason": None,
            "location": _location_dict(location),
            "days": [day.to_dict() for day in days],
        }
        await cache_service.set_weather(location.latitude, location.longitude, start_key, end_key, forecast)
        logger.info(f"Weather fetched for trip {trip.id}: {len(days)} days")
        return forecast


weather_service = WeatherService()
