"""Transportation legs between places, each end in its own timezone."""

from sqlalchemy.ext.asyncio import AsyncSession

from captains_log.errors import ValidationFailed
from captains_log.models.location import Location
from captains_log.models.transportation import Transportation
from captains_log.models.trip import Trip
from captains_log.services.trip_items import TripItemService


class TransportationService(TripItemService):
    model = Transportation
    entity_type = "TRANSPORTATION"
    label = "Transportation"
    label_plural = "transportation"
    datetime_fields = {"departure_time": "start_timezone", "arrival_time": "end_timezone"}
    bulk_fields = ("type", "carrier", "notes")
    refresh_relationships = ("from_location", "to_location")

    def order_by(self):
        return (Transportation.departure_time.asc().nulls_last(), Transportation.created_at.asc())

    def validate(self, entity: Transportation):
        if entity.departure_time and entity.arrival_time and entity.arrival_time < entity.departure_time:
            raise ValidationFailed("Arrival time must be after departure time")

    async def validate_references(self, db: AsyncSession, trip: Trip, values: dict):
        for field in ("from_location_id", "to_location_id"):
            if values.get(field):
                await self._verify_in_trip(db, Location, values[field], trip.id, "Location")


transportation_service = TransportationService()
