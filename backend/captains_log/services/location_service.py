from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from captains_log.models.location import Location
from captains_log.models.transportation import Transportation
from captains_log.services.crud import cleanup_entity_links, verify_entity_access, verify_trip_access
from captains_log.services.trip_items import TripItemService


class LocationService(TripItemService):
    model = Location
    entity_type = "LOCATION"
    label = "Location"
    label_plural = "locations"
    datetime_fields = {"visit_datetime": None}

    def order_by(self):
        return (Location.visit_datetime.asc().nulls_last(), Location.created_at.asc())

    async def list_categories(self, db: AsyncSession, user_id: int, trip_id: int) -> list[str]:
        await verify_trip_access(db, user_id, trip_id)
        result = await db.execute(
            select(Location.category)
            .where(Location.trip_id == trip_id, Location.category.is_not(None))
            .distinct()
            .order_by(Location.category)
        )
        return list(result.scalars().all())

    async def delete(self, db: AsyncSession, user_id: int, entity_id: int) -> dict:
        location, trip = await verify_entity_access(db, user_id, Location, entity_id, self.label)

        # Keep the place name on transportation that pointed here
        for fk, name_field in (
            (Transportation.from_location_id, "from_location_name"),
            (Transportation.to_location_id, "to_location_name"),
        ):
            await db.execute(
                update(Transportation)
                .where(fk == location.id)
                .values({fk.key: None, name_field: location.name})
                .execution_options(synchronize_session=False)
            )

        await cleanup_entity_links(db, trip.id, self.entity_type, location.id)
        await db.delete(location)
        await db.commit()
        return {"success": True}


location_service = LocationService()
