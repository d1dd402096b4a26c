"""Lodging stays. Check-in is required, check-out may be left open."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from captains_log.errors import ValidationFailed
from captains_log.models.lodging import Lodging
from captains_log.services.crud import verify_trip_access
from captains_log.services.trip_items import TripItemService


class LodgingService(TripItemService):
    model = Lodging
    entity_type = "LODGING"
    label = "Lodging"
    label_plural = "lodging"
    datetime_fields = {"check_in_date": "timezone", "check_out_date": "timezone"}
    bulk_fields = ("type", "notes")

    def order_by(self, sort_by: str = "check_in"):
        if sort_by == "name":
            return (Lodging.name.asc(), Lodging.id.asc())
        if sort_by == "type":
            # Grouped by type, chronological inside each group, undated stays last
            return (Lodging.type.asc(), Lodging.check_in_date.asc().nulls_last(), Lodging.id.asc())
        return (Lodging.check_in_date.asc().nulls_last(), Lodging.created_at.asc())

    def validate(self, entity: Lodging):
        if entity.check_in_date is None:
            raise ValidationFailed("Check-in date is required")
        if entity.check_out_date and entity.check_out_date < entity.check_in_date:
            raise ValidationFailed("Check-out date must be on or after check-in date")

    async def list_for_trip(self, db: AsyncSession, user_id: int, trip_id: int, sort_by: str = "check_in") -> list:
        await verify_trip_access(db, user_id, trip_id)
        result = await db.execute(
            select(Lodging).where(Lodging.trip_id == trip_id).order_by(*self.order_by(sort_by))
        )
        return list(result.scalars().all())


lodging_service = LodgingService()
