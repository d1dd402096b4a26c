"""Activities: scheduled or all-day things to do on a trip."""

from sqlalchemy.ext.asyncio import AsyncSession

from captains_log.errors import ValidationFailed
from captains_log.models.activity import Activity
from captains_log.models.trip import Trip
from captains_log.services.trip_items import TripItemService


class ActivityService(TripItemService):
    model = Activity
    entity_type = "ACTIVITY"
    label = "Activity"
    label_plural = "activities"
    datetime_fields = {"start_time": "timezone", "end_time": "timezone"}
    bulk_fields = ("category", "notes", "timezone")

    def order_by(self):
        return (Activity.start_time.asc().nulls_last(), Activity.created_at.asc())

    def validate(self, entity: Activity):
        if entity.start_time and entity.end_time and entity.end_time < entity.start_time:
            raise ValidationFailed("End time must be after start time")

    async def validate_references(self, db: AsyncSession, trip: Trip, values: dict):
        parent_id = values.get("parent_id")
        if parent_id:
            await self._verify_in_trip(db, Activity, parent_id, trip.id, "Parent activity")


activity_service = ActivityService()
