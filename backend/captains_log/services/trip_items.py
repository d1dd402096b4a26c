"""Base service for records that hang off a trip (activities, lodging, ...).

Each subclass names its model, its entity-link type, and which timezone field
interprets each of its datetime fields. Naive datetimes from the client are
wall-clock times in that zone (or the trip's) and are stored as UTC.
"""

import logging

from pydantic import BaseModel
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from captains_log.errors import NotFoundError, ValidationFailed
from captains_log.models.trip import Trip
from captains_log.services.crud import (
    apply_update,
    build_update_data,
    cleanup_entity_links,
    verify_entity_access,
    verify_trip_access,
)
from captains_log.utils.timezone import normalize_to_utc

logger = logging.getLogger(__name__)


class TripItemService:
    model = None
    entity_type: str = ""
    label: str = ""
    label_plural: str = ""
    # datetime field -> name of the timezone field that interprets it
    datetime_fields: dict[str, str | None] = {}
    bulk_fields: tuple[str, ...] = ()
    # Relationships the response reads, reloaded after every write
    refresh_relationships: tuple[str, ...] = ()

    def order_by(self):
        return (self.model.created_at.asc(),)

    def validate(self, entity):
        """Cross-field checks run after create and update. Raise ValidationFailed."""

    async def validate_references(self, db: AsyncSession, trip: Trip, values: dict):
        """Check foreign keys in ``values`` point into ``trip``."""

    # ─── Helpers ───

    def _normalize_datetimes(self, values: dict, trip: Trip, entity=None) -> dict:
        for field, tz_field in self.datetime_fields.items():
            if values.get(field) is None:
                continue
            tz = None
            if tz_field:
                tz = values.get(tz_field) if tz_field in values else getattr(entity, tz_field, None)
            values[field] = normalize_to_utc(values[field], tz or trip.timezone)
        return values

    async def _reload(self, db: AsyncSession, entity):
        await db.refresh(entity)
        if self.refresh_relationships:
            await db.refresh(entity, list(self.refresh_relationships))

    async def _verify_in_trip(self, db: AsyncSession, model, entity_id: int, trip_id: int, label: str):
        entity = await db.get(model, entity_id)
        if entity is None or entity.trip_id != trip_id:
            raise NotFoundError(f"{label} not found or does not belong to trip")
        return entity

    # ─── CRUD ───

    async def list_for_trip(self, db: AsyncSession, user_id: int, trip_id: int) -> list:
        await verify_trip_access(db, user_id, trip_id)
        result = await db.execute(
            select(self.model).where(self.model.trip_id == trip_id).order_by(*self.order_by())
        )
        return list(result.scalars().all())

    async def get(self, db: AsyncSession, user_id: int, entity_id: int):
        entity, _ = await verify_entity_access(db, user_id, self.model, entity_id, self.label)
        return entity

    async def create(self, db: AsyncSession, user_id: int, payload: BaseModel):
        trip = await verify_trip_access(db, user_id, payload.trip_id)

        values = {
            key: (None if value == "" else value)
            for key, value in payload.model_dump(exclude={"trip_id"}).items()
        }
        values = self._normalize_datetimes(values, trip)
        await self.validate_references(db, trip, values)

        entity = self.model(trip_id=trip.id, **values)
        self.validate(entity)
        db.add(entity)
        await db.commit()
        await self._reload(db, entity)
        logger.info(f"Created {self.label.lower()} {entity.id} on trip {trip.id}")
        return entity

    async def update(self, db: AsyncSession, user_id: int, entity_id: int, payload: BaseModel):
        entity, trip = await verify_entity_access(db, user_id, self.model, entity_id, self.label)

        update_data = build_update_data(payload, model=self.model)
        update_data = self._normalize_datetimes(update_data, trip, entity)
        await self.validate_references(db, trip, update_data)
        apply_update(entity, update_data)
        self.validate(entity)

        await db.commit()
        await self._reload(db, entity)
        return entity

    async def delete(self, db: AsyncSession, user_id: int, entity_id: int) -> dict:
        entity, trip = await verify_entity_access(db, user_id, self.model, entity_id, self.label)
        await cleanup_entity_links(db, trip.id, self.entity_type, entity.id)
        await db.delete(entity)
        await db.commit()
        logger.info(f"Deleted {self.label.lower()} {entity_id} from trip {trip.id}")
        return {"success": True}

    # ─── Bulk ───

    async def _verify_all_in_trip(self, db: AsyncSession, trip_id: int, ids: list[int]) -> list[int]:
        unique_ids = list(dict.fromkeys(ids))
        result = await db.execute(
            select(self.model.id).where(self.model.id.in_(unique_ids), self.model.trip_id == trip_id)
        )
        found = list(result.scalars().all())
        if len(found) != len(unique_ids):
            raise NotFoundError(f"One or more {self.label_plural} not found or do not belong to this trip")
        return unique_ids

    async def bulk_delete(self, db: AsyncSession, user_id: int, trip_id: int, ids: list[int]) -> dict:
        await verify_trip_access(db, user_id, trip_id)
        ids = await self._verify_all_in_trip(db, trip_id, ids)

        await cleanup_entity_links(db, trip_id, self.entity_type, ids)
        result = await db.execute(
            delete(self.model)
            .where(self.model.id.in_(ids), self.model.trip_id == trip_id)
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        logger.info(f"Bulk deleted {result.rowcount} {self.label_plural} from trip {trip_id}")
        return {"success": True, "count": result.rowcount}

    async def bulk_update(self, db: AsyncSession, user_id: int, trip_id: int, ids: list[int], updates: BaseModel) -> dict:
        await verify_trip_access(db, user_id, trip_id)
        ids = await self._verify_all_in_trip(db, trip_id, ids)

        update_data = {
            key: value
            for key, value in updates.model_dump(exclude_unset=True).items()
            if key in self.bulk_fields and value is not None
        }
        if not update_data:
            raise ValidationFailed("No valid update fields provided")

        result = await db.execute(
            update(self.model)
            .where(self.model.id.in_(ids), self.model.trip_id == trip_id)
            .values(**update_data)
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        return {"success": True, "count": result.rowcount}
