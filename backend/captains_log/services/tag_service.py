"""User trip tags and their assignment to trips."""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from captains_log.errors import NotFoundError, ValidationFailed
from captains_log.models.tag import TripTag
from captains_log.models.trip import Trip, trip_tag_assignments
from captains_log.schemas.tag import TagCreate, TagUpdate
from captains_log.services.crud import apply_update, build_update_data

logger = logging.getLogger(__name__)


class TagService:
    """Tags belong to one user and can be put on any of that user's trips."""

    # ─── CRUD ───

    async def _get_owned(self, db: AsyncSession, user_id: int, tag_id: int, *options) -> TripTag:
        result = await db.execute(
            select(TripTag).where(TripTag.id == tag_id, TripTag.user_id == user_id).options(*options)
        )
        tag = result.scalar_one_or_none()
        if not tag:
            raise NotFoundError("Tag not found")
        return tag

    async def list_for_user(self, db: AsyncSession, user_id: int) -> list[tuple[TripTag, int]]:
        """Tags by name, each with the number of trips carrying it."""
        counts = (
            select(trip_tag_assignments.c.tag_id, func.count().label("trip_count"))
            .group_by(trip_tag_assignments.c.tag_id)
            .subquery()
        )
        result = await db.execute(
            select(TripTag, func.coalesce(counts.c.trip_count, 0))
            .outerjoin(counts, counts.c.tag_id == TripTag.id)
            .where(TripTag.user_id == user_id)
            .order_by(TripTag.name.asc())
        )
        return [(tag, count) for tag, count in result.all()]

    async def get(self, db: AsyncSession, user_id: int, tag_id: int) -> TripTag:
        return await self._get_owned(db, user_id, tag_id, selectinload(TripTag.trips))

    async def create(self, db: AsyncSession, user_id: int, payload: TagCreate) -> TripTag:
        tag = TripTag(user_id=user_id, **payload.model_dump())
        db.add(tag)
        await db.commit()
        await db.refresh(tag)
        logger.info(f"Tag created: {tag.id} ({tag.name}) by user {user_id}")
        return tag

    async def update(self, db: AsyncSession, user_id: int, tag_id: int, payload: TagUpdate) -> TripTag:
        tag = await self._get_owned(db, user_id, tag_id)
        apply_update(tag, build_update_data(payload, model=TripTag))
        await db.commit()
        await db.refresh(tag)
        return tag

    async def delete(self, db: AsyncSession, user_id: int, tag_id: int) -> dict:
        tag = await self._get_owned(db, user_id, tag_id, selectinload(TripTag.trips))
        await db.delete(tag)
        await db.commit()
        return {"success": True}

    # ─── Trip assignments ───

    async def _get_trip_with_tags(self, db: AsyncSession, user_id: int, trip_id: int) -> Trip:
        result = await db.execute(
            select(Trip)
            .where(Trip.id == trip_id, Trip.user_id == user_id)
            .options(selectinload(Trip.tags))
        )
        trip = result.scalar_one_or_none()
        if not trip:
            raise NotFoundError("Trip not found or access denied")
        return trip

    async def link_to_trip(self, db: AsyncSession, user_id: int, trip_id: int, tag_id: int) -> dict:
        trip = await self._get_trip_with_tags(db, user_id, trip_id)
        tag = await self._get_owned(db, user_id, tag_id)
        if any(t.id == tag.id for t in trip.tags):
            raise ValidationFailed("Tag already linked to this trip")

        trip.tags.append(tag)
        await db.commit()
        logger.info(f"Tagged trip {trip.id} with tag {tag.id}")
        return {"trip_id": trip.id, "tag_id": tag.id}

    async def unlink_from_trip(self, db: AsyncSession, user_id: int, trip_id: int, tag_id: int) -> dict:
        trip = await self._get_trip_with_tags(db, user_id, trip_id)
        tag = next((t for t in trip.tags if t.id == tag_id), None)
        if tag is None:
            raise NotFoundError("Tag not linked to this trip")

        trip.tags.remove(tag)
        await db.commit()
        return {"success": True}

    async def list_for_trip(self, db: AsyncSession, user_id: int, trip_id: int) -> list[TripTag]:
        trip = await self._get_trip_with_tags(db, user_id, trip_id)
        return sorted(trip.tags, key=lambda t: t.name.lower())


tag_service = TagService()
