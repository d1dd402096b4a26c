"""Travel companions and their trip assignments."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from captains_log.errors import NotFoundError, ValidationFailed
from captains_log.models.companion import Companion
from captains_log.models.trip import Trip
from captains_log.models.user import User
from captains_log.schemas.companion import CompanionCreate, CompanionUpdate
from captains_log.services.crud import apply_update, build_update_data

logger = logging.getLogger(__name__)


def _column_values(data: dict) -> dict:
    # API field "relationship" is stored on relationship_label
    if "relationship" in data:
        data["relationship_label"] = data.pop("relationship")
    return data


class CompanionService:
    """User-owned companions; the "Myself" entry is created with the account."""

    # ─── Myself ───

    async def create_myself(self, db: AsyncSession, user: User) -> Companion:
        companion = Companion(
            user_id=user.id,
            name="Myself",
            email=user.email,
            relationship_label="Myself",
            dietary_preferences=[],
            is_myself=True,
        )
        db.add(companion)
        await db.flush()
        return companion

    async def get_myself(self, db: AsyncSession, user_id: int) -> Companion | None:
        result = await db.execute(
            select(Companion).where(Companion.user_id == user_id, Companion.is_myself == True)
        )
        return result.scalars().first()

    # ─── CRUD ───

    async def _get_owned(self, db: AsyncSession, user_id: int, companion_id: int) -> Companion:
        result = await db.execute(
            select(Companion).where(Companion.id == companion_id, Companion.user_id == user_id)
        )
        companion = result.scalar_one_or_none()
        if not companion:
            raise NotFoundError("Companion not found")
        return companion

    async def list_for_user(self, db: AsyncSession, user_id: int) -> list[Companion]:
        result = await db.execute(
            select(Companion)
            .where(Companion.user_id == user_id)
            .order_by(Companion.is_myself.desc(), Companion.name.asc())
        )
        return list(result.scalars().all())

    async def get(self, db: AsyncSession, user_id: int, companion_id: int) -> Companion:
        return await self._get_owned(db, user_id, companion_id)

    async def create(self, db: AsyncSession, user_id: int, payload: CompanionCreate) -> Companion:
        values = _column_values(payload.model_dump())
        companion = Companion(user_id=user_id, **{k: (None if v == "" else v) for k, v in values.items()})
        db.add(companion)
        await db.commit()
        await db.refresh(companion)
        return companion

    async def update(self, db: AsyncSession, user_id: int, companion_id: int, payload: CompanionUpdate) -> Companion:
        companion = await self._get_owned(db, user_id, companion_id)
        apply_update(companion, _column_values(build_update_data(payload, model=Companion)))
        await db.commit()
        await db.refresh(companion)
        return companion

    async def delete(self, db: AsyncSession, user_id: int, companion_id: int) -> dict:
        companion = await self._get_owned(db, user_id, companion_id)
        if companion.is_myself:
            raise ValidationFailed("Cannot delete your own companion profile")
        await db.delete(companion)
        await db.commit()
        return {"success": True}

    # ─── Trip assignments ───

    async def _get_trip_with_companions(self, db: AsyncSession, user_id: int, trip_id: int) -> Trip:
        result = await db.execute(
            select(Trip)
            .where(Trip.id == trip_id, Trip.user_id == user_id)
            .options(selectinload(Trip.companions))
        )
        trip = result.scalar_one_or_none()
        if not trip:
            raise NotFoundError("Trip not found or access denied")
        return trip

    async def link_to_trip(self, db: AsyncSession, user_id: int, trip_id: int, companion_id: int) -> dict:
        trip = await self._get_trip_with_companions(db, user_id, trip_id)
        companion = await self._get_owned(db, user_id, companion_id)
        if any(c.id == companion.id for c in trip.companions):
            raise ValidationFailed("Companion already linked to this trip")

        trip.companions.append(companion)
        await db.commit()
        logger.info(f"Linked companion {companion.id} to trip {trip.id}")
        return {"trip_id": trip.id, "companion_id": companion.id}

    async def unlink_from_trip(self, db: AsyncSession, user_id: int, trip_id: int, companion_id: int) -> dict:
        trip = await self._get_trip_with_companions(db, user_id, trip_id)
        companion = next((c for c in trip.companions if c.id == companion_id), None)
        if companion is None:
            raise NotFoundError("Companion not linked to this trip")

        trip.companions.remove(companion)
        await db.commit()
        return {"success": True}

    async def list_for_trip(self, db: AsyncSession, user_id: int, trip_id: int) -> list[Companion]:
        trip = await self._get_trip_with_companions(db, user_id, trip_id)
        return sorted(trip.companions, key=lambda c: (not c.is_myself, c.name.lower()))


companion_service = CompanionService()
