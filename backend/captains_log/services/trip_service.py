"""Trips: CRUD, listing, duplication, and date-driven status changes."""

import logging
import math
from datetime import date

from sqlalchemy import case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from captains_log.config import settings
from captains_log.data.currency import is_supported
from captains_log.errors import NotFoundError, ValidationFailed
from captains_log.models.activity import Activity
from captains_log.models.checklist import Checklist, ChecklistItem
from captains_log.models.entity_link import EntityLink
from captains_log.models.journal import JournalEntry
from captains_log.models.location import Location
from captains_log.models.lodging import Lodging
from captains_log.models.photo import Photo, PhotoAlbum
from captains_log.models.transportation import Transportation
from captains_log.models.trip import Trip, TripStatus
from captains_log.models.user import User
from captains_log.schemas.trip import DuplicateTripRequest, TripCreate, TripUpdate
from captains_log.services.companion_service import companion_service
from captains_log.services.crud import apply_update, build_update_data, verify_trip_access
from captains_log.utils.timezone import current_time_in_timezone

logger = logging.getLogger(__name__)

SORT_OPTIONS = ("startDate-desc", "startDate-asc", "title-asc", "title-desc", "status")

# Lifecycle order for sort=status
STATUS_ORDER = {status: i for i, status in enumerate(TripStatus.ALL)}

# Column copy lists for duplicate(); ids, trip_id and timestamps are never copied
_ACTIVITY_FIELDS = (
    "name", "description", "category", "all_day", "start_time", "end_time", "timezone",
    "cost", "currency", "booking_url", "booking_reference", "notes",
)
_TRANSPORTATION_FIELDS = (
    "type", "from_location_name", "to_location_name", "departure_time", "arrival_time",
    "start_timezone", "end_timezone", "carrier", "vehicle_number", "confirmation_number",
    "cost", "currency", "notes",
)
_LODGING_FIELDS = (
    "type", "name", "address", "check_in_date", "check_out_date", "timezone",
    "confirmation_number", "cost", "currency", "booking_url", "notes",
)
_JOURNAL_FIELDS = ("title", "content", "date", "entry_type")
_LOCATION_FIELDS = (
    "name", "address", "latitude", "longitude", "category", "visit_datetime",
    "visit_duration_minutes", "notes",
)
_PHOTO_FIELDS = ("source", "file_path", "thumbnail_path", "caption", "taken_at", "latitude", "longitude")
_ALBUM_FIELDS = ("name", "description")


def _copy(source, model, fields: tuple[str, ...], **extra):
    return model(**{field: getattr(source, field) for field in fields}, **extra)


def _check_currency(currency: str):
    if not is_supported(currency):
        raise ValidationFailed(f"Unsupported currency: {currency}")


def compute_auto_status(trip: Trip, today: date) -> str | None:
    """Status the trip should move to based on its dates, or None to leave it.

    Completed and Cancelled are never overridden, and undated trips are left alone.
    """
    if trip.status in TripStatus.FINAL or not trip.start_date or not trip.end_date:
        return None
    if today > trip.end_date:
        return TripStatus.COMPLETED
    if trip.start_date <= today <= trip.end_date and trip.status != TripStatus.IN_PROGRESS:
        return TripStatus.IN_PROGRESS
    return None


class TripService:
    """Owner-scoped trip operations."""

    # ─── Status automation ───

    def apply_auto_status(self, trip: Trip, today: date | None = None) -> bool:
        today = today or current_time_in_timezone(trip.timezone).date()
        new_status = compute_auto_status(trip, today)
        if not new_status:
            return False
        logger.info(f"Trip {trip.id} status {trip.status} -> {new_status}")
        trip.status = new_status
        if new_status == TripStatus.COMPLETED:
            trip.add_to_places_visited = True
        return True

    async def refresh_statuses(self, db: AsyncSession, user_id: int | None = None) -> int:
        """Apply date-driven status changes. All users when ``user_id`` is None."""
        query = select(Trip).where(
            Trip.start_date.is_not(None),
            Trip.end_date.is_not(None),
            Trip.status.not_in(TripStatus.FINAL),
        )
        if user_id is not None:
            query = query.where(Trip.user_id == user_id)

        result = await db.execute(query)
        changed = sum(1 for trip in result.scalars().all() if self.apply_auto_status(trip))
        if changed:
            await db.commit()
        return changed

    # ─── CRUD ───

    async def create(self, db: AsyncSession, user: User, payload: TripCreate) -> Trip:
        values = payload.model_dump()
        if not values.get("timezone"):
            values["timezone"] = user.timezone or "UTC"
        if values["status"] == TripStatus.COMPLETED:
            values["add_to_places_visited"] = True
        values["currency"] = (values["currency"] or settings.default_currency).upper()
        _check_currency(values["currency"])

        trip = Trip(user_id=user.id, **values)
        db.add(trip)
        await db.flush()

        myself = await companion_service.get_myself(db, user.id)
        if myself:
            await db.refresh(trip, ["companions"])
            trip.companions.append(myself)

        await db.commit()
        await db.refresh(trip)
        logger.info(f"Trip created: {trip.id} by user {user.id}")
        return trip

    async def list_trips(
        self,
        db: AsyncSession,
        user_id: int,
        status: str | None = None,
        search: str | None = None,
        sort: str = "startDate-desc",
        start_date_from: date | None = None,
        start_date_to: date | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> dict:
        await self.refresh_statuses(db, user_id)

        filters = [Trip.user_id == user_id]
        if status:
            filters.append(Trip.status == status)
        if search:
            pattern = f"%{search.lower()}%"
            filters.append(
                or_(func.lower(Trip.title).like(pattern), func.lower(Trip.description).like(pattern))
            )
        if start_date_from:
            filters.append(Trip.start_date >= start_date_from)
        if start_date_to:
            filters.append(Trip.start_date <= start_date_to)

        total = (await db.execute(select(func.count(Trip.id)).where(*filters))).scalar_one()

        result = await db.execute(
            select(Trip)
            .where(*filters)
            .order_by(*self._sort_clause(sort))
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return {
            "trips": list(result.scalars().all()),
            "total": total,
            "page": page,
            "limit": limit,
            "total_pages": math.ceil(total / limit) if limit else 0,
        }

    @staticmethod
    def _sort_clause(sort: str):
        if sort == "startDate-asc":
            return (Trip.start_date.asc().nulls_last(), Trip.id.asc())
        if sort == "title-asc":
            return (func.lower(Trip.title).asc(), Trip.id.asc())
        if sort == "title-desc":
            return (func.lower(Trip.title).desc(), Trip.id.desc())
        if sort == "status":
            status_rank = case(STATUS_ORDER, value=Trip.status, else_=len(STATUS_ORDER))
            return (status_rank, Trip.start_date.desc().nulls_last(), Trip.id.desc())
        return (Trip.start_date.desc().nulls_last(), Trip.created_at.desc())

    async def get(self, db: AsyncSession, user_id: int, trip_id: int) -> Trip:
        trip = await verify_trip_access(db, user_id, trip_id)
        if self.apply_auto_status(trip):
            await db.commit()
        return trip

    async def get_with_items(self, db: AsyncSession, user_id: int, trip_id: int) -> Trip:
        """Trip with every collection the dashboard and day views read."""
        result = await db.execute(
            select(Trip)
            .where(Trip.id == trip_id, Trip.user_id == user_id)
            .options(
                selectinload(Trip.activities),
                selectinload(Trip.transportation),
                selectinload(Trip.lodging),
                selectinload(Trip.journal_entries),
                selectinload(Trip.locations),
                selectinload(Trip.photos),
                selectinload(Trip.albums),
                selectinload(Trip.checklists),
            )
        )
        trip = result.scalar_one_or_none()
        if not trip:
            raise NotFoundError("Trip not found or access denied")
        if self.apply_auto_status(trip):
            await db.commit()
        return trip

    async def update(self, db: AsyncSession, user_id: int, trip_id: int, payload: TripUpdate) -> Trip:
        trip = await verify_trip_access(db, user_id, trip_id)

        update_data = build_update_data(payload, {"currency": str.upper}, model=Trip)
        if update_data.get("currency"):
            _check_currency(update_data["currency"])
        if update_data.get("status") == TripStatus.COMPLETED and "add_to_places_visited" not in update_data:
            update_data["add_to_places_visited"] = True
        apply_update(trip, update_data)

        if trip.start_date and trip.end_date and trip.end_date < trip.start_date:
            raise ValidationFailed("End date must be on or after start date")

        await db.commit()
        await db.refresh(trip)
        return trip

    async def delete(self, db: AsyncSession, user_id: int, trip_id: int) -> dict:
        trip = await verify_trip_access(db, user_id, trip_id)
        await db.delete(trip)
        await db.commit()
        logger.info(f"Trip deleted: {trip_id} by user {user_id}")
        return {"success": True}

    # ─── Duplication ───

    async def duplicate(self, db: AsyncSession, user_id: int, trip_id: int, payload: DuplicateTripRequest) -> Trip:
        """Copy a trip and the selected collections into a new Planning trip.

        Entity links are carried over when both of their ends were copied.
        """
        result = await db.execute(
            select(Trip)
            .where(Trip.id == trip_id, Trip.user_id == user_id)
            .options(
                selectinload(Trip.activities),
                selectinload(Trip.transportation),
                selectinload(Trip.lodging),
                selectinload(Trip.journal_entries),
                selectinload(Trip.locations),
                selectinload(Trip.photos),
                selectinload(Trip.albums),
                selectinload(Trip.companions),
                selectinload(Trip.checklists).selectinload(Checklist.items),
                selectinload(Trip.entity_links),
            )
        )
        source = result.scalar_one_or_none()
        if not source:
            raise NotFoundError("Trip not found or access denied")
        copy = payload.copy_entities

        new_trip = Trip(
            user_id=user_id,
            title=payload.title,
            description=source.description,
            start_date=source.start_date,
            end_date=source.end_date,
            timezone=source.timezone,
            status=TripStatus.PLANNING,
            privacy_level=source.privacy_level,
            add_to_places_visited=False,
            budget=source.budget,
            currency=source.currency,
        )
        db.add(new_trip)
        await db.flush()

        # (entity type, old id) -> new row, for remapping links
        copied: dict[tuple[str, int], object] = {}

        def add_copies(entity_type: str, rows, model, fields, **extra):
            for row in rows:
                clone = _copy(row, model, fields, trip_id=new_trip.id, **extra)
                db.add(clone)
                copied[(entity_type, row.id)] = clone

        if copy.locations:
            add_copies("LOCATION", source.locations, Location, _LOCATION_FIELDS)
        if copy.activities:
            add_copies("ACTIVITY", source.activities, Activity, _ACTIVITY_FIELDS)
        if copy.lodging:
            add_copies("LODGING", source.lodging, Lodging, _LODGING_FIELDS)
        if copy.journal_entries:
            add_copies("JOURNAL_ENTRY", source.journal_entries, JournalEntry, _JOURNAL_FIELDS)
        if copy.photos:
            add_copies("PHOTO", source.photos, Photo, _PHOTO_FIELDS)
        if copy.photo_albums:
            for album in source.albums:
                photos = [copied[("PHOTO", p.id)] for p in album.photos if ("PHOTO", p.id) in copied]
                clone = _copy(album, PhotoAlbum, _ALBUM_FIELDS, trip_id=new_trip.id, photos=photos)
                db.add(clone)
                copied[("PHOTO_ALBUM", album.id)] = clone
        await db.flush()

        if copy.photo_albums:
            for album in source.albums:
                cover = copied.get(("PHOTO", album.cover_photo_id))
                if cover is not None:
                    copied[("PHOTO_ALBUM", album.id)].cover_photo_id = cover.id

        if copy.transportation:
            for row in source.transportation:
                clone = _copy(row, Transportation, _TRANSPORTATION_FIELDS, trip_id=new_trip.id)
                for fk in ("from_location_id", "to_location_id"):
                    old_id = getattr(row, fk)
                    if old_id and ("LOCATION", old_id) in copied:
                        setattr(clone, fk, copied[("LOCATION", old_id)].id)
                db.add(clone)
                copied[("TRANSPORTATION", row.id)] = clone

        if copy.activities:
            for row in source.activities:
                if row.parent_id and ("ACTIVITY", row.parent_id) in copied:
                    copied[("ACTIVITY", row.id)].parent_id = copied[("ACTIVITY", row.parent_id)].id

        if copy.companions:
            await db.refresh(new_trip, ["companions"])
            new_trip.companions.extend(source.companions)

        if copy.checklists:
            for checklist in source.checklists:
                clone = _copy(
                    checklist, Checklist, ("name", "description", "type", "sort_order"),
                    user_id=user_id, trip_id=new_trip.id, is_default=False,
                )
                clone.items = [
                    _copy(item, ChecklistItem, ("name", "description", "sort_order", "item_metadata"))
                    for item in checklist.items
                ]
                db.add(clone)
        await db.flush()

        remapped = 0
        for link in source.entity_links:
            new_source = copied.get((link.source_type, link.source_id))
            new_target = copied.get((link.target_type, link.target_id))
            if new_source is None or new_target is None:
                continue
            db.add(EntityLink(
                trip_id=new_trip.id,
                source_type=link.source_type,
                source_id=new_source.id,
                target_type=link.target_type,
                target_id=new_target.id,
                relationship=link.relationship,
                sort_order=link.sort_order,
                notes=link.notes,
            ))
            remapped += 1

        await db.commit()
        await db.refresh(new_trip)
        logger.info(f"Trip duplicated: {trip_id} -> {new_trip.id} ({len(copied)} items, {remapped} links)")
        return new_trip


trip_service = TripService()
