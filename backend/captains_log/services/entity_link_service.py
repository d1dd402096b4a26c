"""Typed links between trip sub-entities (photo taken at a location, etc.).

Links replace direct foreign keys between entity kinds, so every sub-entity
can be attached to any other one in the same trip.
"""

import logging
from collections import defaultdict

from sqlalchemy import and_, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from captains_log.errors import NotFoundError, ValidationFailed
from captains_log.models.activity import Activity
from captains_log.models.entity_link import EntityLink
from captains_log.models.journal import JournalEntry
from captains_log.models.location import Location
from captains_log.models.lodging import Lodging
from captains_log.models.photo import Photo, PhotoAlbum
from captains_log.models.transportation import Transportation
from captains_log.schemas.entity_link import (
    BulkLinkCreate,
    BulkPhotoLink,
    EntityLinkCreate,
    EntityLinkDelete,
    EntityLinkUpdate,
)
from captains_log.services.crud import entity_link_filter, verify_trip_access

logger = logging.getLogger(__name__)

ENTITY_MODELS = {
    "PHOTO": Photo,
    "LOCATION": Location,
    "ACTIVITY": Activity,
    "LODGING": Lodging,
    "TRANSPORTATION": Transportation,
    "JOURNAL_ENTRY": JournalEntry,
    "PHOTO_ALBUM": PhotoAlbum,
}


def display_name(entity_type: str, entity) -> str:
    """Human label for an entity in link listings."""
    if entity_type == "PHOTO":
        return entity.caption or f"Photo #{entity.id}"
    if entity_type == "TRANSPORTATION":
        name = entity.type.capitalize()
        if entity.carrier:
            name = f"{name} - {entity.carrier}"
        if entity.destination_name:
            name = f"{name} to {entity.destination_name}"
        return name
    if entity_type == "JOURNAL_ENTRY":
        return entity.title or "Untitled entry"
    return entity.name


def default_relationship(source_type: str, target_type: str) -> str:
    if source_type == "PHOTO" and target_type == "LOCATION":
        return "TAKEN_AT"
    if source_type == "PHOTO" and target_type in ("PHOTO_ALBUM", "JOURNAL_ENTRY"):
        return "FEATURED_IN"
    if source_type in ("ACTIVITY", "LODGING") and target_type == "LOCATION":
        return "OCCURRED_AT"
    if source_type == "JOURNAL_ENTRY":
        return "DOCUMENTS"
    return "RELATED"


def _endpoint_filter(trip_id: int, source_type: str, source_id: int, target_type: str, target_id: int):
    return and_(
        EntityLink.trip_id == trip_id,
        EntityLink.source_type == source_type,
        EntityLink.source_id == source_id,
        EntityLink.target_type == target_type,
        EntityLink.target_id == target_id,
    )


class EntityLinkService:
    """Create, query, and remove entity links within one trip."""

    # ─── Helpers ───

    async def verify_entity_in_trip(self, db: AsyncSession, trip_id: int, entity_type: str, entity_id: int):
        model = ENTITY_MODELS.get(entity_type)
        if model is None:
            raise ValidationFailed(f"Unknown entity type: {entity_type}")
        entity = await db.get(model, entity_id)
        if entity is None or entity.trip_id != trip_id:
            raise NotFoundError(f"{entity_type} with ID {entity_id} not found in trip {trip_id}")
        return entity

    async def _link_exists(self, db: AsyncSession, trip_id: int, source_type, source_id, target_type, target_id) -> bool:
        result = await db.execute(
            select(EntityLink.id).where(_endpoint_filter(trip_id, source_type, source_id, target_type, target_id))
        )
        return result.first() is not None

    async def _names(self, db: AsyncSession, refs: set[tuple[str, int]]) -> dict[tuple[str, int], str]:
        """Display names for (type, id) pairs, one query per entity type."""
        by_type = defaultdict(set)
        for entity_type, entity_id in refs:
            by_type[entity_type].add(entity_id)

        names = {}
        for entity_type, ids in by_type.items():
            model = ENTITY_MODELS[entity_type]
            result = await db.execute(select(model).where(model.id.in_(ids)))
            for entity in result.scalars().all():
                names[(entity_type, entity.id)] = display_name(entity_type, entity)
        return names

    async def _enrich(self, db: AsyncSession, links: list[EntityLink]) -> list[dict]:
        refs = set()
        for link in links:
            refs.add((link.source_type, link.source_id))
            refs.add((link.target_type, link.target_id))
        names = await self._names(db, refs)

        return [
            {
                "id": link.id,
                "trip_id": link.trip_id,
                "source_type": link.source_type,
                "source_id": link.source_id,
                "target_type": link.target_type,
                "target_id": link.target_id,
                "relationship": link.relationship,
                "sort_order": link.sort_order,
                "notes": link.notes,
                "created_at": link.created_at,
                "source_name": names.get((link.source_type, link.source_id)),
                "target_name": names.get((link.target_type, link.target_id)),
            }
            for link in links
        ]

    @staticmethod
    def _ordered(query):
        return query.order_by(EntityLink.sort_order.asc().nulls_last(), EntityLink.created_at.asc(), EntityLink.id.asc())

    # ─── Create ───

    async def create_link(self, db: AsyncSession, user_id: int, trip_id: int, payload: EntityLinkCreate) -> EntityLink:
        await verify_trip_access(db, user_id, trip_id)
        await self.verify_entity_in_trip(db, trip_id, payload.source_type, payload.source_id)
        await self.verify_entity_in_trip(db, trip_id, payload.target_type, payload.target_id)

        if payload.source_type == payload.target_type and payload.source_id == payload.target_id:
            raise ValidationFailed("Cannot link an entity to itself")
        if await self._link_exists(
            db, trip_id, payload.source_type, payload.source_id, payload.target_type, payload.target_id
        ):
            raise ValidationFailed("Link already exists between these entities")

        link = EntityLink(
            trip_id=trip_id,
            source_type=payload.source_type,
            source_id=payload.source_id,
            target_type=payload.target_type,
            target_id=payload.target_id,
            relationship=payload.relationship or default_relationship(payload.source_type, payload.target_type),
            sort_order=payload.sort_order,
            notes=payload.notes,
        )
        db.add(link)
        await db.commit()
        await db.refresh(link)
        return link

    async def bulk_create_links(self, db: AsyncSession, user_id: int, trip_id: int, payload: BulkLinkCreate) -> dict:
        """Link one source to many targets. Self-links and existing links are skipped."""
        await verify_trip_access(db, user_id, trip_id)
        await self.verify_entity_in_trip(db, trip_id, payload.source_type, payload.source_id)
        for target in payload.targets:
            await self.verify_entity_in_trip(db, trip_id, target.target_type, target.target_id)

        created = skipped = 0
        seen = set()
        for target in payload.targets:
            key = (target.target_type, target.target_id)
            if (
                key == (payload.source_type, payload.source_id)
                or key in seen
                or await self._link_exists(
                    db, trip_id, payload.source_type, payload.source_id, target.target_type, target.target_id
                )
            ):
                skipped += 1
                continue
            seen.add(key)
            db.add(EntityLink(
                trip_id=trip_id,
                source_type=payload.source_type,
                source_id=payload.source_id,
                target_type=target.target_type,
                target_id=target.target_id,
                relationship=target.relationship or default_relationship(payload.source_type, target.target_type),
                sort_order=target.sort_order,
                notes=target.notes,
            ))
            created += 1

        await db.commit()
        return {"created": created, "skipped": skipped}

    async def bulk_link_photos(self, db: AsyncSession, user_id: int, trip_id: int, payload: BulkPhotoLink) -> dict:
        await verify_trip_access(db, user_id, trip_id)
        await self.verify_entity_in_trip(db, trip_id, payload.target_type, payload.target_id)
        for photo_id in payload.photo_ids:
            await self.verify_entity_in_trip(db, trip_id, "PHOTO", photo_id)

        relationship = payload.relationship or default_relationship("PHOTO", payload.target_type)
        created = skipped = 0
        for photo_id in dict.fromkeys(payload.photo_ids):
            if (payload.target_type == "PHOTO" and payload.target_id == photo_id) or await self._link_exists(
                db, trip_id, "PHOTO", photo_id, payload.target_type, payload.target_id
            ):
                skipped += 1
                continue
            db.add(EntityLink(
                trip_id=trip_id,
                source_type="PHOTO",
                source_id=photo_id,
                target_type=payload.target_type,
                target_id=payload.target_id,
                relationship=relationship,
            ))
            created += 1
        skipped += len(payload.photo_ids) - len(set(payload.photo_ids))

        await db.commit()
        return {"created": created, "skipped": skipped}

    # ─── Query ───

    async def get_links_from(
        self, db: AsyncSession, user_id: int, trip_id: int, entity_type: str, entity_id: int,
        target_type: str | None = None,
    ) -> list[dict]:
        await verify_trip_access(db, user_id, trip_id)
        query = select(EntityLink).where(
            EntityLink.trip_id == trip_id,
            EntityLink.source_type == entity_type,
            EntityLink.source_id == entity_id,
        )
        if target_type:
            query = query.where(EntityLink.target_type == target_type)
        result = await db.execute(self._ordered(query))
        return await self._enrich(db, list(result.scalars().all()))

    async def get_links_to(
        self, db: AsyncSession, user_id: int, trip_id: int, entity_type: str, entity_id: int,
        source_type: str | None = None,
    ) -> list[dict]:
        await verify_trip_access(db, user_id, trip_id)
        query = select(EntityLink).where(
            EntityLink.trip_id == trip_id,
            EntityLink.target_type == entity_type,
            EntityLink.target_id == entity_id,
        )
        if source_type:
            query = query.where(EntityLink.source_type == source_type)
        result = await db.execute(self._ordered(query))
        return await self._enrich(db, list(result.scalars().all()))

    async def get_all_links_for_entity(
        self, db: AsyncSession, user_id: int, trip_id: int, entity_type: str, entity_id: int
    ) -> dict:
        links_from = await self.get_links_from(db, user_id, trip_id, entity_type, entity_id)
        links_to = await self.get_links_to(db, user_id, trip_id, entity_type, entity_id)

        link_counts: dict[str, int] = defaultdict(int)
        for link in links_from:
            link_counts[link["target_type"]] += 1
        for link in links_to:
            link_counts[link["source_type"]] += 1

        return {
            "links_from": links_from,
            "links_to": links_to,
            "summary": {
                "entity_type": entity_type,
                "entity_id": entity_id,
                "link_counts": dict(link_counts),
                "total_links": len(links_from) + len(links_to),
            },
        }

    async def get_photos_for_entity(
        self, db: AsyncSession, user_id: int, trip_id: int, entity_type: str, entity_id: int
    ) -> list[Photo]:
        """Photos linked to an entity, in link order."""
        await verify_trip_access(db, user_id, trip_id)
        result = await db.execute(
            self._ordered(
                select(EntityLink.source_id).where(
                    EntityLink.trip_id == trip_id,
                    EntityLink.source_type == "PHOTO",
                    EntityLink.target_type == entity_type,
                    EntityLink.target_id == entity_id,
                )
            )
        )
        photo_ids = list(result.scalars().all())
        if not photo_ids:
            return []

        photos = await db.execute(select(Photo).where(Photo.id.in_(photo_ids)))
        by_id = {photo.id: photo for photo in photos.scalars().all()}
        return [by_id[pid] for pid in photo_ids if pid in by_id]

    async def get_trip_link_summary(self, db: AsyncSession, user_id: int, trip_id: int) -> dict[str, dict]:
        """``"TYPE:id"`` -> link counts for every entity that has at least one link."""
        await verify_trip_access(db, user_id, trip_id)
        result = await db.execute(select(EntityLink).where(EntityLink.trip_id == trip_id))

        summary: dict[str, dict] = {}

        def bump(entity_type: str, entity_id: int, other_type: str):
            key = f"{entity_type}:{entity_id}"
            entry = summary.setdefault(key, {
                "entity_type": entity_type,
                "entity_id": entity_id,
                "link_counts": {},
                "total_links": 0,
            })
            entry["link_counts"][other_type] = entry["link_counts"].get(other_type, 0) + 1
            entry["total_links"] += 1

        for link in result.scalars().all():
            bump(link.source_type, link.source_id, link.target_type)
            bump(link.target_type, link.target_id, link.source_type)
        return summary

    async def get_activity_locations(self, db: AsyncSession, trip_id: int) -> dict[int, int]:
        """Activity id -> linked location id. The caller has already checked access."""
        result = await db.execute(
            select(EntityLink.source_id, EntityLink.target_id)
            .where(
                EntityLink.trip_id == trip_id,
                EntityLink.source_type == "ACTIVITY",
                EntityLink.target_type == "LOCATION",
            )
            .order_by(EntityLink.id)
        )
        locations: dict[int, int] = {}
        for activity_id, location_id in result.all():
            locations.setdefault(activity_id, location_id)
        return locations

    # ─── Update / delete ───

    async def _get_link(self, db: AsyncSession, trip_id: int, link_id: int) -> EntityLink:
        link = await db.get(EntityLink, link_id)
        if link is None or link.trip_id != trip_id:
            raise NotFoundError("Link not found")
        return link

    async def update_link(
        self, db: AsyncSession, user_id: int, trip_id: int, link_id: int, payload: EntityLinkUpdate
    ) -> EntityLink:
        await verify_trip_access(db, user_id, trip_id)
        link = await self._get_link(db, trip_id, link_id)
        for key, value in payload.model_dump(exclude_unset=True).items():
            if key == "relationship" and value is None:
                continue
            setattr(link, key, value)
        await db.commit()
        await db.refresh(link)
        return link

    async def delete_link_by_id(self, db: AsyncSession, user_id: int, trip_id: int, link_id: int):
        await verify_trip_access(db, user_id, trip_id)
        link = await self._get_link(db, trip_id, link_id)
        await db.delete(link)
        await db.commit()

    async def delete_link(self, db: AsyncSession, user_id: int, trip_id: int, payload: EntityLinkDelete):
        await verify_trip_access(db, user_id, trip_id)
        result = await db.execute(
            select(EntityLink).where(
                _endpoint_filter(trip_id, payload.source_type, payload.source_id, payload.target_type, payload.target_id)
            )
        )
        link = result.scalars().first()
        if link is None:
            raise NotFoundError("Link not found")
        await db.delete(link)
        await db.commit()

    async def delete_all_links_for_entity(
        self, db: AsyncSession, user_id: int, trip_id: int, entity_type: str, entity_id: int
    ) -> dict:
        await verify_trip_access(db, user_id, trip_id)
        result = await db.execute(
            delete(EntityLink)
            .where(entity_link_filter(trip_id, entity_type, [entity_id]))
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        return {"deleted": result.rowcount}


entity_link_service = EntityLinkService()
