"""Photo metadata and albums. Files themselves live outside the API."""

import logging

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from captains_log.errors import NotFoundError
from captains_log.models.photo import Photo, PhotoAlbum
from captains_log.models.trip import Trip
from captains_log.services.crud import cleanup_entity_links, verify_entity_access
from captains_log.services.trip_items import TripItemService

logger = logging.getLogger(__name__)


class PhotoService(TripItemService):
    model = Photo
    entity_type = "PHOTO"
    label = "Photo"
    label_plural = "photos"
    datetime_fields = {"taken_at": None}

    def order_by(self):
        return (Photo.taken_at.desc().nulls_last(), Photo.created_at.desc())

    async def delete(self, db: AsyncSession, user_id: int, entity_id: int) -> dict:
        photo, trip = await verify_entity_access(db, user_id, Photo, entity_id, self.label)

        await db.execute(
            update(PhotoAlbum)
            .where(PhotoAlbum.cover_photo_id == photo.id)
            .values(cover_photo_id=None)
            .execution_options(synchronize_session=False)
        )
        await cleanup_entity_links(db, trip.id, self.entity_type, photo.id)
        await db.delete(photo)
        await db.commit()
        return {"success": True}


class AlbumService(TripItemService):
    model = PhotoAlbum
    entity_type = "PHOTO_ALBUM"
    label = "Album"
    label_plural = "albums"
    refresh_relationships = ("photos",)

    def order_by(self):
        return (PhotoAlbum.created_at.desc(),)

    async def validate_references(self, db: AsyncSession, trip: Trip, values: dict):
        if values.get("cover_photo_id"):
            await self._verify_in_trip(db, Photo, values["cover_photo_id"], trip.id, "Photo")

    async def add_photos(self, db: AsyncSession, user_id: int, album_id: int, photo_ids: list[int]) -> dict:
        """Append photos to the album, skipping ones already in it."""
        album, trip = await verify_entity_access(db, user_id, PhotoAlbum, album_id, self.label)

        existing = {p.id for p in album.photos}
        added = 0
        for photo_id in dict.fromkeys(photo_ids):
            photo = await self._verify_in_trip(db, Photo, photo_id, trip.id, "Photo")
            if photo.id in existing:
                continue
            album.photos.append(photo)
            existing.add(photo.id)
            added += 1

        await db.commit()
        logger.info(f"Added {added} photos to album {album.id}")
        return {"success": True, "added": added, "skipped": len(photo_ids) - added}

    async def remove_photo(self, db: AsyncSession, user_id: int, album_id: int, photo_id: int) -> dict:
        album, _ = await verify_entity_access(db, user_id, PhotoAlbum, album_id, self.label)

        photo = next((p for p in album.photos if p.id == photo_id), None)
        if photo is None:
            raise NotFoundError("Photo not found in album")
        album.photos.remove(photo)
        if album.cover_photo_id == photo_id:
            album.cover_photo_id = None
        await db.commit()
        return {"success": True}


photo_service = PhotoService()
album_service = AlbumService()
