"""Shared service helpers: ownership checks, partial updates, link cleanup."""

import logging

from pydantic import BaseModel
from sqlalchemy import and_, delete, inspect, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from captains_log.errors import ForbiddenError, NotFoundError, ValidationFailed
from captains_log.models.entity_link import EntityLink
from captains_log.models.trip import Trip

logger = logging.getLogger(__name__)


async def verify_trip_access(db: AsyncSession, user_id: int, trip_id: int) -> Trip:
    """Return the trip if ``user_id`` owns it. Missing and foreign trips look the same."""
    result = await db.execute(select(Trip).where(Trip.id == trip_id, Trip.user_id == user_id))
    trip = result.scalar_one_or_none()
    if not trip:
        raise NotFoundError("Trip not found or access denied")
    return trip


async def verify_entity_access(db: AsyncSession, user_id: int, model, entity_id: int, entity_name: str):
    """Load a trip sub-entity and check the caller owns its trip.

    Returns ``(entity, trip)``. Raises 404 when the entity is missing and 403
    when it belongs to another user's trip.
    """
    entity = await db.get(model, entity_id)
    if entity is None:
        raise NotFoundError(f"{entity_name} not found")

    trip = await db.get(Trip, entity.trip_id)
    if trip is None or trip.user_id != user_id:
        raise ForbiddenError("Access denied")
    return entity, trip


def required_columns(model) -> set[str]:
    """Attribute names of the model's NOT NULL columns, primary key excluded."""
    return {
        key for key, column in inspect(model).columns.items()
        if not column.nullable and not column.primary_key
    }


def build_update_data(payload: BaseModel, transformers: dict | None = None, model=None) -> dict:
    """Only the fields the client actually sent. Empty strings clear a field.

    ``transformers`` maps a field name to a callable applied to non-null values.
    With ``model`` given, clearing one of its NOT NULL columns is a 400.
    """
    required = required_columns(model) if model is not None else set()
    update_data = {}
    for key, value in payload.model_dump(exclude_unset=True).items():
        if value == "":
            value = None
        if value is None and key in required:
            raise ValidationFailed(f"{key} cannot be null")
        if value is not None and transformers and key in transformers:
            value = transformers[key](value)
        update_data[key] = value
    return update_data


def apply_update(entity, update_data: dict):
    for key, value in update_data.items():
        setattr(entity, key, value)


def entity_link_filter(trip_id: int, entity_type: str, entity_ids: list[int]):
    return and_(
        EntityLink.trip_id == trip_id,
        or_(
            and_(EntityLink.source_type == entity_type, EntityLink.source_id.in_(entity_ids)),
            and_(EntityLink.target_type == entity_type, EntityLink.target_id.in_(entity_ids)),
        ),
    )


async def cleanup_entity_links(db: AsyncSession, trip_id: int, entity_type: str, entity_ids: int | list[int]) -> int:
    """Delete every link the given entities take part in, as source or target."""
    if isinstance(entity_ids, int):
        entity_ids = [entity_ids]
    result = await db.execute(
        delete(EntityLink)
        .where(entity_link_filter(trip_id, entity_type, entity_ids))
        .execution_options(synchronize_session=False)
    )
    if result.rowcount:
        logger.debug(f"Removed {result.rowcount} links for {entity_type} {entity_ids}")
    return result.rowcount
