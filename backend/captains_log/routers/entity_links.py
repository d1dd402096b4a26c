"""Entity links, nested under a trip: /api/trips/{trip_id}/links."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from captains_log.database import get_db
from captains_log.dependencies import get_current_user
from captains_log.models.user import User
from captains_log.schemas.entity_link import (
    BulkLinkCreate,
    BulkLinkResult,
    BulkPhotoLink,
    EnrichedEntityLink,
    EntityLinkCreate,
    EntityLinkDelete,
    EntityLinkResponse,
    EntityLinks,
    EntityLinkUpdate,
    EntityType,
    LinkSummary,
)
from captains_log.schemas.photo import PhotoResponse
from captains_log.services.entity_link_service import entity_link_service

router = APIRouter()


@router.post("", status_code=201, response_model=EntityLinkResponse)
async def create_link(
    trip_id: int,
    req: EntityLinkCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    link = await entity_link_service.create_link(db, user.id, trip_id, req)
    return EntityLinkResponse.model_validate(link)


@router.post("/bulk", status_code=201, response_model=BulkLinkResult)
async def bulk_create_links(
    trip_id: int,
    req: BulkLinkCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Link one source to up to 100 targets."""
    return await entity_link_service.bulk_create_links(db, user.id, trip_id, req)


@router.post("/photos", status_code=201, response_model=BulkLinkResult)
async def bulk_link_photos(
    trip_id: int,
    req: BulkPhotoLink,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await entity_link_service.bulk_link_photos(db, user.id, trip_id, req)


@router.get("/summary", response_model=dict[str, LinkSummary])
async def get_trip_link_summary(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Link counts keyed by ``TYPE:id`` for every linked entity in the trip."""
    return await entity_link_service.get_trip_link_summary(db, user.id, trip_id)


@router.get("/from/{entity_type}/{entity_id}", response_model=list[EnrichedEntityLink])
async def get_links_from(
    trip_id: int,
    entity_type: EntityType,
    entity_id: int,
    target_type: EntityType | None = None,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await entity_link_service.get_links_from(db, user.id, trip_id, entity_type, entity_id, target_type)


@router.get("/to/{entity_type}/{entity_id}", response_model=list[EnrichedEntityLink])
async def get_links_to(
    trip_id: int,
    entity_type: EntityType,
    entity_id: int,
    source_type: EntityType | None = None,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await entity_link_service.get_links_to(db, user.id, trip_id, entity_type, entity_id, source_type)


@router.get("/entity/{entity_type}/{entity_id}", response_model=EntityLinks)
async def get_all_links_for_entity(
    trip_id: int,
    entity_type: EntityType,
    entity_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await entity_link_service.get_all_links_for_entity(db, user.id, trip_id, entity_type, entity_id)


@router.get("/entity/{entity_type}/{entity_id}/photos", response_model=list[PhotoResponse])
async def get_photos_for_entity(
    trip_id: int,
    entity_type: EntityType,
    entity_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    photos = await entity_link_service.get_photos_for_entity(db, user.id, trip_id, entity_type, entity_id)
    return [PhotoResponse.model_validate(p) for p in photos]


@router.delete("/entity/{entity_type}/{entity_id}")
async def delete_all_links_for_entity(
    trip_id: int,
    entity_type: EntityType,
    entity_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await entity_link_service.delete_all_links_for_entity(db, user.id, trip_id, entity_type, entity_id)


@router.put("/{link_id}", response_model=EntityLinkResponse)
async def update_link(
    trip_id: int,
    link_id: int,
    req: EntityLinkUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    link = await entity_link_service.update_link(db, user.id, trip_id, link_id, req)
    return EntityLinkResponse.model_validate(link)


@router.delete("/{link_id}", status_code=204)
async def delete_link_by_id(
    trip_id: int,
    link_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await entity_link_service.delete_link_by_id(db, user.id, trip_id, link_id)


@router.post("/delete", status_code=204)
async def delete_link(
    trip_id: int,
    req: EntityLinkDelete,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Delete the link between two entities."""
    await entity_link_service.delete_link(db, user.id, trip_id, req)
