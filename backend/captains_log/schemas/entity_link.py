from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

EntityType = Literal[
    "PHOTO",
    "LOCATION",
    "ACTIVITY",
    "LODGING",
    "TRANSPORTATION",
    "JOURNAL_ENTRY",
    "PHOTO_ALBUM",
]
LinkRelationship = Literal["RELATED", "TAKEN_AT", "OCCURRED_AT", "PART_OF", "DOCUMENTS", "FEATURED_IN"]


class LinkTarget(BaseModel):
    target_type: EntityType
    target_id: int
    relationship: LinkRelationship | None = None
    sort_order: int | None = None
    notes: str | None = None


class EntityLinkCreate(BaseModel):
    source_type: EntityType
    source_id: int
    target_type: EntityType
    target_id: int
    relationship: LinkRelationship | None = None
    sort_order: int | None = None
    notes: str | None = None


class BulkLinkCreate(BaseModel):
    source_type: EntityType
    source_id: int
    targets: list[LinkTarget] = Field(min_length=1, max_length=100)


class BulkPhotoLink(BaseModel):
    photo_ids: list[int] = Field(min_length=1, max_length=100)
    target_type: EntityType
    target_id: int
    relationship: LinkRelationship | None = None


class EntityLinkUpdate(BaseModel):
    relationship: LinkRelationship | None = None
    sort_order: int | None = None
    notes: str | None = None


class EntityLinkDelete(BaseModel):
    source_type: EntityType
    source_id: int
    target_type: EntityType
    target_id: int


class EntityLinkResponse(BaseModel):
    id: int
    trip_id: int
    source_type: str
    source_id: int
    target_type: str
    target_id: int
    relationship: str
    sort_order: int | None
    notes: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class EnrichedEntityLink(EntityLinkResponse):
    source_name: str | None = None
    target_name: str | None = None


class BulkLinkResult(BaseModel):
    created: int
    skipped: int


class LinkSummary(BaseModel):
    entity_type: str
    entity_id: int
    link_counts: dict[str, int]
    total_links: int


class EntityLinks(BaseModel):
    links_from: list[EnrichedEntityLink]
    links_to: list[EnrichedEntityLink]
    summary: LinkSummary
