from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

ChecklistType = Literal["custom", "airports", "countries", "cities", "us_states"]


class ChecklistItemCreate(BaseModel):
    name: str = Field(min_length=1, max_length=500)
    description: str | None = None
    sort_order: int | None = None
    metadata: dict | None = None


class ChecklistItemUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = None
    is_checked: bool | None = None
    sort_order: int | None = None
    metadata: dict | None = None


class ChecklistItemResponse(BaseModel):
    id: int
    checklist_id: int
    name: str
    description: str | None
    is_checked: bool
    is_default: bool
    sort_order: int
    metadata: dict | None = Field(default=None, validation_alias="item_metadata")
    checked_at: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ChecklistCreate(BaseModel):
    name: str = Field(min_length=1, max_length=500)
    description: str | None = None
    type: ChecklistType = "custom"
    trip_id: int | None = None
    sort_order: int | None = None
    items: list[ChecklistItemCreate] = []


class ChecklistUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = None
    trip_id: int | None = None
    sort_order: int | None = None


class ChecklistStats(BaseModel):
    total: int
    checked: int
    percentage: int


class ChecklistResponse(BaseModel):
    id: int
    user_id: int
    trip_id: int | None
    name: str
    description: str | None
    type: str
    is_default: bool
    sort_order: int
    items: list[ChecklistItemResponse]
    stats: ChecklistStats
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class BulkItemUpdate(BaseModel):
    item_ids: list[int] = Field(min_length=1)
    is_checked: bool
