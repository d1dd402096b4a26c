from datetime import date, datetime

from pydantic import BaseModel, Field

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class TagCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    color: str | None = Field(default=None, pattern=HEX_COLOR)
    text_color: str | None = Field(default=None, pattern=HEX_COLOR)


class TagUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    color: str | None = Field(default=None, pattern=HEX_COLOR)
    text_color: str | None = Field(default=None, pattern=HEX_COLOR)


class TagResponse(BaseModel):
    id: int
    user_id: int
    name: str
    color: str | None
    text_color: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TagWithCount(TagResponse):
    trip_count: int = 0


class TaggedTrip(BaseModel):
    id: int
    title: str
    status: str
    start_date: date | None
    end_date: date | None

    model_config = {"from_attributes": True}


class TagDetailResponse(TagResponse):
    trips: list[TaggedTrip] = []


class TripTagLink(BaseModel):
    trip_id: int
    tag_id: int
