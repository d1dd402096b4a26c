from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from captains_log.schemas.common import ends_before_start

LodgingType = Literal[
    "hotel",
    "hostel",
    "airbnb",
    "vacation_rental",
    "camping",
    "resort",
    "motel",
    "bed_and_breakfast",
    "apartment",
    "friends_family",
    "other",
]

LodgingSort = Literal["check_in", "name", "type"]


class LodgingCreate(BaseModel):
    trip_id: int
    type: LodgingType
    name: str = Field(min_length=1, max_length=500)
    address: str | None = Field(default=None, max_length=1000)
    check_in_date: datetime
    check_out_date: datetime | None = None
    timezone: str | None = None
    confirmation_number: str | None = Field(default=None, max_length=100)
    cost: float | None = Field(default=None, ge=0)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    booking_url: str | None = Field(default=None, max_length=1000)
    notes: str | None = None

    @model_validator(mode="after")
    def check_out_after_check_in(self):
        if ends_before_start(self.check_in_date, self.check_out_date):
            raise ValueError("Check-out date must be on or after check-in date")
        return self


class LodgingUpdate(BaseModel):
    type: LodgingType | None = None
    name: str | None = Field(default=None, min_length=1, max_length=500)
    address: str | None = Field(default=None, max_length=1000)
    check_in_date: datetime | None = None
    check_out_date: datetime | None = None
    timezone: str | None = None
    confirmation_number: str | None = Field(default=None, max_length=100)
    cost: float | None = Field(default=None, ge=0)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    booking_url: str | None = Field(default=None, max_length=1000)
    notes: str | None = None


class LodgingResponse(BaseModel):
    id: int
    trip_id: int
    type: str
    name: str
    address: str | None
    check_in_date: datetime | None
    check_out_date: datetime | None
    timezone: str | None
    confirmation_number: str | None
    cost: float | None
    currency: str | None
    booking_url: str | None
    notes: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class LodgingBulkFields(BaseModel):
    type: LodgingType | None = None
    notes: str | None = None


class LodgingBulkUpdate(BaseModel):
    ids: list[int] = Field(min_length=1)
    updates: LodgingBulkFields
