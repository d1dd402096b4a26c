from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from captains_log.schemas.common import ends_before_start


class ActivityBase(BaseModel):
    parent_id: int | None = None
    name: str = Field(min_length=1, max_length=500)
    description: str | None = None
    category: str | None = Field(default=None, max_length=100)
    all_day: bool = False
    start_time: datetime | None = None
    end_time: datetime | None = None
    timezone: str | None = None
    cost: float | None = Field(default=None, ge=0)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    booking_url: str | None = Field(default=None, max_length=500)
    booking_reference: str | None = Field(default=None, max_length=255)
    notes: str | None = None


class ActivityCreate(ActivityBase):
    trip_id: int

    @model_validator(mode="after")
    def end_after_start(self):
        if ends_before_start(self.start_time, self.end_time):
            raise ValueError("End time must be after start time")
        return self


class ActivityUpdate(BaseModel):
    parent_id: int | None = None
    name: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = None
    category: str | None = Field(default=None, max_length=100)
    all_day: bool | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    timezone: str | None = None
    cost: float | None = Field(default=None, ge=0)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    booking_url: str | None = Field(default=None, max_length=500)
    booking_reference: str | None = Field(default=None, max_length=255)
    notes: str | None = None


class ActivityResponse(ActivityBase):
    id: int
    trip_id: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ActivityBulkFields(BaseModel):
    category: str | None = Field(default=None, max_length=100)
    timezone: str | None = None
    notes: str | None = None


class ActivityBulkUpdate(BaseModel):
    ids: list[int] = Field(min_length=1)
    updates: ActivityBulkFields
