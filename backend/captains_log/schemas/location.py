from datetime import datetime

from pydantic import BaseModel, Field


class LocationCreate(BaseModel):
    trip_id: int
    name: str = Field(min_length=1, max_length=500)
    address: str | None = None
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    category: str | None = Field(default=None, max_length=100)
    visit_datetime: datetime | None = None
    visit_duration_minutes: int | None = Field(default=None, ge=0)
    notes: str | None = None


class LocationUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=500)
    address: str | None = None
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    category: str | None = Field(default=None, max_length=100)
    visit_datetime: datetime | None = None
    visit_duration_minutes: int | None = Field(default=None, ge=0)
    notes: str | None = None


class LocationResponse(BaseModel):
    id: int
    trip_id: int
    name: str
    address: str | None
    latitude: float | None
    longitude: float | None
    category: str | None
    visit_datetime: datetime | None
    visit_duration_minutes: int | None
    notes: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
