from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from captains_log.schemas.common import ends_before_start

TransportationType = Literal["flight", "train", "bus", "car", "ferry", "bicycle", "walk", "other"]


class TransportationCreate(BaseModel):
    trip_id: int
    type: TransportationType
    from_location_id: int | None = None
    to_location_id: int | None = None
    from_location_name: str | None = Field(default=None, max_length=500)
    to_location_name: str | None = Field(default=None, max_length=500)
    departure_time: datetime | None = None
    arrival_time: datetime | None = None
    start_timezone: str | None = None
    end_timezone: str | None = None
    carrier: str | None = Field(default=None, max_length=255)
    vehicle_number: str | None = Field(default=None, max_length=100)
    confirmation_number: str | None = Field(default=None, max_length=100)
    cost: float | None = Field(default=None, ge=0)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    notes: str | None = None

    @model_validator(mode="after")
    def arrival_after_departure(self):
        if ends_before_start(self.departure_time, self.arrival_time):
            raise ValueError("Arrival time must be after departure time")
        return self


class TransportationUpdate(BaseModel):
    type: TransportationType | None = None
    from_location_id: int | None = None
    to_location_id: int | None = None
    from_location_name: str | None = Field(default=None, max_length=500)
    to_location_name: str | None = Field(default=None, max_length=500)
    departure_time: datetime | None = None
    arrival_time: datetime | None = None
    start_timezone: str | None = None
    end_timezone: str | None = None
    carrier: str | None = Field(default=None, max_length=255)
    vehicle_number: str | None = Field(default=None, max_length=100)
    confirmation_number: str | None = Field(default=None, max_length=100)
    cost: float | None = Field(default=None, ge=0)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    notes: str | None = None


class TransportationResponse(BaseModel):
    id: int
    trip_id: int
    type: str
    from_location_id: int | None
    to_location_id: int | None
    from_location_name: str | None
    to_location_name: str | None
    origin_name: str | None
    destination_name: str | None
    departure_time: datetime | None
    arrival_time: datetime | None
    start_timezone: str | None
    end_timezone: str | None
    carrier: str | None
    vehicle_number: str | None
    confirmation_number: str | None
    cost: float | None
    currency: str | None
    notes: str | None
    duration: str = ""
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TransportationBulkFields(BaseModel):
    type: TransportationType | None = None
    carrier: str | None = Field(default=None, max_length=255)
    notes: str | None = None


class TransportationBulkUpdate(BaseModel):
    ids: list[int] = Field(min_length=1)
    updates: TransportationBulkFields
