from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field, model_validator

TripStatusLiteral = Literal["Dream", "Planning", "Planned", "In Progress", "Completed", "Cancelled"]
PrivacyLiteral = Literal["Private", "Shared", "Public"]


def _check_date_order(start: date | None, end: date | None):
    if start and end and end < start:
        raise ValueError("End date must be on or after start date")


class TripCreate(BaseModel):
    title: str = Field(min_length=1, max_length=500)
    description: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    timezone: str | None = None
    status: TripStatusLiteral = "Planning"
    privacy_level: PrivacyLiteral = "Private"
    add_to_places_visited: bool = False
    budget: float | None = Field(default=None, ge=0)
    currency: str | None = Field(default=None, min_length=3, max_length=3)

    @model_validator(mode="after")
    def dates_in_order(self):
        _check_date_order(self.start_date, self.end_date)
        return self


class TripUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    timezone: str | None = None
    status: TripStatusLiteral | None = None
    privacy_level: PrivacyLiteral | None = None
    add_to_places_visited: bool | None = None
    budget: float | None = Field(default=None, ge=0)
    currency: str | None = Field(default=None, min_length=3, max_length=3)

    @model_validator(mode="after")
    def dates_in_order(self):
        _check_date_order(self.start_date, self.end_date)
        return self


class TripResponse(BaseModel):
    id: int
    user_id: int
    title: str
    description: str | None
    start_date: date | None
    end_date: date | None
    timezone: str | None
    status: str
    privacy_level: str
    add_to_places_visited: bool
    budget: float | None
    currency: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TripListResponse(BaseModel):
    trips: list[TripResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class CopyEntities(BaseModel):
    locations: bool = False
    photos: bool = False
    activities: bool = False
    transportation: bool = False
    lodging: bool = False
    journal_entries: bool = False
    photo_albums: bool = False
    companions: bool = False
    checklists: bool = False


class DuplicateTripRequest(BaseModel):
    title: str = Field(min_length=1, max_length=500)
    copy_entities: CopyEntities = CopyEntities()
