from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class CompanionCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=20)
    notes: str | None = None
    relationship: str | None = Field(default=None, max_length=255)
    avatar_url: str | None = Field(default=None, max_length=500)
    dietary_preferences: list[str] = []


class CompanionUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=20)
    notes: str | None = None
    relationship: str | None = Field(default=None, max_length=255)
    avatar_url: str | None = Field(default=None, max_length=500)
    dietary_preferences: list[str] | None = None


class CompanionResponse(BaseModel):
    id: int
    user_id: int
    name: str
    email: str | None
    phone: str | None
    notes: str | None
    relationship: str | None = Field(default=None, validation_alias="relationship_label")
    avatar_url: str | None
    dietary_preferences: list[str] | None
    is_myself: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TripCompanionLink(BaseModel):
    trip_id: int
    companion_id: int
