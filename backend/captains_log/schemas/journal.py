from datetime import datetime

from pydantic import BaseModel, Field


class JournalEntryCreate(BaseModel):
    trip_id: int
    title: str | None = Field(default=None, max_length=500)
    content: str = Field(min_length=1)
    date: datetime | None = None
    entry_type: str = Field(default="daily", max_length=20)


class JournalEntryUpdate(BaseModel):
    title: str | None = Field(default=None, max_length=500)
    content: str | None = Field(default=None, min_length=1)
    date: datetime | None = None
    entry_type: str | None = Field(default=None, max_length=20)


class JournalEntryResponse(BaseModel):
    id: int
    trip_id: int
    title: str | None
    content: str
    date: datetime
    entry_type: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
