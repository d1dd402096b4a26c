from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from captains_log.database import get_db
from captains_log.dependencies import get_current_user
from captains_log.models.user import User
from captains_log.schemas.journal import JournalEntryCreate, JournalEntryResponse, JournalEntryUpdate
from captains_log.services.journal_service import journal_service

router = APIRouter()


@router.post("", status_code=201, response_model=JournalEntryResponse)
async def create_journal_entry(
    req: JournalEntryCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    entry = await journal_service.create(db, user.id, req)
    return JournalEntryResponse.model_validate(entry)


@router.get("/trip/{trip_id}", response_model=list[JournalEntryResponse])
async def list_journal_entries(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Newest entries first."""
    entries = await journal_service.list_for_trip(db, user.id, trip_id)
    return [JournalEntryResponse.model_validate(e) for e in entries]


@router.get("/{entry_id}", response_model=JournalEntryResponse)
async def get_journal_entry(
    entry_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    entry = await journal_service.get(db, user.id, entry_id)
    return JournalEntryResponse.model_validate(entry)


@router.put("/{entry_id}", response_model=JournalEntryResponse)
async def update_journal_entry(
    entry_id: int,
    req: JournalEntryUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    entry = await journal_service.update(db, user.id, entry_id, req)
    return JournalEntryResponse.model_validate(entry)


@router.delete("/{entry_id}", status_code=204)
async def delete_journal_entry(
    entry_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await journal_service.delete(db, user.id, entry_id)
