from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from captains_log.database import get_db
from captains_log.dependencies import get_current_user
from captains_log.models.user import User
from captains_log.schemas.checklist import (
    BulkItemUpdate,
    ChecklistCreate,
    ChecklistItemCreate,
    ChecklistItemResponse,
    ChecklistItemUpdate,
    ChecklistResponse,
    ChecklistUpdate,
)
from captains_log.services.checklist_service import checklist_service

router = APIRouter()


@router.get("", response_model=list[ChecklistResponse])
async def list_checklists(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    checklists = await checklist_service.list_for_user(db, user.id)
    return [ChecklistResponse.model_validate(c) for c in checklists]


@router.post("", status_code=201, response_model=ChecklistResponse)
async def create_checklist(
    req: ChecklistCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    checklist = await checklist_service.create(db, user.id, req)
    return ChecklistResponse.model_validate(checklist)


@router.get("/trip/{trip_id}", response_model=list[ChecklistResponse])
async def list_trip_checklists(
    trip_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    checklists = await checklist_service.list_for_trip(db, user.id, trip_id)
    return [ChecklistResponse.model_validate(c) for c in checklists]


# ─── Items ───


@router.put("/items/{item_id}", response_model=ChecklistItemResponse)
async def update_checklist_item(
    item_id: int,
    req: ChecklistItemUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Checking an item stamps ``checked_at``; unchecking clears it."""
    item = await checklist_service.update_item(db, user.id, item_id, req)
    return ChecklistItemResponse.model_validate(item)


@router.delete("/items/{item_id}", status_code=204)
async def delete_checklist_item(
    item_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await checklist_service.delete_item(db, user.id, item_id)


@router.get("/{checklist_id}", response_model=ChecklistResponse)
async def get_checklist(
    checklist_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    checklist = await checklist_service.get(db, user.id, checklist_id)
    return ChecklistResponse.model_validate(checklist)


@router.put("/{checklist_id}", response_model=ChecklistResponse)
async def update_checklist(
    checklist_id: int,
    req: ChecklistUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    checklist = await checklist_service.update(db, user.id, checklist_id, req)
    return ChecklistResponse.model_validate(checklist)


@router.delete("/{checklist_id}", status_code=204)
async def delete_checklist(
    checklist_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await checklist_service.delete(db, user.id, checklist_id)


@router.post("/{checklist_id}/items", status_code=201, response_model=ChecklistItemResponse)
async def add_checklist_item(
    checklist_id: int,
    req: ChecklistItemCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    item = await checklist_service.add_item(db, user.id, checklist_id, req)
    return ChecklistItemResponse.model_validate(item)


@router.patch("/{checklist_id}/items/bulk", response_model=ChecklistResponse)
async def bulk_update_checklist_items(
    checklist_id: int,
    req: BulkItemUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    checklist = await checklist_service.bulk_update_items(db, user.id, checklist_id, req)
    return ChecklistResponse.model_validate(checklist)
