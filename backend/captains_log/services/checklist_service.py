"""Checklists (packing lists, places-to-visit lists) and their items."""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from captains_log.database import utc_now
from captains_log.errors import NotFoundError
from captains_log.models.checklist import Checklist, ChecklistItem
from captains_log.schemas.checklist import (
    BulkItemUpdate,
    ChecklistCreate,
    ChecklistItemCreate,
    ChecklistItemUpdate,
    ChecklistUpdate,
)
from captains_log.services.crud import build_update_data, verify_trip_access

logger = logging.getLogger(__name__)


def _set_checked(item: ChecklistItem, is_checked: bool):
    if is_checked and not item.is_checked:
        item.checked_at = utc_now()
    elif not is_checked:
        item.checked_at = None
    item.is_checked = is_checked


class ChecklistService:

    # ─── Checklists ───

    async def _get_owned(self, db: AsyncSession, user_id: int, checklist_id: int) -> Checklist:
        result = await db.execute(
            select(Checklist).where(Checklist.id == checklist_id, Checklist.user_id == user_id)
        )
        checklist = result.scalar_one_or_none()
        if not checklist:
            raise NotFoundError("Checklist not found")
        return checklist

    async def _reload(self, db: AsyncSession, checklist: Checklist) -> Checklist:
        await db.refresh(checklist)
        await db.refresh(checklist, ["items"])
        return checklist

    async def list_for_user(self, db: AsyncSession, user_id: int) -> list[Checklist]:
        result = await db.execute(
            select(Checklist)
            .where(Checklist.user_id == user_id)
            .order_by(Checklist.sort_order.asc(), Checklist.created_at.asc())
        )
        return list(result.scalars().all())

    async def list_for_trip(self, db: AsyncSession, user_id: int, trip_id: int) -> list[Checklist]:
        await verify_trip_access(db, user_id, trip_id)
        result = await db.execute(
            select(Checklist)
            .where(Checklist.trip_id == trip_id)
            .order_by(Checklist.sort_order.asc(), Checklist.created_at.asc())
        )
        return list(result.scalars().all())

    async def get(self, db: AsyncSession, user_id: int, checklist_id: int) -> Checklist:
        return await self._get_owned(db, user_id, checklist_id)

    async def create(self, db: AsyncSession, user_id: int, payload: ChecklistCreate) -> Checklist:
        if payload.trip_id is not None:
            await verify_trip_access(db, user_id, payload.trip_id)

        sort_order = payload.sort_order
        if sort_order is None:
            current = await db.execute(
                select(func.max(Checklist.sort_order)).where(Checklist.user_id == user_id)
            )
            sort_order = (current.scalar() or 0) + 1

        checklist = Checklist(
            user_id=user_id,
            trip_id=payload.trip_id,
            name=payload.name,
            description=payload.description,
            type=payload.type,
            sort_order=sort_order,
        )
        checklist.items = [
            ChecklistItem(
                name=item.name,
                description=item.description,
                sort_order=item.sort_order if item.sort_order is not None else i,
                item_metadata=item.metadata,
            )
            for i, item in enumerate(payload.items)
        ]
        db.add(checklist)
        await db.commit()
        logger.info(f"Checklist created: {checklist.id} ({len(payload.items)} items) by user {user_id}")
        return await self._reload(db, checklist)

    async def update(self, db: AsyncSession, user_id: int, checklist_id: int, payload: ChecklistUpdate) -> Checklist:
        checklist = await self._get_owned(db, user_id, checklist_id)
        update_data = build_update_data(payload, model=Checklist)
        if update_data.get("trip_id") is not None:
            await verify_trip_access(db, user_id, update_data["trip_id"])
        for key, value in update_data.items():
            setattr(checklist, key, value)
        await db.commit()
        return await self._reload(db, checklist)

    async def delete(self, db: AsyncSession, user_id: int, checklist_id: int) -> dict:
        checklist = await self._get_owned(db, user_id, checklist_id)
        await db.delete(checklist)
        await db.commit()
        return {"success": True}

    # ─── Items ───

    async def _get_owned_item(self, db: AsyncSession, user_id: int, item_id: int) -> ChecklistItem:
        result = await db.execute(
            select(ChecklistItem)
            .join(Checklist, Checklist.id == ChecklistItem.checklist_id)
            .where(ChecklistItem.id == item_id, Checklist.user_id == user_id)
        )
        item = result.scalar_one_or_none()
        if not item:
            raise NotFoundError("Checklist item not found")
        return item

    async def add_item(
        self, db: AsyncSession, user_id: int, checklist_id: int, payload: ChecklistItemCreate
    ) -> ChecklistItem:
        checklist = await self._get_owned(db, user_id, checklist_id)
        sort_order = payload.sort_order
        if sort_order is None:
            sort_order = max((i.sort_order for i in checklist.items), default=-1) + 1

        item = ChecklistItem(
            checklist_id=checklist.id,
            name=payload.name,
            description=payload.description,
            sort_order=sort_order,
            item_metadata=payload.metadata,
        )
        db.add(item)
        await db.commit()
        await db.refresh(item)
        return item

    async def update_item(
        self, db: AsyncSession, user_id: int, item_id: int, payload: ChecklistItemUpdate
    ) -> ChecklistItem:
        item = await self._get_owned_item(db, user_id, item_id)
        update_data = build_update_data(payload, model=ChecklistItem)

        if "is_checked" in update_data:
            _set_checked(item, bool(update_data.pop("is_checked")))
        if "metadata" in update_data:
            item.item_metadata = update_data.pop("metadata")
        for key, value in update_data.items():
            setattr(item, key, value)

        await db.commit()
        await db.refresh(item)
        return item

    async def delete_item(self, db: AsyncSession, user_id: int, item_id: int) -> dict:
        item = await self._get_owned_item(db, user_id, item_id)
        await db.delete(item)
        await db.commit()
        return {"success": True}

    async def bulk_update_items(
        self, db: AsyncSession, user_id: int, checklist_id: int, payload: BulkItemUpdate
    ) -> Checklist:
        checklist = await self._get_owned(db, user_id, checklist_id)
        wanted = set(payload.item_ids)
        for item in checklist.items:
            if item.id in wanted:
                _set_checked(item, payload.is_checked)
        await db.commit()
        return await self._reload(db, checklist)


checklist_service = ChecklistService()
