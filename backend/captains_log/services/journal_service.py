from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from captains_log.database import utc_now
from captains_log.models.journal import JournalEntry
from captains_log.services.trip_items import TripItemService


class JournalService(TripItemService):
    model = JournalEntry
    entity_type = "JOURNAL_ENTRY"
    label = "Journal entry"
    label_plural = "journal entries"
    datetime_fields = {"date": None}

    def order_by(self):
        return (JournalEntry.date.desc(), JournalEntry.id.desc())

    async def create(self, db: AsyncSession, user_id: int, payload: BaseModel):
        if payload.date is None:
            payload = payload.model_copy(update={"date": utc_now()})
        return await super().create(db, user_id, payload)


journal_service = JournalService()
