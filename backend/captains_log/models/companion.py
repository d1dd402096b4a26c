from datetime import datetime

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from captains_log.database import Base, UTCDateTime, utc_now
from captains_log.models.trip import trip_companions


class Companion(Base):
    __tablename__ = "companions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255))
    phone: Mapped[str | None] = mapped_column(String(20))
    notes: Mapped[str | None] = mapped_column(Text)
    relationship_label: Mapped[str | None] = mapped_column("relationship", String(255))
    avatar_url: Mapped[str | None] = mapped_column(String(500))
    dietary_preferences: Mapped[list | None] = mapped_column(JSON().with_variant(JSONB, "postgresql"))
    is_myself: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now, onupdate=utc_now)

    trips: Mapped[list["Trip"]] = relationship(secondary=trip_companions, back_populates="companions")
