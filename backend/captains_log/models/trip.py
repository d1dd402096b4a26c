from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Boolean, Column, Date, ForeignKey, Integer, Numeric, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from captains_log.database import Base, UTCDateTime, utc_now


class TripStatus:
    DREAM = "Dream"
    PLANNING = "Planning"
    PLANNED = "Planned"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"

    ALL = (DREAM, PLANNING, PLANNED, IN_PROGRESS, COMPLETED, CANCELLED)
    # Statuses the date-driven refresh never overrides
    FINAL = (COMPLETED, CANCELLED)


class PrivacyLevel:
    PRIVATE = "Private"
    SHARED = "Shared"
    PUBLIC = "Public"

    ALL = (PRIVATE, SHARED, PUBLIC)


trip_companions = Table(
    "trip_companions",
    Base.metadata,
    Column("trip_id", Integer, ForeignKey("trips.id", ondelete="CASCADE"), primary_key=True),
    Column("companion_id", Integer, ForeignKey("companions.id", ondelete="CASCADE"), primary_key=True),
)


trip_tag_assignments = Table(
    "trip_tag_assignments",
    Base.metadata,
    Column("trip_id", Integer, ForeignKey("trips.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("trip_tags.id", ondelete="CASCADE"), primary_key=True),
    Column("created_at", UTCDateTime, default=utc_now),
)


class Trip(Base):
    __tablename__ = "trips"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    start_date: Mapped[date | None] = mapped_column(Date)
    end_date: Mapped[date | None] = mapped_column(Date)
    timezone: Mapped[str | None] = mapped_column(String(100))
    status: Mapped[str] = mapped_column(String(20), default=TripStatus.PLANNING)
    privacy_level: Mapped[str] = mapped_column(String(20), default=PrivacyLevel.PRIVATE)
    add_to_places_visited: Mapped[bool] = mapped_column(Boolean, default=False)
    budget: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    currency: Mapped[str] = mapped_column(String(3), default="USD")
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now, onupdate=utc_now)

    activities: Mapped[list["Activity"]] = relationship(
        back_populates="trip", cascade="all, delete-orphan"
    )
    transportation: Mapped[list["Transportation"]] = relationship(
        back_populates="trip", cascade="all, delete-orphan"
    )
    lodging: Mapped[list["Lodging"]] = relationship(
        back_populates="trip", cascade="all, delete-orphan"
    )
    journal_entries: Mapped[list["JournalEntry"]] = relationship(
        back_populates="trip", cascade="all, delete-orphan"
    )
    locations: Mapped[list["Location"]] = relationship(
        back_populates="trip", cascade="all, delete-orphan"
    )
    photos: Mapped[list["Photo"]] = relationship(
        back_populates="trip", cascade="all, delete-orphan"
    )
    albums: Mapped[list["PhotoAlbum"]] = relationship(
        back_populates="trip", cascade="all, delete-orphan"
    )
    entity_links: Mapped[list["EntityLink"]] = relationship(cascade="all, delete-orphan")
    checklists: Mapped[list["Checklist"]] = relationship(back_populates="trip")
    companions: Mapped[list["Companion"]] = relationship(secondary=trip_companions, back_populates="trips")
    tags: Mapped[list["TripTag"]] = relationship(secondary=trip_tag_assignments, back_populates="trips")
