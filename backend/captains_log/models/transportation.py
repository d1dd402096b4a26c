from datetime import datetime
from decimal import Decimal

from sqlalchemy import ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from captains_log.database import Base, UTCDateTime, utc_now
from captains_log.utils.timezone import calculate_duration


class Transportation(Base):
    __tablename__ = "transportation"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    trip_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    from_location_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("locations.id", ondelete="SET NULL"))
    to_location_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("locations.id", ondelete="SET NULL"))
    # Display fallbacks when no location row is attached
    from_location_name: Mapped[str | None] = mapped_column(String(500))
    to_location_name: Mapped[str | None] = mapped_column(String(500))
    departure_time: Mapped[datetime | None] = mapped_column(UTCDateTime)
    arrival_time: Mapped[datetime | None] = mapped_column(UTCDateTime)
    start_timezone: Mapped[str | None] = mapped_column(String(100))
    end_timezone: Mapped[str | None] = mapped_column(String(100))
    carrier: Mapped[str | None] = mapped_column(String(255))
    vehicle_number: Mapped[str | None] = mapped_column(String(100))
    confirmation_number: Mapped[str | None] = mapped_column(String(100))
    cost: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    currency: Mapped[str | None] = mapped_column(String(3))
    notes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now, onupdate=utc_now)

    trip: Mapped["Trip"] = relationship(back_populates="transportation")
    from_location: Mapped["Location"] = relationship(foreign_keys=[from_location_id], lazy="selectin")
    to_location: Mapped["Location"] = relationship(foreign_keys=[to_location_id], lazy="selectin")

    @property
    def origin_name(self) -> str | None:
        if self.from_location is not None:
            return self.from_location.name
        return self.from_location_name

    @property
    def destination_name(self) -> str | None:
        if self.to_location is not None:
            return self.to_location.name
        return self.to_location_name

    @property
    def duration(self) -> str:
        return calculate_duration(self.departure_time, self.arrival_time)
