import enum

from sqlalchemy import Boolean, ForeignKey, Index, Integer, SmallInteger, String
from sqlalchemy.orm import Mapped, mapped_column
from booking.db.session import Base
from booking.models.common import IntIdMixin, TimestampMixin


class SeatType(enum.IntEnum):
    # Values double as the allocation priority: lower is handed out first.
    AISLE = 1
    WINDOW = 2
    MIDDLE = 3


class Seat(Base, IntIdMixin, TimestampMixin):
    __tablename__ = "seats"
    __table_args__ = (
        Index("ix_seats_flight_index", "flight_id", "index", unique=True),
        Index("ix_seats_flight_allocation", "flight_id", "assigned", "row", "type", "line"),
    )

    flight_id: Mapped[int] = mapped_column(Integer, ForeignKey("flights.id"), nullable=False)
    index: Mapped[int] = mapped_column("index", Integer, nullable=False)
    type: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    row: Mapped[int] = mapped_column(Integer, nullable=False)
    line: Mapped[str] = mapped_column(String(1), nullable=False)
    assigned: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
