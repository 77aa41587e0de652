import enum

from sqlalchemy import ForeignKey, Integer, SmallInteger
from sqlalchemy.orm import Mapped, mapped_column
from booking.db.session import Base
from booking.models.common import IntIdMixin


class BlockType(enum.IntEnum):
    SIDE = 1
    MIDDLE = 2


class Block(Base, IntIdMixin):
    __tablename__ = "blocks"
    flight_id: Mapped[int] = mapped_column(Integer, ForeignKey("flights.id"), nullable=False, index=True)
    rows: Mapped[int] = mapped_column(Integer, nullable=False)


class SeatNumber(Base, IntIdMixin):
    """One seat group size of a block; read back in insertion order."""

    __tablename__ = "seat_numbers"
    block_id: Mapped[int] = mapped_column(Integer, ForeignKey("blocks.id"), nullable=False, index=True)
    type: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    number: Mapped[int] = mapped_column(Integer, nullable=False)
