from __future__ import annotations

import logging

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from booking.db.session import rollback_quietly
from booking.models.common import unix_now
from booking.models.seat import Seat
from booking.services.flights import sql_fragment

logger = logging.getLogger("booking.seats")


def get_seat(db: Session, flight_id: int, index: int) -> Seat | None:
    return db.scalars(select(Seat).where(Seat.flight_id == flight_id, Seat.index == index)).first()


def find_seat(db: Session, flight_id: int, row: int, line: str) -> Seat | None:
    # Every block restarts its rows at 1, so the earliest block wins.
    return db.scalars(
        select(Seat).where(Seat.flight_id == flight_id, Seat.row == row, Seat.line == line).order_by(Seat.index).limit(1)
    ).first()


def list_seats(db: Session, flight_id: int, filtering: str, sorting: str, limitation: str) -> list[Seat]:
    statement = "SELECT * FROM seats WHERE flight_id = :flight_id" + sql_fragment(filtering + sorting + limitation)
    seats = list(db.scalars(select(Seat).from_statement(text(statement)), {"flight_id": flight_id}).all())
    logger.debug("Seats successfully returned flight_id=%s statement=%r count=%s", flight_id, statement, len(seats))
    return seats


def count_seats(db: Session, flight_id: int, filtering: str) -> int:
    statement = "SELECT COUNT(*) FROM seats WHERE flight_id = :flight_id" + sql_fragment(filtering)
    return int(db.scalar(text(statement), {"flight_id": flight_id}) or 0)


def set_assigned(db: Session, seat: Seat, assigned: bool) -> Seat:
    seat.assigned = assigned
    seat.updated_at = unix_now()
    try:
        db.commit()
    except SQLAlchemyError:
        rollback_quietly(db, "seat_update")
        logger.error("Error updating seat id=%s", seat.id, exc_info=True)
        raise
    db.refresh(seat)
    logger.debug("Seat successfully updated id=%s assigned=%s", seat.id, assigned)
    return seat
