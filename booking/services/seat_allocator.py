from __future__ import annotations

import logging

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from booking.db.session import rollback_quietly
from booking.models.common import unix_now
from booking.models.seat import Seat

logger = logging.getLogger("booking.seats")


def next_free_seat_query(flight_id: int):
    # Lowest row first, then aisle < window < middle, then earliest letter.
    return (
        select(Seat)
        .where(Seat.flight_id == flight_id, Seat.assigned.is_(False))
        .order_by(Seat.row.asc(), Seat.type.asc(), Seat.line.asc())
        .limit(1)
        .with_for_update()
    )


def mark_assigned_statement(seat_id: int, updated_at: int):
    # Matches nothing once another transaction has taken the seat.
    return (
        update(Seat)
        .where(Seat.id == seat_id, Seat.assigned.is_(False))
        .values(assigned=True, updated_at=updated_at)
        .execution_options(synchronize_session=False)
    )


def assign_seat(db: Session, flight_id: int) -> Seat | None:
    """Mark the best unassigned seat of the flight as assigned.

    Returns ``None`` when every seat is taken. The mark only applies while the
    seat is still free, so two concurrent calls never get the same seat; the
    loser picks the next candidate. Store errors roll back and propagate.
    """
    try:
        while True:
            seat = db.scalars(next_free_seat_query(flight_id)).first()
            if seat is None:
                db.rollback()
                logger.info("No seat available flight_id=%s", flight_id)
                return None
            seat_id, index = seat.id, seat.index
            result = db.execute(mark_assigned_statement(seat_id, unix_now()))
            if result.rowcount == 1:
                db.commit()
                break
            db.rollback()
            logger.info("Seat taken concurrently flight_id=%s index=%s", flight_id, index)
    except SQLAlchemyError:
        rollback_quietly(db, "seat_assign")
        logger.error("Error assigning seat flight_id=%s", flight_id, exc_info=True)
        raise
    db.refresh(seat)
    logger.debug("Seat successfully assigned flight_id=%s index=%s", flight_id, seat.index)
    return seat
