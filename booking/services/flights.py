from __future__ import annotations

import logging

from sqlalchemy import delete, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from booking.db.session import rollback_quietly
from booking.models.block import Block, BlockType, SeatNumber
from booking.models.common import unix_now
from booking.models.flight import Flight
from booking.models.seat import Seat
from booking.schemas.booking import BlockIn, FlightCreate
from booking.services.seat_layout import generate_seats

logger = logging.getLogger("booking.flights")

FILTER_PREFIX = " AND "


def sql_fragment(fragment: str) -> str:
    # text() treats ":name" as a bind parameter, even inside quoted literals.
    return fragment.replace(":", "\\:")


def where_clause(filtering: str) -> str:
    if not filtering:
        return ""
    return " WHERE " + filtering.removeprefix(FILTER_PREFIX)


def _insert_blocks(db: Session, flight_id: int, blocks: list[BlockIn]) -> None:
    for block in blocks:
        row = Block(flight_id=flight_id, rows=block.rows)
        db.add(row)
        db.flush()
        for block_type, numbers in ((BlockType.SIDE, block.side_seat_numbers), (BlockType.MIDDLE, block.middle_seat_numbers)):
            db.add_all(SeatNumber(block_id=row.id, type=int(block_type), number=n) for n in numbers)
    db.flush()


def create_flight(db: Session, payload: FlightCreate) -> Flight:
    """Insert the flight, its blocks and every generated seat in one transaction."""
    created_at = unix_now()
    flight = Flight(name=payload.name, created_at=created_at)
    try:
        db.add(flight)
        db.flush()
        _insert_blocks(db, flight.id, payload.blocks)
        db.add_all(
            Seat(
                flight_id=flight.id,
                index=placement.index,
                type=int(placement.type),
                row=placement.row,
                line=placement.line,
                assigned=False,
                created_at=placement.created_at,
                updated_at=placement.created_at,
            )
            for placement in generate_seats(payload.blocks, created_at)
        )
        db.commit()
    except SQLAlchemyError:
        rollback_quietly(db, "flight_create")
        logger.error("Error creating flight name=%r", payload.name, exc_info=True)
        raise
    db.refresh(flight)
    logger.debug("Flight successfully created id=%s blocks=%s", flight.id, len(payload.blocks))
    return flight


def get_flight(db: Session, flight_id: int) -> Flight | None:
    return db.get(Flight, flight_id)


def list_blocks(db: Session, flight_id: int) -> list[BlockIn]:
    blocks = db.scalars(select(Block).where(Block.flight_id == flight_id).order_by(Block.id)).all()
    result: list[BlockIn] = []
    for block in blocks:
        numbers = db.scalars(select(SeatNumber).where(SeatNumber.block_id == block.id).order_by(SeatNumber.id)).all()
        result.append(
            BlockIn(
                rows=block.rows,
                side_seat_numbers=[n.number for n in numbers if n.type == BlockType.SIDE],
                middle_seat_numbers=[n.number for n in numbers if n.type == BlockType.MIDDLE],
            )
        )
    return result


def delete_flight(db: Session, flight: Flight) -> None:
    flight_id = flight.id
    try:
        block_ids = select(Block.id).where(Block.flight_id == flight_id)
        db.execute(delete(Seat).where(Seat.flight_id == flight_id))
        db.execute(delete(SeatNumber).where(SeatNumber.block_id.in_(block_ids)))
        db.execute(delete(Block).where(Block.flight_id == flight_id))
        db.delete(flight)
        db.commit()
    except SQLAlchemyError:
        rollback_quietly(db, "flight_delete")
        logger.error("Error deleting flight id=%s", flight_id, exc_info=True)
        raise
    logger.debug("Flight successfully deleted id=%s", flight_id)


def list_flights(db: Session, filtering: str, sorting: str, limitation: str) -> list[Flight]:
    statement = "SELECT * FROM flights" + where_clause(filtering) + sorting + limitation
    flights = list(db.scalars(select(Flight).from_statement(text(sql_fragment(statement)))).all())
    logger.debug("Flights successfully returned statement=%r count=%s", statement, len(flights))
    return flights


def count_flights(db: Session, filtering: str) -> int:
    statement = "SELECT COUNT(*) FROM flights" + where_clause(filtering)
    return int(db.scalar(text(sql_fragment(statement))) or 0)
