from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from booking.api.flights import load_flight
from booking.api.serializers import serialize_seat
from booking.core.errors import validation_error
from booking.db.session import get_db
from booking.models.flight import Flight
from booking.models.seat import Seat
from booking.schemas.booking import ListMeta, SeatUpdate
from booking.schemas.fields import SEAT_SCHEMA
from booking.services import seats as seat_service
from booking.services.query_compiler import PARAM_FILTER, compile_query, parse_filtering
from booking.services.seat_allocator import assign_seat

router = APIRouter()


def load_seat(index: int, flight: Flight = Depends(load_flight), db: Session = Depends(get_db)) -> Seat:
    seat = seat_service.get_seat(db, flight.id, index)
    if seat is None:
        raise HTTPException(status_code=404, detail="Seat not found")
    return seat


@router.get("/{flight_id}/seats")
def list_seats(request: Request, flight: Flight = Depends(load_flight), db: Session = Depends(get_db)):
    query = compile_query(request.query_params, SEAT_SCHEMA)
    rows = seat_service.list_seats(db, flight.id, query.filtering, query.sorting, query.limiting)
    return [serialize_seat(r) for r in rows]


@router.get("/{flight_id}/seats/meta", response_model=ListMeta)
def seats_meta(request: Request, flight: Flight = Depends(load_flight), db: Session = Depends(get_db)):
    predicate = parse_filtering(request.query_params.getlist(PARAM_FILTER), SEAT_SCHEMA)
    return ListMeta(total_records=seat_service.count_seats(db, flight.id, predicate.render()))


@router.post("/{flight_id}/seats", status_code=201)
def create_seat(flight: Flight = Depends(load_flight), db: Session = Depends(get_db)):
    seat = assign_seat(db, flight.id)
    if seat is None:
        return Response(status_code=204)
    return serialize_seat(seat)


@router.get("/{flight_id}/seats/index/{index}")
def get_seat(seat: Seat = Depends(load_seat)):
    return serialize_seat(seat)


@router.get("/{flight_id}/seats/row/{row}/line/{line}")
def find_seat(row: int, line: str, flight: Flight = Depends(load_flight), db: Session = Depends(get_db)):
    if len(line) != 1:
        raise validation_error("line.Invalid", "Line is not one character", "line")
    seat = seat_service.find_seat(db, flight.id, row, line)
    if seat is None:
        raise HTTPException(status_code=404, detail="Seat not found")
    return serialize_seat(seat)


@router.patch("/{flight_id}/seats/{index}")
def update_seat(payload: SeatUpdate, seat: Seat = Depends(load_seat), db: Session = Depends(get_db)):
    return serialize_seat(seat_service.set_assigned(db, seat, payload.assigned))


@router.delete("/{flight_id}/seats/{index}", status_code=204)
def release_seat(seat: Seat = Depends(load_seat), db: Session = Depends(get_db)):
    seat_service.set_assigned(db, seat, False)
    return Response(status_code=204)
