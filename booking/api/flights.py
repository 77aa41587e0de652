from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from booking.api.serializers import serialize_flight
from booking.core.errors import ApiValidationError
from booking.db.session import get_db
from booking.models.flight import Flight
from booking.schemas.booking import FlightCreate, ListMeta
from booking.schemas.fields import FLIGHT_SCHEMA
from booking.services import flights as flight_service
from booking.services.block_validator import validate_flight
from booking.services.query_compiler import PARAM_FILTER, compile_query, parse_filtering

router = APIRouter()


def load_flight(flight_id: int, db: Session = Depends(get_db)) -> Flight:
    flight = flight_service.get_flight(db, flight_id)
    if flight is None:
        raise HTTPException(status_code=404, detail="Flight not found")
    return flight


@router.get("")
def list_flights(request: Request, db: Session = Depends(get_db)):
    query = compile_query(request.query_params, FLIGHT_SCHEMA)
    rows = flight_service.list_flights(db, query.filtering, query.sorting, query.limiting)
    return [serialize_flight(r) for r in rows]


@router.get("/meta", response_model=ListMeta)
def flights_meta(request: Request, db: Session = Depends(get_db)):
    predicate = parse_filtering(request.query_params.getlist(PARAM_FILTER), FLIGHT_SCHEMA)
    return ListMeta(total_records=flight_service.count_flights(db, predicate.render()))


@router.post("", status_code=201)
def create_flight(payload: FlightCreate, db: Session = Depends(get_db)):
    errors = validate_flight(payload.name, payload.blocks)
    if errors:
        raise ApiValidationError(errors)
    flight = flight_service.create_flight(db, payload)
    return serialize_flight(flight, payload.blocks)


@router.get("/{flight_id}")
def get_flight(flight: Flight = Depends(load_flight), db: Session = Depends(get_db)):
    return serialize_flight(flight, flight_service.list_blocks(db, flight.id))


@router.delete("/{flight_id}", status_code=204)
def delete_flight(flight: Flight = Depends(load_flight), db: Session = Depends(get_db)):
    flight_service.delete_flight(db, flight)
    return Response(status_code=204)
