from booking.models.flight import Flight
from booking.models.seat import Seat
from booking.schemas.booking import BlockIn


def serialize_flight(row: Flight, blocks: list[BlockIn] | None = None) -> dict:
    data = {"id": row.id, "name": row.name, "created_at": row.created_at}
    if blocks:
        data["blocks"] = [b.model_dump() for b in blocks]
    return data


def serialize_seat(row: Seat) -> dict:
    return {
        "id": row.id,
        "flight_id": row.flight_id,
        "index": row.index,
        "type": row.type,
        "row": row.row,
        "line": row.line,
        "assigned": bool(row.assigned),
        "created_at": row.created_at,
        "updated_at": row.updated_at,
    }
