from fastapi import APIRouter
from booking.api import flights, seats

router = APIRouter()
router.include_router(flights.router, prefix="/flights", tags=["Flights"])
router.include_router(seats.router, prefix="/flights", tags=["Seats"])
