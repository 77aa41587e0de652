from pydantic import BaseModel, Field
from typing import List

class BlockIn(BaseModel):
    rows: int
    side_seat_numbers: List[int] = Field(default_factory=list)
    middle_seat_numbers: List[int] = Field(default_factory=list)

class FlightCreate(BaseModel):
    name: str = ""
    blocks: List[BlockIn] = Field(default_factory=list)

class SeatUpdate(BaseModel):
    assigned: bool

class ListMeta(BaseModel):
    total_records: int
