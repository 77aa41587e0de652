"""Expand a flight's seating blocks into individual seats.

Seats are produced row by row, left side group first, then the middle
groups in declared order, then the right side group. ``index`` runs across
the whole flight starting at 1; ``line`` letters restart at ``A`` on every
row, so ``(row, line)`` repeats between blocks of the same flight.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

from booking.models.common import unix_now
from booking.models.seat import SeatType
from booking.services.block_validator import BlockShape

FIRST_LINE = "A"


@dataclass(frozen=True)
class SeatPlacement:
    index: int
    row: int
    line: str
    type: SeatType
    created_at: int


def _left_side_type(j: int, size: int) -> SeatType:
    if j == size - 1:
        return SeatType.AISLE
    if j == 0:
        return SeatType.WINDOW
    return SeatType.MIDDLE


def _middle_type(j: int, size: int) -> SeatType:
    if j == 0 or j == size - 1:
        return SeatType.AISLE
    return SeatType.MIDDLE


def _right_side_type(j: int, size: int) -> SeatType:
    if j == 0:
        return SeatType.AISLE
    if j == size - 1:
        return SeatType.WINDOW
    return SeatType.MIDDLE


def row_types(block: BlockShape) -> list[SeatType]:
    left, right = block.side_seat_numbers
    types = [_left_side_type(j, left) for j in range(left)]
    for size in block.middle_seat_numbers:
        types.extend(_middle_type(j, size) for j in range(size))
    types.extend(_right_side_type(j, right) for j in range(right))
    return types


def iter_seats(blocks: Sequence[BlockShape], created_at: int) -> Iterator[SeatPlacement]:
    index = 1
    for block in blocks:
        types = row_types(block)
        for i in range(block.rows):
            line = ord(FIRST_LINE)
            for seat_type in types:
                yield SeatPlacement(index=index, row=i + 1, line=chr(line), type=seat_type, created_at=created_at)
                line += 1
                index += 1


def generate_seats(blocks: Sequence[BlockShape], created_at: int | None = None) -> list[SeatPlacement]:
    """Seats for already validated ``blocks``; deterministic for a fixed ``created_at``."""
    return list(iter_seats(blocks, unix_now() if created_at is None else created_at))
