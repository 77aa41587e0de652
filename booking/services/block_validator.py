from __future__ import annotations

import logging
from typing import Protocol, Sequence

from booking.core.config import settings
from booking.schemas.errors import ErrorItem

_LOG = logging.getLogger("booking.flights")


class BlockShape(Protocol):
    rows: int
    side_seat_numbers: Sequence[int]
    middle_seat_numbers: Sequence[int]


def block_lines(block: BlockShape) -> int:
    return sum(block.side_seat_numbers) + sum(block.middle_seat_numbers)


def validate_block(block: BlockShape, *, max_lines: int | None = None) -> list[ErrorItem]:
    max_lines = settings.MAX_LINES if max_lines is None else max_lines
    errors: list[ErrorItem] = []

    if block.rows <= 0:
        errors.append(ErrorItem(code="rows.TooSmall", message="Rows must be more than zero", field="rows"))

    if len(block.side_seat_numbers) != 2:
        errors.append(
            ErrorItem(
                code="side_seat_numbers.Invalid",
                message="Must be precisely two side seats",
                field="side_seat_numbers",
            )
        )

    for number in block.side_seat_numbers:
        if number <= 0:
            errors.append(
                ErrorItem(
                    code="side_seat_numbers.TooSmall",
                    message="Side seats must be more than zero",
                    field="side_seat_numbers",
                )
            )

    for number in block.middle_seat_numbers:
        if number <= 0:
            errors.append(
                ErrorItem(
                    code="middle_seat_numbers.TooSmall",
                    message="Middle seats must be more than zero",
                    field="middle_seat_numbers",
                )
            )

    if block_lines(block) > max_lines:
        errors.append(
            ErrorItem(
                code="seat_number.TooLarge",
                message=f"Seat number must be less than {max_lines}",
                field="side_seat_numbers,middle_seat_numbers",
            )
        )

    return errors


def validate_flight(
    name: str,
    blocks: Sequence[BlockShape],
    *,
    max_rows: int | None = None,
    max_lines: int | None = None,
    max_name_length: int | None = None,
) -> list[ErrorItem]:
    """Collect every flight and block rule violation, blocks in declared order."""
    max_rows = settings.MAX_ROWS if max_rows is None else max_rows
    max_name_length = settings.MAX_NAME_LENGTH if max_name_length is None else max_name_length
    errors: list[ErrorItem] = []

    if len(name) > max_name_length:
        errors.append(
            ErrorItem(
                code="name.TooLarge",
                message=f"Name must be less than {max_name_length} characters",
                field="name",
            )
        )

    rows = 0
    for block in blocks:
        errors.extend(validate_block(block, max_lines=max_lines))
        rows += block.rows

    if rows > max_rows:
        errors.append(ErrorItem(code="rows.TooLarge", message=f"Rows must be less than {max_rows}", field="rows"))

    if errors:
        _LOG.warning("Error validating flight name=%r errors=%s", name, [e.code for e in errors])
    return errors
