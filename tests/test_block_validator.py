import os
import unittest

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from booking.schemas.booking import BlockIn
from booking.services.block_validator import block_lines, validate_block, validate_flight


def block(rows=10, side=(3, 3), middle=()):
    return BlockIn(rows=rows, side_seat_numbers=list(side), middle_seat_numbers=list(middle))


class BlockValidationTests(unittest.TestCase):
    def test_valid_block_has_no_errors(self):
        self.assertEqual(validate_block(block(middle=(4,)), max_lines=20), [])

    def test_rows_must_be_positive(self):
        codes = [e.code for e in validate_block(block(rows=0), max_lines=20)]
        self.assertEqual(codes, ["rows.TooSmall"])

    def test_exactly_two_side_groups(self):
        codes = [e.code for e in validate_block(block(side=(3,)), max_lines=20)]
        self.assertEqual(codes, ["side_seat_numbers.Invalid"])
        codes = [e.code for e in validate_block(block(side=(1, 1, 1)), max_lines=20)]
        self.assertEqual(codes, ["side_seat_numbers.Invalid"])

    def test_all_violations_are_collected(self):
        errors = validate_block(block(rows=-1, side=(0, 2), middle=(2, -1, 0)), max_lines=20)
        self.assertEqual(
            [e.code for e in errors],
            [
                "rows.TooSmall",
                "side_seat_numbers.TooSmall",
                "middle_seat_numbers.TooSmall",
                "middle_seat_numbers.TooSmall",
            ],
        )

    def test_line_cap(self):
        wide = block(side=(5, 5), middle=(6, 5))
        self.assertEqual(block_lines(wide), 21)
        errors = validate_block(wide, max_lines=20)
        self.assertEqual([e.code for e in errors], ["seat_number.TooLarge"])
        self.assertEqual(errors[0].field, "side_seat_numbers,middle_seat_numbers")
        self.assertEqual(validate_block(block(side=(5, 5), middle=(5, 5)), max_lines=20), [])


class FlightValidationTests(unittest.TestCase):
    def test_name_length(self):
        errors = validate_flight("x" * 256, [], max_name_length=255)
        self.assertEqual([e.code for e in errors], ["name.TooLarge"])
        self.assertEqual(validate_flight("ы" * 255, [], max_name_length=255), [])

    def test_total_rows_cap(self):
        blocks = [block(rows=120), block(rows=81)]
        errors = validate_flight("SU-1", blocks, max_rows=200, max_lines=20)
        self.assertEqual([e.code for e in errors], ["rows.TooLarge"])
        self.assertEqual(validate_flight("SU-1", [block(rows=120), block(rows=80)], max_rows=200, max_lines=20), [])

    def test_block_errors_concatenate_in_block_order(self):
        blocks = [block(rows=0), block(side=(1,)), block(middle=(0,))]
        errors = validate_flight("x" * 300, blocks, max_rows=200, max_lines=20, max_name_length=255)
        self.assertEqual(
            [e.code for e in errors],
            ["name.TooLarge", "rows.TooSmall", "side_seat_numbers.Invalid", "middle_seat_numbers.TooSmall"],
        )


if __name__ == "__main__":
    unittest.main()
