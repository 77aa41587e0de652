import unittest

from booking.models.seat import SeatType
from tests.base import API, BookingApiTestCase

# 2 rows of W A | A W
SMALL_CABIN = [{"rows": 2, "side_seat_numbers": [2, 2], "middle_seat_numbers": []}]


class SeatAllocationApiTests(BookingApiTestCase):
    def test_allocates_in_priority_order_until_full(self):
        flight = self.create_flight(blocks=SMALL_CABIN)
        picked = []
        for _ in range(8):
            response = self.client.post(f"{API}/flights/{flight['id']}/seats")
            self.assertEqual(response.status_code, 201)
            body = response.json()
            self.assertTrue(body["assigned"])
            picked.append((body["row"], body["line"]))
        self.assertEqual(
            picked,
            [(1, "B"), (1, "C"), (1, "A"), (1, "D"), (2, "B"), (2, "C"), (2, "A"), (2, "D")],
        )

        response = self.client.post(f"{API}/flights/{flight['id']}/seats")
        self.assertEqual(response.status_code, 204)
        self.assertEqual(response.content, b"")

    def test_released_seat_is_offered_again(self):
        flight = self.create_flight(blocks=SMALL_CABIN)
        first = self.client.post(f"{API}/flights/{flight['id']}/seats").json()
        self.client.post(f"{API}/flights/{flight['id']}/seats")

        response = self.client.delete(f"{API}/flights/{flight['id']}/seats/{first['index']}")
        self.assertEqual(response.status_code, 204)

        again = self.client.post(f"{API}/flights/{flight['id']}/seats").json()
        self.assertEqual(again["index"], first["index"])

    def test_unknown_flight(self):
        self.assertEqual(self.client.post(f"{API}/flights/404/seats").status_code, 404)


class SeatLookupApiTests(BookingApiTestCase):
    def setUp(self):
        super().setUp()
        self.flight = self.create_flight(
            blocks=[
                {"rows": 2, "side_seat_numbers": [2, 2], "middle_seat_numbers": []},
                {"rows": 1, "side_seat_numbers": [3, 3], "middle_seat_numbers": []},
            ]
        )
        self.base = f"{API}/flights/{self.flight['id']}/seats"

    def test_get_by_index(self):
        response = self.client.get(f"{self.base}/index/3")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual((body["index"], body["row"], body["line"]), (3, 1, "C"))
        self.assertEqual(body["type"], int(SeatType.AISLE))
        self.assertEqual(body["flight_id"], self.flight["id"])
        self.assertFalse(body["assigned"])

    def test_missing_index(self):
        self.assertEqual(self.client.get(f"{self.base}/index/99").status_code, 404)

    def test_find_by_position_prefers_first_block(self):
        response = self.client.get(f"{self.base}/row/1/line/B")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["index"], 2)

        response = self.client.get(f"{self.base}/row/1/line/F")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["index"], 14)

    def test_find_rejects_long_line(self):
        response = self.client.get(f"{self.base}/row/1/line/AB")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()[0]["code"], "line.Invalid")

    def test_find_missing_position(self):
        self.assertEqual(self.client.get(f"{self.base}/row/9/line/A").status_code, 404)

    def test_patch_toggles_assignment(self):
        response = self.client.patch(f"{self.base}/5", json={"assigned": True})
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["assigned"])
        self.assertTrue(self.client.get(f"{self.base}/index/5").json()["assigned"])

        response = self.client.patch(f"{self.base}/5", json={"assigned": False})
        self.assertFalse(response.json()["assigned"])

    def test_patch_requires_boolean(self):
        response = self.client.patch(f"{self.base}/5", json={"assigned": "sometimes"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()[0]["code"], "assigned.Invalid")


class SeatListApiTests(BookingApiTestCase):
    def setUp(self):
        super().setUp()
        self.flight = self.create_flight(
            blocks=[{"rows": 3, "side_seat_numbers": [3, 3], "middle_seat_numbers": []}]
        )
        self.other = self.create_flight(name="SU-2")
        self.base = f"{API}/flights/{self.flight['id']}/seats"

    def _list(self, params):
        response = self.client.get(self.base, params=params)
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()

    def test_lists_only_this_flight(self):
        seats = self._list({})
        self.assertEqual(len(seats), 18)
        self.assertEqual({s["flight_id"] for s in seats}, {self.flight["id"]})

    def test_filter_sort_and_limit(self):
        seats = self._list({"filter": "line:eq:A", "sort": "row:desc"})
        self.assertEqual([(s["row"], s["line"]) for s in seats], [(3, "A"), (2, "A"), (1, "A")])

        seats = self._list([("sort", "row:asc"), ("sort", "index:desc"), ("limit", "2"), ("offset", "1")])
        self.assertEqual([s["index"] for s in seats], [5, 4])

    def test_filters_and_combine(self):
        seats = self._list([("filter", "type:eq:2"), ("filter", "row:le:2"), ("sort", "index:asc")])
        self.assertEqual([s["index"] for s in seats], [1, 6, 7, 12])

    def test_boolean_filter(self):
        self.client.patch(f"{self.base}/4", json={"assigned": True})
        seats = self._list({"filter": "assigned:eq:true"})
        self.assertEqual([s["index"] for s in seats], [4])

    def test_wildcard_filter_matches_any_field(self):
        seats = self._list({"filter": "*:eq:C"})
        self.assertEqual(sorted(s["index"] for s in seats), [3, 9, 15])

    def test_meta_counts(self):
        response = self.client.get(f"{self.base}/meta", params={"filter": "type:eq:1"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"total_records": 6})

    def test_invalid_query(self):
        response = self.client.get(self.base, params={"filter": "line:eq:AB"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), [{"code": "line.Invalid", "message": "line is not one character", "field": "line"}])


if __name__ == "__main__":
    unittest.main()
