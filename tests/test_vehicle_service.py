"""Availability over date ranges and fleet stats."""

import pytest
from datetime import datetime, timedelta
from unittest.mock import patch
from app.services.vehicle_service import (
    get_available_vehicles, get_vehicle_stats, is_vehicle_available, list_vehicles,
)
from conftest import make_request, make_user, make_vehicle


def d(month, day):
    return datetime(2030, month, day)


@pytest.fixture
def fleet(db):
    user = make_user(db)
    return user, make_vehicle(db, "FLT-001", "Car A"), make_vehicle(db, "FLT-002", "Car B")


class TestAvailability:
    def test_overlapping_approved_request_excludes_vehicle(self, db, fleet):
        user, car_a, car_b = fleet
        make_request(db, car_a, user, d(6, 1), d(6, 5), status="approved")

        ids = [v.id for v in get_available_vehicles(db, d(6, 3), d(6, 7))]
        assert ids == [car_b.id]

    def test_later_window_includes_vehicle(self, db, fleet):
        user, car_a, car_b = fleet
        make_request(db, car_a, user, d(6, 1), d(6, 5), status="approved")

        ids = [v.id for v in get_available_vehicles(db, d(6, 6), d(6, 10))]
        assert ids == [car_a.id, car_b.id]

    def test_pending_request_blocks_like_approved(self, db, fleet):
        user, car_a, _ = fleet
        make_request(db, car_a, user, d(6, 1), d(6, 5), status="pending")

        assert not is_vehicle_available(db, car_a.id, d(6, 2), d(6, 3))

    def test_rejected_request_never_blocks(self, db, fleet):
        user, car_a, _ = fleet
        make_request(db, car_a, user, d(6, 1), d(6, 5), status="rejected")

        assert is_vehicle_available(db, car_a.id, d(6, 1), d(6, 5))

    def test_back_to_back_ranges_do_not_conflict(self, db, fleet):
        user, car_a, _ = fleet
        make_request(db, car_a, user, d(6, 1), d(6, 5), status="approved")

        assert is_vehicle_available(db, car_a.id, d(6, 5), d(6, 8))
        assert is_vehicle_available(db, car_a.id, d(5, 28), d(6, 1))

    def test_window_containing_existing_request_conflicts(self, db, fleet):
        user, car_a, _ = fleet
        make_request(db, car_a, user, d(6, 3), d(6, 4), status="approved")

        assert not is_vehicle_available(db, car_a.id, d(6, 1), d(6, 10))

    def test_zero_length_window_inside_request(self, db, fleet):
        user, car_a, _ = fleet
        make_request(db, car_a, user, d(6, 1), d(6, 5), status="approved")

        assert not is_vehicle_available(db, car_a.id, d(6, 3), d(6, 3))

    def test_zero_length_window_on_boundary(self, db, fleet):
        user, car_a, _ = fleet
        make_request(db, car_a, user, d(6, 1), d(6, 5), status="approved")

        assert is_vehicle_available(db, car_a.id, d(6, 1), d(6, 1))
        assert is_vehicle_available(db, car_a.id, d(6, 5), d(6, 5))

    def test_unknown_vehicle_is_never_available(self, db, fleet):
        assert not is_vehicle_available(db, 999, d(6, 1), d(6, 2))

    def test_list_vehicles_ordered_by_id(self, db, fleet):
        _, car_a, car_b = fleet
        assert [v.id for v in list_vehicles(db)] == [car_a.id, car_b.id]


class TestVehicleStats:
    def test_stats_snapshot(self, db, fleet):
        user, car_a, car_b = fleet
        now = datetime.utcnow()
        make_request(db, car_a, user, now - timedelta(days=1), now + timedelta(days=1),
                     status="approved")
        make_request(db, car_b, user, now + timedelta(days=3), now + timedelta(days=4))

        stats = get_vehicle_stats(db)
        assert stats == {"total": 2, "available": 1, "in_use": 1, "pending_requests": 1}

    def test_empty_fleet(self, db):
        assert get_vehicle_stats(db) == {"total": 0, "available": 0, "in_use": 0,
                                         "pending_requests": 0}

    def test_booking_starting_now_counted_once(self, db, fleet):
        user, car_a, car_b = fleet
        now = datetime(2030, 5, 1, 9, 0)
        make_request(db, car_a, user, now, now + timedelta(hours=4), status="approved")

        with patch("app.services.vehicle_service.utcnow", return_value=now):
            stats = get_vehicle_stats(db)

        assert stats["in_use"] + stats["available"] == stats["total"]
        assert stats["available"] == 2

    def test_booking_ending_now_is_free(self, db, fleet):
        user, car_a, car_b = fleet
        now = datetime(2030, 5, 1, 9, 0)
        make_request(db, car_a, user, now - timedelta(hours=4), now, status="approved")

        with patch("app.services.vehicle_service.utcnow", return_value=now):
            stats = get_vehicle_stats(db)

        assert stats["in_use"] == 0
        assert stats["available"] == 2
