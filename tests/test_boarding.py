"""Boarding board and stay availability search"""

import logging
from datetime import date

import pytest

from vetcare.domain.boarding.availability import AvailabilityStatus
from vetcare.domain.boarding.service import BoardingService
from vetcare.models import AppointmentStatus
from vetcare.shared.errors import ValidationError

AS_OF = date(2024, 1, 3)


def test_board_resolves_each_cage(db, pet, make_cage, make_reservation):
    empty = make_cage(cage_number="C001")
    busy = make_cage(cage_number="C002")
    booked = make_cage(cage_number="C003")
    stay = make_reservation(busy, pet, date(2024, 1, 1), date(2024, 1, 5))
    upcoming = make_reservation(booked, pet, date(2024, 2, 1), date(2024, 2, 5))

    views = {v.cage_id: v for v in BoardingService(db).list_cage_views(as_of=AS_OF)}

    assert views[empty.id].availability_status == AvailabilityStatus.AVAILABLE
    assert views[busy.id].availability_status == AvailabilityStatus.OCCUPIED
    assert views[busy.id].current_reservation.reservation_id == stay.id
    assert views[busy.id].current_reservation.pet_name == "Bantay"
    assert views[busy.id].current_reservation.client_name == "Maria Santos"
    assert views[booked.id].availability_status == AvailabilityStatus.RESERVED
    assert views[booked.id].next_reservation.reservation_id == upcoming.id


def test_board_leaves_out_inactive_cages(db, make_cage):
    make_cage(cage_number="C001")
    make_cage(cage_number="C002", is_active=False)

    views = BoardingService(db).list_cage_views(as_of=AS_OF)

    assert [v.cage_number for v in views] == ["C001"]


def test_board_filters_by_status(db, pet, make_cage, make_reservation):
    make_cage(cage_number="C001")
    busy = make_cage(cage_number="C002")
    make_reservation(busy, pet, date(2024, 1, 1), date(2024, 1, 5))

    views = BoardingService(db).list_cage_views(
        as_of=AS_OF, availability_status=AvailabilityStatus.OCCUPIED
    )

    assert [v.cage_number for v in views] == ["C002"]


def test_board_flags_overlapping_confirmed_stays(db, pet, make_cage, make_reservation):
    cage = make_cage()
    first = make_reservation(cage, pet, date(2024, 1, 1), date(2024, 1, 5))
    make_reservation(cage, pet, date(2024, 1, 2), date(2024, 1, 6))

    [view] = BoardingService(db).list_cage_views(as_of=AS_OF)

    assert view.overlap_detected is True
    assert view.current_reservation.reservation_id == first.id


def test_board_warns_once_per_overlapping_cage(db, pet, make_cage, make_reservation, caplog):
    cage = make_cage()
    make_reservation(cage, pet, date(2024, 1, 1), date(2024, 1, 5))
    make_reservation(cage, pet, date(2024, 1, 2), date(2024, 1, 6))

    with caplog.at_level(logging.WARNING):
        BoardingService(db).list_cage_views(as_of=AS_OF)

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert f"Cage {cage.id}" in warnings[0].getMessage()


def test_search_skips_cages_with_pending_or_confirmed_overlap(db, pet, make_cage, make_reservation):
    free = make_cage(cage_number="C001", daily_rate=350.0)
    pending = make_cage(cage_number="C002")
    cancelled = make_cage(cage_number="C003", daily_rate=400.0)
    make_reservation(pending, pet, date(2024, 3, 2), date(2024, 3, 4), status=AppointmentStatus.PENDING)
    make_reservation(cancelled, pet, date(2024, 3, 2), date(2024, 3, 4), status=AppointmentStatus.CANCELLED)

    results = BoardingService(db).search_available_cages(date(2024, 3, 1), date(2024, 3, 4))

    assert [c.id for c in results] == [free.id, cancelled.id]
    assert results[0].total_days == 3
    assert results[0].total_amount == 1050.0
    assert results[1].total_amount == 1200.0


def test_search_treats_check_out_day_as_free(db, pet, make_cage, make_reservation):
    cage = make_cage()
    make_reservation(cage, pet, date(2024, 3, 1), date(2024, 3, 5))

    results = BoardingService(db).search_available_cages(date(2024, 3, 5), date(2024, 3, 7))

    assert [c.id for c in results] == [cage.id]


def test_search_orders_by_type_then_number(db, make_cage):
    make_cage(cage_number="S-2", cage_type="small")
    make_cage(cage_number="L-1", cage_type="large")
    make_cage(cage_number="S-1", cage_type="small")

    results = BoardingService(db).search_available_cages(date(2024, 3, 1), date(2024, 3, 2))

    assert [c.cage_number for c in results] == ["L-1", "S-1", "S-2"]


def test_search_rejects_empty_range(db):
    with pytest.raises(ValidationError):
        BoardingService(db).search_available_cages(date(2024, 3, 2), date(2024, 3, 2))


# ----------------------------------------------------------------------------
# Endpoints
# ----------------------------------------------------------------------------


def test_board_endpoint_for_staff(login, staff_user, pet, make_cage, make_reservation):
    cage = make_cage()
    make_reservation(cage, pet, date(2024, 1, 1), date(2024, 1, 5))

    response = login(staff_user).get("/api/admin/boarding", params={"as_of": "2024-01-03"})

    assert response.status_code == 200
    [view] = response.json()["data"]
    assert view["availability_status"] == "occupied"
    assert view["current_reservation"]["check_out_date"] == "2024-01-05"
    assert view["next_reservation"] is None


def test_board_endpoint_is_staff_only(login, client_user):
    assert login(client_user).get("/api/admin/boarding").status_code == 403


def test_availability_endpoint_for_clients(login, client_user, make_cage):
    make_cage(cage_number="S-1", cage_type="small", daily_rate=200.0)
    make_cage(cage_number="L-1", cage_type="large", daily_rate=600.0)

    response = login(client_user).get(
        "/api/client/cages/availability",
        params={"check_in_date": "2024-03-01", "check_out_date": "2024-03-03", "type": "small"},
    )

    assert response.status_code == 200
    [cage] = response.json()["data"]
    assert cage["cage_number"] == "S-1"
    assert cage["total_days"] == 2
    assert cage["total_amount"] == 400.0


def test_availability_endpoint_rejects_bad_range(login, client_user):
    response = login(client_user).get(
        "/api/client/cages/availability",
        params={"check_in_date": "2024-03-03", "check_out_date": "2024-03-01"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Check-out date must be after check-in date"


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
