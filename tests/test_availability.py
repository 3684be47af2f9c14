"""Cage availability resolution"""

import logging
from datetime import date
from types import SimpleNamespace

import pytest

from vetcare.domain.boarding.availability import (
    AvailabilityStatus,
    covers,
    ranges_overlap,
    resolve_availability,
    stay_length,
)
from vetcare.models import AppointmentStatus

CAGE = 1
TODAY = date(2024, 1, 3)


def stay(id, check_in, check_out, status=AppointmentStatus.CONFIRMED, cage_id=CAGE):
    return SimpleNamespace(
        id=id,
        cage_id=cage_id,
        check_in_date=check_in,
        check_out_date=check_out,
        status=status,
    )


def test_no_reservations_is_available():
    result = resolve_availability(CAGE, [], TODAY)

    assert result.status == AvailabilityStatus.AVAILABLE
    assert result.current is None
    assert result.next is None
    assert result.overlap_detected is False


def test_stay_covering_today_is_occupied():
    booking = stay(10, date(2024, 1, 1), date(2024, 1, 5))

    result = resolve_availability(CAGE, [booking], TODAY)

    assert result.status == AvailabilityStatus.OCCUPIED
    assert result.current is booking
    assert result.current.cage_id == CAGE
    assert result.next is None


def test_future_stay_only_is_reserved():
    booking = stay(11, date(2024, 2, 1), date(2024, 2, 5))

    result = resolve_availability(CAGE, [booking], TODAY)

    assert result.status == AvailabilityStatus.RESERVED
    assert result.current is None
    assert result.next is booking


def test_next_is_earliest_future_stay_whatever_the_input_order():
    later = stay(1, date(2024, 3, 1), date(2024, 3, 4))
    sooner = stay(2, date(2024, 2, 1), date(2024, 2, 5))

    result = resolve_availability(CAGE, [later, sooner], TODAY)

    assert result.next is sooner


def test_check_in_day_counts_as_occupied():
    booking = stay(1, TODAY, date(2024, 1, 6))

    result = resolve_availability(CAGE, [booking], TODAY)

    assert result.status == AvailabilityStatus.OCCUPIED


def test_check_out_day_is_free():
    booking = stay(1, date(2023, 12, 30), TODAY)

    result = resolve_availability(CAGE, [booking], TODAY)

    assert result.status == AvailabilityStatus.AVAILABLE
    assert result.current is None


def test_back_to_back_stay_is_reported_as_next():
    current = stay(1, date(2024, 1, 1), date(2024, 1, 5))
    following = stay(2, date(2024, 1, 5), date(2024, 1, 8))

    result = resolve_availability(CAGE, [following, current], TODAY)

    assert result.status == AvailabilityStatus.OCCUPIED
    assert result.current is current
    assert result.next is following


@pytest.mark.parametrize(
    "status",
    [AppointmentStatus.PENDING, AppointmentStatus.CANCELLED, AppointmentStatus.COMPLETED, AppointmentStatus.REJECTED],
)
def test_only_confirmed_stays_hold_the_cage(status):
    booking = stay(1, date(2024, 1, 1), date(2024, 1, 5), status=status)

    result = resolve_availability(CAGE, [booking], TODAY)

    assert result.status == AvailabilityStatus.AVAILABLE


def test_status_stored_as_plain_string_is_understood():
    booking = stay(1, date(2024, 1, 1), date(2024, 1, 5), status="confirmed")

    result = resolve_availability(CAGE, [booking], TODAY)

    assert result.status == AvailabilityStatus.OCCUPIED


def test_other_cages_and_dateless_rows_are_ignored():
    other_cage = stay(1, date(2024, 1, 1), date(2024, 1, 5), cage_id=2)
    no_dates = stay(2, None, None)

    result = resolve_availability(CAGE, [other_cage, no_dates], TODAY)

    assert result.status == AvailabilityStatus.AVAILABLE


def test_resolution_is_idempotent():
    reservations = [
        stay(1, date(2024, 1, 1), date(2024, 1, 5)),
        stay(2, date(2024, 2, 1), date(2024, 2, 5)),
    ]

    assert resolve_availability(CAGE, reservations, TODAY) == resolve_availability(
        CAGE, reservations, TODAY
    )


def test_overlapping_confirmed_stays_pick_earliest_check_in(caplog):
    late = stay(1, date(2024, 1, 2), date(2024, 1, 6))
    early = stay(2, date(2024, 1, 1), date(2024, 1, 4))

    with caplog.at_level(logging.WARNING):
        result = resolve_availability(CAGE, [late, early], TODAY)

    assert result.status == AvailabilityStatus.OCCUPIED
    assert result.current is early
    assert result.overlap_detected is True
    assert "covering" in caplog.text


def test_overlapping_stays_with_same_check_in_pick_lowest_id():
    second = stay(8, date(2024, 1, 1), date(2024, 1, 6))
    first = stay(3, date(2024, 1, 1), date(2024, 1, 4))

    result = resolve_availability(CAGE, [second, first], TODAY)

    assert result.current is first
    assert result.overlap_detected is True


def test_future_stay_overlapping_current_is_not_next():
    current = stay(1, date(2024, 1, 1), date(2024, 1, 10))
    clashing = stay(2, date(2024, 1, 5), date(2024, 1, 12))
    after = stay(3, date(2024, 1, 10), date(2024, 1, 12))

    result = resolve_availability(CAGE, [current, clashing, after], TODAY)

    assert result.next is after


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ((date(2024, 1, 1), date(2024, 1, 5)), (date(2024, 1, 4), date(2024, 1, 8)), True),
        ((date(2024, 1, 1), date(2024, 1, 5)), (date(2024, 1, 5), date(2024, 1, 8)), False),
        ((date(2024, 1, 5), date(2024, 1, 8)), (date(2024, 1, 1), date(2024, 1, 5)), False),
        ((date(2024, 1, 1), date(2024, 1, 10)), (date(2024, 1, 3), date(2024, 1, 4)), True),
    ],
)
def test_ranges_overlap_uses_exclusive_check_out(a, b, expected):
    assert ranges_overlap(*a, *b) is expected


def test_covers_and_stay_length():
    booking = stay(1, date(2024, 1, 1), date(2024, 1, 5))

    assert covers(booking, date(2024, 1, 1))
    assert covers(booking, date(2024, 1, 4))
    assert not covers(booking, date(2024, 1, 5))
    assert stay_length(booking.check_in_date, booking.check_out_date) == 4
