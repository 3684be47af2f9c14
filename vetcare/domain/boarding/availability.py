"""
Cage availability resolution.

Derives a cage's occupancy from its reservations for a given day. Pure: no
database access and no clock reads, the caller passes "today".

Occupancy policy: check-in is inclusive and check-out is exclusive, so a stay
booked [Jan 1, Jan 5) occupies the nights of Jan 1-4 and the cage is free
again on Jan 5. Every caller that asks "is this cage taken on day X" or
"do these stays clash" goes through covers() / ranges_overlap().
"""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Iterable, Optional

from ...models import AppointmentStatus

logger = logging.getLogger(__name__)

# Only confirmed reservations hold a cage for occupancy purposes
OCCUPYING_STATUSES = frozenset({AppointmentStatus.CONFIRMED})


class AvailabilityStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    RESERVED = "reserved"


@dataclass(frozen=True)
class AvailabilityResult:
    """Derived occupancy of one cage on one day."""

    status: AvailabilityStatus
    current: Optional[Any] = None
    next: Optional[Any] = None
    overlap_detected: bool = False


def ranges_overlap(a_in: date, a_out: date, b_in: date, b_out: date) -> bool:
    """Half-open overlap test for [a_in, a_out) and [b_in, b_out)"""
    return a_in < b_out and b_in < a_out


def covers(reservation, day: date) -> bool:
    """True when the reservation holds the cage on the given day"""
    return reservation.check_in_date <= day < reservation.check_out_date


def stay_length(check_in: date, check_out: date) -> int:
    """Number of nights between check-in and check-out"""
    return (check_out - check_in).days


def _sort_key(reservation):
    return (reservation.check_in_date, reservation.id if reservation.id is not None else 0)


def _status_of(reservation) -> AppointmentStatus:
    status = reservation.status
    return status if isinstance(status, AppointmentStatus) else AppointmentStatus(status)


def resolve_availability(cage_id, reservations: Iterable[Any], today: date) -> AvailabilityResult:
    """
    Resolve availability for a cage.

    Args:
        cage_id: Cage whose reservations are being examined; rows for other
            cages and non-boarding rows are ignored
        reservations: Objects exposing id, cage_id, check_in_date,
            check_out_date and status
        today: The day to resolve for

    Returns:
        AvailabilityResult with the status label, the reservation holding
        the cage today (if any) and the next one after it (if any)
    """
    confirmed = sorted(
        (
            r
            for r in reservations
            if r.cage_id == cage_id
            and r.check_in_date is not None
            and r.check_out_date is not None
            and _status_of(r) in OCCUPYING_STATUSES
        ),
        key=_sort_key,
    )

    current_candidates = [r for r in confirmed if covers(r, today)]
    current = current_candidates[0] if current_candidates else None
    overlap_detected = len(current_candidates) > 1

    if overlap_detected:
        logger.warning(
            f"⚠️ Cage {cage_id} has {len(current_candidates)} confirmed reservations covering "
            f"{today.isoformat()}: {[r.id for r in current_candidates]} - using reservation {current.id}"
        )

    upcoming = (
        r
        for r in confirmed
        if r.check_in_date > today
        and (current is None or r.check_in_date >= current.check_out_date)
    )
    next_reservation = next(upcoming, None)

    if current is not None:
        status = AvailabilityStatus.OCCUPIED
    elif next_reservation is not None:
        status = AvailabilityStatus.RESERVED
    else:
        status = AvailabilityStatus.AVAILABLE

    return AvailabilityResult(
        status=status,
        current=current,
        next=next_reservation,
        overlap_detected=overlap_detected,
    )
