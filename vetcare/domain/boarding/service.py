"""Boarding service - Cage occupancy board and stay availability search"""

import logging
from collections import defaultdict
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Appointment, Cage
from ...shared.errors import ValidationError
from ...shared.validators import validate_date_range
from .availability import AvailabilityStatus, resolve_availability, stay_length
from .repository import BoardingRepository
from .schemas import AvailableCage, CageView, ReservationSummary

logger = logging.getLogger(__name__)


def summarize_reservation(reservation: Optional[Appointment]) -> Optional[ReservationSummary]:
    if reservation is None:
        return None

    pet = reservation.pet
    client = reservation.user
    return ReservationSummary(
        reservation_id=reservation.id,
        cage_id=reservation.cage_id,
        check_in_date=reservation.check_in_date,
        check_out_date=reservation.check_out_date,
        status=reservation.status,
        pet_name=pet.name if pet else None,
        pet_species=pet.species if pet else None,
        pet_breed=pet.breed if pet else None,
        client_name=client.full_name if client else None,
        client_phone=client.phone if client else None,
    )


def build_cage_view(cage: Cage, reservations: list[Appointment], today: date) -> CageView:
    result = resolve_availability(cage.id, reservations, today)
    return CageView(
        cage_id=cage.id,
        cage_number=cage.cage_number,
        cage_type=cage.cage_type,
        size_category=cage.size_category,
        capacity=cage.capacity,
        daily_rate=cage.daily_rate,
        amenities=cage.amenities or [],
        description=cage.description,
        location=cage.location,
        availability_status=result.status,
        current_reservation=summarize_reservation(result.current),
        next_reservation=summarize_reservation(result.next),
        overlap_detected=result.overlap_detected,
    )


class BoardingService:
    """Service layer for the boarding board"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BoardingRepository()

    def list_cage_views(
        self,
        as_of: Optional[date] = None,
        availability_status: Optional[AvailabilityStatus] = None,
        include_inactive: bool = False,
    ) -> list[CageView]:
        """Every cage with its derived occupancy on as_of (default: today)"""
        today = as_of or date.today()
        cages = self.repo.get_cages(self.db, include_inactive=include_inactive)

        by_cage = defaultdict(list)
        for reservation in self.repo.get_confirmed_reservations(
            self.db, (c.id for c in cages), today
        ):
            by_cage[reservation.cage_id].append(reservation)

        views = [build_cage_view(cage, by_cage[cage.id], today) for cage in cages]

        if availability_status:
            views = [v for v in views if v.availability_status == availability_status]
        return views

    def search_available_cages(
        self, check_in: date, check_out: date, cage_type: Optional[str] = None
    ) -> list[AvailableCage]:
        """Active cages with no pending/confirmed stay overlapping [check_in, check_out)"""
        try:
            validate_date_range(check_in, check_out)
        except ValueError as e:
            raise ValidationError(str(e))

        total_days = stay_length(check_in, check_out)
        blocked = self.repo.get_blocked_cage_ids(self.db, check_in, check_out)
        cages = [
            c for c in self.repo.get_cages(self.db, cage_type=cage_type) if c.id not in blocked
        ]
        cages.sort(key=lambda c: (c.cage_type, c.cage_number))

        logger.info(
            f"🔎 {len(cages)} cage(s) free for {check_in.isoformat()} → {check_out.isoformat()}"
        )
        return [
            AvailableCage(
                id=c.id,
                cage_number=c.cage_number,
                cage_type=c.cage_type,
                size_category=c.size_category,
                capacity=c.capacity,
                daily_rate=c.daily_rate,
                amenities=c.amenities or [],
                description=c.description,
                total_days=total_days,
                total_amount=round(c.daily_rate * total_days, 2),
            )
            for c in cages
        ]
