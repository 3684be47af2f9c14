"""Boarding repository - Reservation queries behind cage availability"""

from datetime import date
from typing import Iterable, Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Appointment, AppointmentStatus, Cage

# Statuses that keep a cage from being offered to another booking
BLOCKING_STATUSES = (AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED)


class BoardingRepository:
    """Repository for boarding reservation queries"""

    @staticmethod
    def get_cages(
        db: Session, include_inactive: bool = False, cage_type: Optional[str] = None
    ) -> list[Cage]:
        query = db.query(Cage)
        if not include_inactive:
            query = query.filter(Cage.is_active.is_(True))
        if cage_type and cage_type != "all":
            query = query.filter(Cage.cage_type == cage_type)
        return query.order_by(Cage.cage_number).all()

    @staticmethod
    def get_confirmed_reservations(
        db: Session, cage_ids: Iterable[int], as_of: date
    ) -> list[Appointment]:
        """
        Confirmed reservations for the given cages that have not ended by as_of.
        Pet and client are loaded for the denormalized summary fields.
        """
        cage_ids = list(cage_ids)
        if not cage_ids:
            return []

        return (
            db.query(Appointment)
            .options(joinedload(Appointment.pet), joinedload(Appointment.user))
            .filter(
                Appointment.cage_id.in_(cage_ids),
                Appointment.status == AppointmentStatus.CONFIRMED,
                Appointment.check_out_date > as_of,
            )
            .order_by(Appointment.check_in_date, Appointment.id)
            .all()
        )

    @staticmethod
    def find_overlapping_reservations(
        db: Session,
        cage_id: int,
        check_in: date,
        check_out: date,
        statuses: Iterable[AppointmentStatus] = BLOCKING_STATUSES,
        exclude_id: Optional[int] = None,
    ) -> list[Appointment]:
        """
        Reservations on a cage whose stay overlaps [check_in, check_out).
        Same half-open rule as availability.ranges_overlap.
        """
        query = db.query(Appointment).filter(
            Appointment.cage_id == cage_id,
            Appointment.status.in_(list(statuses)),
            Appointment.check_in_date < check_out,
            Appointment.check_out_date > check_in,
        )
        if exclude_id is not None:
            query = query.filter(Appointment.id != exclude_id)
        return query.order_by(Appointment.check_in_date).all()

    @staticmethod
    def get_blocked_cage_ids(db: Session, check_in: date, check_out: date) -> set[int]:
        """Cages holding a pending or confirmed stay that overlaps the range"""
        rows = (
            db.query(Appointment.cage_id)
            .filter(
                Appointment.cage_id.isnot(None),
                Appointment.status.in_(list(BLOCKING_STATUSES)),
                Appointment.check_in_date < check_out,
                Appointment.check_out_date > check_in,
            )
            .distinct()
            .all()
        )
        return {row[0] for row in rows}
