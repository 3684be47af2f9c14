"""Appointment repository - Database operations for appointments"""

from typing import Optional

from sqlalchemy.orm import Session

from ...database import commit
from ...models import Appointment, AppointmentStatus, Cage, Pet


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def get_appointments_for_user(
        db: Session, user_id: int, status: Optional[AppointmentStatus] = None
    ) -> list[Appointment]:
        query = db.query(Appointment).filter(Appointment.user_id == user_id)
        if status:
            query = query.filter(Appointment.status == status)
        return query.order_by(Appointment.appointment_date.desc(), Appointment.id.desc()).all()

    @staticmethod
    def get_appointment_for_user(
        db: Session, appointment_id: int, user_id: int
    ) -> Optional[Appointment]:
        return (
            db.query(Appointment)
            .filter(Appointment.id == appointment_id, Appointment.user_id == user_id)
            .first()
        )

    @staticmethod
    def get_appointment(db: Session, appointment_id: int) -> Optional[Appointment]:
        return db.query(Appointment).filter(Appointment.id == appointment_id).first()

    @staticmethod
    def get_appointments(
        db: Session,
        status: Optional[AppointmentStatus] = None,
        cage_id: Optional[int] = None,
    ) -> list[Appointment]:
        """Staff listing with optional filters"""
        query = db.query(Appointment)
        if status:
            query = query.filter(Appointment.status == status)
        if cage_id is not None:
            query = query.filter(Appointment.cage_id == cage_id)
        return query.order_by(Appointment.appointment_date.desc(), Appointment.id.desc()).all()

    @staticmethod
    def get_pet_for_user(db: Session, pet_id: int, user_id: int) -> Optional[Pet]:
        return db.query(Pet).filter(Pet.id == pet_id, Pet.user_id == user_id).first()

    @staticmethod
    def get_active_cage(db: Session, cage_id: int) -> Optional[Cage]:
        return db.query(Cage).filter(Cage.id == cage_id, Cage.is_active.is_(True)).first()

    @staticmethod
    def create_appointment(db: Session, user_id: int, **appointment_data) -> Appointment:
        appointment = Appointment(user_id=user_id, **appointment_data)
        db.add(appointment)
        commit(db)
        db.refresh(appointment)
        return appointment

    @staticmethod
    def update_appointment(db: Session, appointment: Appointment, **updates) -> Appointment:
        for key, value in updates.items():
            if hasattr(appointment, key):
                setattr(appointment, key, value)

        commit(db)
        db.refresh(appointment)
        return appointment
