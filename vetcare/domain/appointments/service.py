"""Appointment service - Booking, cancellation and status transitions"""

import logging
from datetime import datetime, time
from typing import Optional

from sqlalchemy.orm import Session

from ...config import CANCELLATION_NOTICE_HOURS
from ...models import Appointment, AppointmentStatus, User, payment_requires_receipt
from ...services.notification_service import create_notification
from ...shared.errors import ConflictError, NotFoundError, ValidationError
from ...shared.validators import validate_date_range
from ...utils.sanitization import sanitize_optional_text
from ..boarding.availability import stay_length
from ..boarding.repository import BLOCKING_STATUSES, BoardingRepository
from .repository import AppointmentRepository
from .schemas import AppointmentCreate, AppointmentStatusUpdate

logger = logging.getLogger(__name__)

# Manual staff transitions; completed, cancelled and rejected are terminal
VALID_TRANSITIONS = {
    AppointmentStatus.PENDING: {
        AppointmentStatus.CONFIRMED,
        AppointmentStatus.CANCELLED,
        AppointmentStatus.REJECTED,
    },
    AppointmentStatus.CONFIRMED: {AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED},
    AppointmentStatus.COMPLETED: set(),
    AppointmentStatus.CANCELLED: set(),
    AppointmentStatus.REJECTED: set(),
}


def validate_status_transition(current: AppointmentStatus, new: AppointmentStatus) -> bool:
    """Allow same status (no-op) or a transition listed in VALID_TRANSITIONS"""
    if current == new:
        return True
    return new in VALID_TRANSITIONS.get(current, set())


class AppointmentService:
    """Service layer for appointment business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AppointmentRepository()
        self.boarding_repo = BoardingRepository()

    # ------------------------------------------------------------------
    # Client operations
    # ------------------------------------------------------------------

    def get_appointments(
        self, user: User, status: Optional[AppointmentStatus] = None
    ) -> list[Appointment]:
        return self.repo.get_appointments_for_user(self.db, user.id, status)

    def get_appointment(self, appointment_id: int, user: User) -> Appointment:
        appointment = self.repo.get_appointment_for_user(self.db, appointment_id, user.id)
        if not appointment:
            raise NotFoundError("Appointment", appointment_id)
        return appointment

    def create_appointment(self, data: AppointmentCreate, user: User) -> Appointment:
        """Book an appointment; a cage_id turns it into a boarding reservation"""
        logger.info(f"📥 Creating appointment for user_id: {user.id}, pet_id: {data.pet_id}")

        if not self.repo.get_pet_for_user(self.db, data.pet_id, user.id):
            raise NotFoundError("Pet", data.pet_id)

        service_name = (data.service_name or "").strip()
        if not service_name:
            raise ValidationError("Service is required")

        if data.payment_method and payment_requires_receipt(data.payment_method) and not data.receipt_url:
            raise ValidationError("Payment receipt is required")

        appointment_data = {
            "pet_id": data.pet_id,
            "service_name": sanitize_optional_text(service_name, max_length=100),
            "appointment_date": data.appointment_date,
            "appointment_time": data.appointment_time,
            "payment_method": data.payment_method,
            "receipt_url": data.receipt_url,
            "receipt_verified": False,
            "notes": sanitize_optional_text(data.notes),
            "status": AppointmentStatus.PENDING,
        }

        if data.cage_id is not None:
            appointment_data.update(self._boarding_fields(data))
        elif data.check_in_date or data.check_out_date:
            raise ValidationError("A cage must be selected for boarding dates")
        elif data.appointment_date is None:
            raise ValidationError("Appointment date is required")

        appointment = self.repo.create_appointment(self.db, user.id, **appointment_data)
        logger.info(
            f"✅ Appointment {appointment.id} created (cage={appointment.cage_id}, status=pending)"
        )
        return appointment

    def cancel_appointment(
        self, appointment_id: int, user: User, now: Optional[datetime] = None
    ) -> Appointment:
        """Client cancellation: pending only, and far enough ahead of the start"""
        appointment = self.get_appointment(appointment_id, user)

        if appointment.status != AppointmentStatus.PENDING:
            raise ValidationError("Only pending appointments can be cancelled")

        now = now or datetime.now()
        starts_at = datetime.combine(appointment.appointment_date, appointment.appointment_time or time.min)
        hours_until = (starts_at - now).total_seconds() / 3600
        if hours_until < CANCELLATION_NOTICE_HOURS:
            raise ValidationError(
                f"Appointments can only be cancelled at least {CANCELLATION_NOTICE_HOURS} hours in advance"
            )

        appointment = self.repo.update_appointment(
            self.db, appointment, status=AppointmentStatus.CANCELLED
        )
        logger.info(f"🚫 Appointment {appointment.id} cancelled by user {user.id}")
        return appointment

    def attach_receipt(self, appointment_id: int, receipt_url: str, user: User) -> Appointment:
        """Store the URL of an uploaded payment receipt; verification starts over"""
        appointment = self.get_appointment(appointment_id, user)
        if appointment.status != AppointmentStatus.PENDING:
            raise ValidationError("Receipts can only be attached to pending appointments")

        appointment = self.repo.update_appointment(
            self.db,
            appointment,
            receipt_url=receipt_url,
            receipt_verified=False,
            receipt_verified_at=None,
            receipt_verified_by=None,
        )
        logger.info(f"🧾 Receipt attached to appointment {appointment.id}")
        return appointment

    # ------------------------------------------------------------------
    # Staff operations
    # ------------------------------------------------------------------

    def list_appointments(
        self, status: Optional[AppointmentStatus] = None, cage_id: Optional[int] = None
    ) -> list[Appointment]:
        return self.repo.get_appointments(self.db, status, cage_id)

    def update_status(self, appointment_id: int, data: AppointmentStatusUpdate) -> Appointment:
        appointment = self.repo.get_appointment(self.db, appointment_id)
        if not appointment:
            raise NotFoundError("Appointment", appointment_id)

        old_status = appointment.status
        if not validate_status_transition(old_status, data.status):
            raise ConflictError(
                f"Cannot change appointment status from {old_status.value} to {data.status.value}",
                {"current_status": old_status.value},
            )

        if data.status == AppointmentStatus.CONFIRMED and old_status != AppointmentStatus.CONFIRMED:
            if appointment.requires_receipt and not appointment.receipt_verified:
                raise ConflictError(
                    "Payment receipt must be verified before the appointment can be confirmed",
                    {"payment_method": appointment.payment_method},
                )
            if appointment.is_boarding:
                self._ensure_no_confirmed_overlap(appointment)

        updates = {"status": data.status}
        if data.notes is not None:
            updates["notes"] = sanitize_optional_text(data.notes)

        appointment = self.repo.update_appointment(self.db, appointment, **updates)
        if old_status != appointment.status:
            logger.info(
                f"✅ Appointment {appointment.id} transitioned: {old_status.value} → {appointment.status.value}"
            )
        return appointment

    def verify_receipt(self, appointment_id: int, staff: User, approved: bool = True) -> Appointment:
        """
        Staff decision on the client's receipt.
        Approval confirms the appointment in the same commit, after the same cage
        overlap check as a manual confirm. Rejection clears the verification and
        leaves the appointment pending so the client can upload again.
        """
        appointment = self.repo.get_appointment(self.db, appointment_id)
        if not appointment:
            raise NotFoundError("Appointment", appointment_id)

        if not appointment.receipt_url:
            raise ValidationError("No receipt found for this appointment")
        if appointment.status != AppointmentStatus.PENDING:
            raise ConflictError(
                f"Only pending appointments can have their receipt verified (current: {appointment.status.value})",
                {"current_status": appointment.status.value},
            )

        if approved:
            if appointment.is_boarding:
                self._ensure_no_confirmed_overlap(appointment)
            appointment = self.repo.update_appointment(
                self.db,
                appointment,
                receipt_verified=True,
                receipt_verified_at=datetime.utcnow(),
                receipt_verified_by=staff.id,
                status=AppointmentStatus.CONFIRMED,
            )
            logger.info(f"✅ Receipt verified for appointment {appointment.id} by user {staff.id}")
            notification_type, title = "appointment_payment_verified", "Payment Verified"
            message = (
                f"Your payment for {appointment.service_name} on {appointment.appointment_date} "
                "has been verified and your appointment is confirmed."
            )
        else:
            appointment = self.repo.update_appointment(
                self.db,
                appointment,
                receipt_verified=False,
                receipt_verified_at=None,
                receipt_verified_by=None,
            )
            logger.info(f"❌ Receipt rejected for appointment {appointment.id} by user {staff.id}")
            notification_type, title = "appointment_receipt_rejected", "Receipt Rejected"
            message = (
                f"We could not verify the receipt for {appointment.service_name}. "
                "Please upload a clear copy of your payment receipt."
            )

        create_notification(
            self.db,
            user_id=appointment.user_id,
            notification_type=notification_type,
            title=title,
            message=message,
            related_id=appointment.id,
            related_type="appointment",
        )
        return appointment

    # ------------------------------------------------------------------

    def _boarding_fields(self, data: AppointmentCreate) -> dict:
        if not data.check_in_date or not data.check_out_date:
            raise ValidationError("Cage and boarding dates are required for boarding services")

        try:
            validate_date_range(data.check_in_date, data.check_out_date)
        except ValueError as e:
            raise ValidationError(str(e))

        cage = self.repo.get_active_cage(self.db, data.cage_id)
        if not cage:
            raise NotFoundError("Cage", data.cage_id)

        conflicts = self.boarding_repo.find_overlapping_reservations(
            self.db, cage.id, data.check_in_date, data.check_out_date, BLOCKING_STATUSES
        )
        if conflicts:
            logger.warning(
                f"⚠️ Cage {cage.id} booking refused, overlaps reservations {[c.id for c in conflicts]}"
            )
            raise ConflictError("Selected cage is not available for the chosen dates")

        boarding_days = stay_length(data.check_in_date, data.check_out_date)
        return {
            "cage_id": cage.id,
            "check_in_date": data.check_in_date,
            "check_out_date": data.check_out_date,
            "appointment_date": data.appointment_date or data.check_in_date,
            "boarding_days": boarding_days,
            "cage_rate": cage.daily_rate,
            "total_amount": round(cage.daily_rate * boarding_days, 2),
            "boarding_instructions": sanitize_optional_text(data.boarding_instructions),
        }

    def _ensure_no_confirmed_overlap(self, appointment: Appointment) -> None:
        clashes = self.boarding_repo.find_overlapping_reservations(
            self.db,
            appointment.cage_id,
            appointment.check_in_date,
            appointment.check_out_date,
            statuses=(AppointmentStatus.CONFIRMED,),
            exclude_id=appointment.id,
        )
        if clashes:
            logger.warning(
                f"⚠️ Refused to confirm appointment {appointment.id}: cage {appointment.cage_id} "
                f"already confirmed for {[c.id for c in clashes]}"
            )
            raise ConflictError(
                "Cage is already confirmed for an overlapping stay",
                {"conflicting_reservation_ids": [c.id for c in clashes]},
            )
