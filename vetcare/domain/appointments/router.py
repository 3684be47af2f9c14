"""Appointment router - client booking and staff status management"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, get_staff_user
from ...database import get_db
from ...models import AppointmentStatus, User
from ...shared.schemas import Envelope, ReceiptAttach, ReceiptVerification, ok
from .schemas import AppointmentCreate, AppointmentResponse, AppointmentStatusUpdate
from .service import AppointmentService

router = APIRouter(tags=["Appointments"])


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db)


# ============================================================================
# CLIENT ROUTES
# ============================================================================


@router.get("/api/client/appointments", response_model=Envelope[list[AppointmentResponse]])
async def get_my_appointments(
    status: Optional[AppointmentStatus] = Query(None),
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointments = service.get_appointments(current_user, status)
    return ok([AppointmentResponse.model_validate(a) for a in appointments])


@router.post(
    "/api/client/appointments", response_model=Envelope[AppointmentResponse], status_code=201
)
async def book_appointment(
    data: AppointmentCreate,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointment = service.create_appointment(data, current_user)
    return ok(AppointmentResponse.model_validate(appointment), "Appointment booked successfully")


@router.get("/api/client/appointments/{appointment_id}", response_model=Envelope[AppointmentResponse])
async def get_my_appointment(
    appointment_id: int,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointment = service.get_appointment(appointment_id, current_user)
    return ok(AppointmentResponse.model_validate(appointment))


@router.post(
    "/api/client/appointments/{appointment_id}/cancel",
    response_model=Envelope[AppointmentResponse],
)
async def cancel_my_appointment(
    appointment_id: int,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointment = service.cancel_appointment(appointment_id, current_user)
    return ok(AppointmentResponse.model_validate(appointment), "Appointment cancelled successfully")


@router.post(
    "/api/client/appointments/{appointment_id}/receipt",
    response_model=Envelope[AppointmentResponse],
)
async def attach_receipt(
    appointment_id: int,
    data: ReceiptAttach,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointment = service.attach_receipt(appointment_id, data.receipt_url, current_user)
    return ok(AppointmentResponse.model_validate(appointment), "Receipt uploaded successfully")


# ============================================================================
# STAFF ROUTES
# ============================================================================


@router.get("/api/admin/appointments", response_model=Envelope[list[AppointmentResponse]])
async def list_appointments(
    status: Optional[AppointmentStatus] = Query(None),
    cage_id: Optional[int] = Query(None),
    _staff: User = Depends(get_staff_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointments = service.list_appointments(status, cage_id)
    return ok([AppointmentResponse.model_validate(a) for a in appointments])


@router.patch("/api/admin/appointments/{appointment_id}", response_model=Envelope[AppointmentResponse])
async def update_appointment_status(
    appointment_id: int,
    data: AppointmentStatusUpdate,
    _staff: User = Depends(get_staff_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointment = service.update_status(appointment_id, data)
    return ok(AppointmentResponse.model_validate(appointment), "Appointment updated successfully")


@router.post(
    "/api/admin/appointments/{appointment_id}/verify-receipt",
    response_model=Envelope[AppointmentResponse],
)
async def verify_receipt(
    appointment_id: int,
    data: Optional[ReceiptVerification] = None,
    staff: User = Depends(get_staff_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    approved = data.approved if data else True
    appointment = service.verify_receipt(appointment_id, staff, approved)
    message = "Receipt verified and appointment confirmed" if approved else "Receipt rejected"
    return ok(AppointmentResponse.model_validate(appointment), message)
