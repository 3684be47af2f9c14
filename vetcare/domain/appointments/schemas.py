"""Appointment domain schemas - Pydantic models for validation"""

from datetime import date, datetime, time
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ...models import AppointmentStatus
from ...shared.validators import validate_receipt_url


class AppointmentCreate(BaseModel):
    """
    Schema for booking an appointment.
    Sending cage_id makes it a boarding reservation, which needs both dates.
    """

    pet_id: int
    service_name: str
    appointment_date: Optional[date] = None
    appointment_time: Optional[time] = None
    cage_id: Optional[int] = None
    check_in_date: Optional[date] = None
    check_out_date: Optional[date] = None
    boarding_instructions: Optional[str] = None
    payment_method: Optional[str] = None
    notes: Optional[str] = None
    receipt_url: Optional[str] = None

    @field_validator("payment_method")
    @classmethod
    def normalize_payment_method(cls, v):
        if v is None:
            return v
        v = v.strip().lower() or None
        if v and len(v) > 50:
            raise ValueError("Payment method must be at most 50 characters")
        return v

    @field_validator("receipt_url")
    @classmethod
    def validate_receipt(cls, v):
        return validate_receipt_url(v)


class AppointmentStatusUpdate(BaseModel):
    """Schema for staff status changes"""

    status: AppointmentStatus
    notes: Optional[str] = None


class AppointmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    pet_id: int
    service_name: str
    appointment_date: date
    appointment_time: Optional[time] = None
    cage_id: Optional[int] = None
    check_in_date: Optional[date] = None
    check_out_date: Optional[date] = None
    boarding_days: Optional[int] = None
    cage_rate: Optional[float] = None
    total_amount: Optional[float] = None
    boarding_instructions: Optional[str] = None
    payment_method: Optional[str] = None
    requires_receipt: bool = False
    receipt_url: Optional[str] = None
    receipt_verified: bool = False
    receipt_verified_at: Optional[datetime] = None
    notes: Optional[str] = None
    status: AppointmentStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
