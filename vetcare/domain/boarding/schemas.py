"""Boarding domain schemas"""

from datetime import date
from typing import Optional

from pydantic import BaseModel

from ...models import AppointmentStatus, CageSize
from .availability import AvailabilityStatus


class ReservationSummary(BaseModel):
    """Reservation with the pet/client display fields the boarding board needs"""

    reservation_id: int
    cage_id: int
    check_in_date: date
    check_out_date: date
    status: AppointmentStatus
    pet_name: Optional[str] = None
    pet_species: Optional[str] = None
    pet_breed: Optional[str] = None
    client_name: Optional[str] = None
    client_phone: Optional[str] = None


class CageView(BaseModel):
    """Cage fields plus derived occupancy"""

    cage_id: int
    cage_number: str
    cage_type: str
    size_category: CageSize
    capacity: int
    daily_rate: float
    amenities: list[str] = []
    description: Optional[str] = None
    location: Optional[str] = None
    availability_status: AvailabilityStatus
    current_reservation: Optional[ReservationSummary] = None
    next_reservation: Optional[ReservationSummary] = None
    overlap_detected: bool = False


class AvailableCage(BaseModel):
    """Cage free for a requested stay, priced for that stay"""

    id: int
    cage_number: str
    cage_type: str
    size_category: CageSize
    capacity: int
    daily_rate: float
    amenities: list[str] = []
    description: Optional[str] = None
    total_days: int
    total_amount: float
