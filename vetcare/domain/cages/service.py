"""Cage service - Business logic for cage operations"""

import logging
import math
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Cage, CageSize
from ...shared.errors import ConflictError, NotFoundError, ValidationError
from ...shared.validators import validate_cage_number
from ...utils.sanitization import sanitize_optional_text
from ..boarding.availability import AvailabilityStatus, resolve_availability
from .repository import CageRepository
from .schemas import CageCreate, CageUpdate

logger = logging.getLogger(__name__)

# Columns that cannot be cleared by sending null in an update
REQUIRED_FIELDS = ("cage_number", "cage_type", "size_category", "capacity", "daily_rate", "amenities")

CAGE_TYPE_MAX_LENGTH = 50


class CageService:
    """Service layer for cage business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CageRepository()

    def get_cages(
        self,
        cage_type: Optional[str] = None,
        size_category: Optional[CageSize] = None,
        include_inactive: bool = False,
    ) -> list[Cage]:
        return self.repo.get_cages(self.db, cage_type, size_category, include_inactive)

    def get_cage(self, cage_id: int) -> Cage:
        """Get a specific cage"""
        cage = self.repo.get_cage_by_id(self.db, cage_id)
        if not cage:
            raise NotFoundError("Cage", cage_id)
        return cage

    def create_cage(self, data: CageCreate) -> Cage:
        """Create a new cage with validation"""
        cage_number = self._clean_cage_number(data.cage_number)
        cage_type = self._clean_cage_type(data.cage_type)
        self._check_capacity(data.capacity)
        self._check_daily_rate(data.daily_rate)
        self._ensure_number_free(cage_number)

        cage = self.repo.create_cage(
            self.db,
            cage_number=cage_number,
            cage_type=cage_type,
            size_category=data.size_category,
            capacity=data.capacity,
            daily_rate=data.daily_rate,
            amenities=data.amenities,
            description=sanitize_optional_text(data.description),
            location=sanitize_optional_text(data.location, max_length=100),
            is_active=True,
        )
        logger.info(f"✅ Cage {cage.cage_number} created (id={cage.id})")
        return cage

    def update_cage(self, cage_id: int, data: CageUpdate) -> Cage:
        """Update only the fields present in the request"""
        cage = self.get_cage(cage_id)
        changes = data.model_dump(exclude_unset=True)

        updates = {}
        for field in REQUIRED_FIELDS:
            if changes.get(field) is not None:
                updates[field] = changes[field]

        if "cage_number" in updates:
            updates["cage_number"] = self._clean_cage_number(updates["cage_number"])
            if cage.is_active:
                self._ensure_number_free(updates["cage_number"], exclude_id=cage.id)
        if "cage_type" in updates:
            updates["cage_type"] = self._clean_cage_type(updates["cage_type"])
        if "capacity" in updates:
            self._check_capacity(updates["capacity"])
        if "daily_rate" in updates:
            self._check_daily_rate(updates["daily_rate"])
        if "description" in changes:
            updates["description"] = sanitize_optional_text(changes["description"])
        if "location" in changes:
            updates["location"] = sanitize_optional_text(changes["location"], max_length=100)

        cage = self.repo.update_cage(self.db, cage, **updates)
        logger.info(f"✅ Cage {cage.id} updated: {sorted(updates)}")
        return cage

    def delete_cage(self, cage_id: int, today: Optional[date] = None) -> Cage:
        """Deactivate a cage; an occupied cage cannot be deactivated"""
        cage = self.get_cage(cage_id)
        if not cage.is_active:
            return cage

        availability = resolve_availability(cage.id, cage.appointments, today or date.today())
        if availability.status == AvailabilityStatus.OCCUPIED:
            logger.warning(f"⚠️ Refused to deactivate occupied cage {cage.id}")
            raise ConflictError("Cannot delete occupied cage")

        cage = self.repo.update_cage(self.db, cage, is_active=False)
        logger.info(f"🗑️ Cage {cage.id} deactivated")
        return cage

    def permanent_delete_cage(self, cage_id: int) -> dict:
        """Remove a cage row for good; refused while any reservation references it"""
        cage = self.get_cage(cage_id)

        reservation_count = self.repo.count_reservations(self.db, cage.id)
        if reservation_count > 0:
            logger.warning(
                f"⚠️ Refused to permanently delete cage {cage.id}: {reservation_count} reservation(s) reference it"
            )
            raise ConflictError(
                "Cannot delete cage with existing reservations",
                {"reservation_count": reservation_count},
            )

        self.repo.delete_cage(self.db, cage)
        logger.info(f"🗑️ Cage {cage_id} permanently deleted")
        return {"id": cage_id}

    def _ensure_number_free(self, cage_number: str, exclude_id: Optional[int] = None) -> None:
        existing = self.repo.get_active_cage_by_number(self.db, cage_number, exclude_id)
        if existing:
            raise ValidationError(
                "Cage number already exists", {"cage_number": cage_number, "cage_id": existing.id}
            )

    @staticmethod
    def _clean_cage_number(value: str) -> str:
        try:
            return validate_cage_number(value)
        except ValueError as e:
            raise ValidationError(str(e))

    @staticmethod
    def _clean_cage_type(value: str) -> str:
        value = (value or "").strip()
        if not value:
            raise ValidationError("Cage type is required")
        if len(value) > CAGE_TYPE_MAX_LENGTH:
            raise ValidationError(f"Cage type must be at most {CAGE_TYPE_MAX_LENGTH} characters")
        return value

    @staticmethod
    def _check_capacity(capacity: int) -> None:
        if capacity < 1:
            raise ValidationError("Capacity must be at least 1")

    @staticmethod
    def _check_daily_rate(daily_rate: float) -> None:
        if not math.isfinite(daily_rate):
            raise ValidationError("Daily rate must be a finite number")
        if daily_rate < 0:
            raise ValidationError("Daily rate cannot be negative")
