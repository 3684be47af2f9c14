"""Cage domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ...models import CageSize
from ...shared.validators import validate_amenities


class CageCreate(BaseModel):
    """Schema for creating a new cage"""

    cage_number: str
    cage_type: str
    size_category: CageSize = CageSize.MEDIUM
    capacity: int = 1
    daily_rate: float
    amenities: list[str] = []
    description: Optional[str] = None
    location: Optional[str] = None

    @field_validator("amenities")
    @classmethod
    def clean_amenities(cls, v):
        return validate_amenities(v)


class CageUpdate(BaseModel):
    """Schema for updating an existing cage; omitted fields are left unchanged"""

    cage_number: Optional[str] = None
    cage_type: Optional[str] = None
    size_category: Optional[CageSize] = None
    capacity: Optional[int] = None
    daily_rate: Optional[float] = None
    amenities: Optional[list[str]] = None
    description: Optional[str] = None
    location: Optional[str] = None

    @field_validator("amenities")
    @classmethod
    def clean_amenities(cls, v):
        return validate_amenities(v)


class CageResponse(BaseModel):
    """Schema for cage response"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    cage_number: str
    cage_type: str
    size_category: CageSize
    capacity: int
    daily_rate: float
    amenities: list[str] = []
    description: Optional[str] = None
    location: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
