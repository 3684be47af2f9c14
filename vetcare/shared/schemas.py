"""Shared response schemas"""

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, field_validator

from .validators import validate_receipt_url

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Single response shape for every domain endpoint"""

    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    code: str
    details: Optional[Any] = None


def ok(data=None, message: Optional[str] = None) -> dict:
    """Build a success envelope payload"""
    return {"success": True, "data": data, "message": message}


class ReceiptAttach(BaseModel):
    """Client upload of a payment receipt, already stored elsewhere"""

    receipt_url: str

    @field_validator("receipt_url")
    @classmethod
    def validate_receipt(cls, v):
        v = validate_receipt_url(v)
        if not v:
            raise ValueError("Receipt URL is required")
        return v


class ReceiptVerification(BaseModel):
    """Staff decision on an uploaded receipt"""

    approved: bool = True
