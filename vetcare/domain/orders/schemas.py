"""Order domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...models import OrderStatus
from ...shared.validators import validate_receipt_url


class CartItem(BaseModel):
    product_id: int
    quantity: int = Field(ge=1)


class Cart(BaseModel):
    """
    Client-side shopping cart, sent to the server once at checkout.
    Lines for the same product are merged.
    """

    items: list[CartItem] = []

    @field_validator("items")
    @classmethod
    def merge_lines(cls, v):
        quantities: dict[int, int] = {}
        for item in v:
            quantities[item.product_id] = quantities.get(item.product_id, 0) + item.quantity
        return [CartItem(product_id=pid, quantity=qty) for pid, qty in quantities.items()]

    @property
    def is_empty(self) -> bool:
        return not self.items


class CheckoutRequest(BaseModel):
    cart: Cart
    payment_method: str
    receipt_url: Optional[str] = None
    shipping_address: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("payment_method")
    @classmethod
    def normalize_payment_method(cls, v):
        v = v.strip().lower()
        if not v:
            raise ValueError("Payment method is required")
        if len(v) > 50:
            raise ValueError("Payment method must be at most 50 characters")
        return v

    @field_validator("receipt_url")
    @classmethod
    def validate_receipt(cls, v):
        return validate_receipt_url(v)


class OrderStatusUpdate(BaseModel):
    """Staff update; either field may be omitted"""

    status: Optional[OrderStatus] = None
    notes: Optional[str] = None


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: Optional[int] = None
    product_name: str
    quantity: int
    price: float


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_number: str
    user_id: int
    payment_method: str
    requires_receipt: bool
    receipt_url: Optional[str] = None
    receipt_verified: bool
    receipt_verified_at: Optional[datetime] = None
    subtotal: float
    total_amount: float
    shipping_address: Optional[str] = None
    notes: Optional[str] = None
    status: OrderStatus
    items: list[OrderItemResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
