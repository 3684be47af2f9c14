"""Order router - client checkout and staff order workflow"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, get_staff_user
from ...database import get_db
from ...models import OrderStatus, User
from ...shared.schemas import Envelope, ReceiptAttach, ok
from .schemas import CheckoutRequest, OrderResponse, OrderStatusUpdate
from .service import OrderService

router = APIRouter(tags=["Orders"])


def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    """Dependency injection for OrderService"""
    return OrderService(db)


# ============================================================================
# CLIENT ROUTES
# ============================================================================


@router.get("/api/client/orders", response_model=Envelope[list[OrderResponse]])
async def get_my_orders(
    current_user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    orders = service.get_orders_for_user(current_user)
    return ok([OrderResponse.model_validate(o) for o in orders])


@router.post("/api/client/orders", response_model=Envelope[OrderResponse], status_code=201)
async def checkout(
    data: CheckoutRequest,
    current_user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    order = service.checkout(data, current_user)
    return ok(OrderResponse.model_validate(order), "Order placed successfully")


@router.get("/api/client/orders/{order_id}", response_model=Envelope[OrderResponse])
async def get_my_order(
    order_id: int,
    current_user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    order = service.get_order_for_user(order_id, current_user)
    return ok(OrderResponse.model_validate(order))


@router.post("/api/client/orders/{order_id}/receipt", response_model=Envelope[OrderResponse])
async def attach_receipt(
    order_id: int,
    data: ReceiptAttach,
    current_user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    order = service.attach_receipt(order_id, data.receipt_url, current_user)
    return ok(OrderResponse.model_validate(order), "Receipt uploaded successfully")


@router.post("/api/client/orders/{order_id}/cancel", response_model=Envelope[OrderResponse])
async def cancel_my_order(
    order_id: int,
    current_user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    order = service.cancel_order_for_user(order_id, current_user)
    return ok(OrderResponse.model_validate(order), "Order cancelled successfully")


# ============================================================================
# STAFF ROUTES
# ============================================================================


@router.get("/api/admin/orders", response_model=Envelope[list[OrderResponse]])
async def list_orders(
    status: Optional[OrderStatus] = Query(None),
    _staff: User = Depends(get_staff_user),
    service: OrderService = Depends(get_order_service),
):
    orders = service.list_orders(status)
    return ok([OrderResponse.model_validate(o) for o in orders])


@router.get("/api/admin/orders/{order_id}", response_model=Envelope[OrderResponse])
async def get_order(
    order_id: int,
    _staff: User = Depends(get_staff_user),
    service: OrderService = Depends(get_order_service),
):
    order = service.get_order(order_id)
    return ok(OrderResponse.model_validate(order))


@router.patch("/api/admin/orders/{order_id}", response_model=Envelope[OrderResponse])
async def update_order(
    order_id: int,
    data: OrderStatusUpdate,
    _staff: User = Depends(get_staff_user),
    service: OrderService = Depends(get_order_service),
):
    order = service.update_order(order_id, data)
    return ok(OrderResponse.model_validate(order), "Order updated successfully")


@router.post("/api/admin/orders/{order_id}/verify-receipt", response_model=Envelope[OrderResponse])
async def verify_receipt(
    order_id: int,
    staff: User = Depends(get_staff_user),
    service: OrderService = Depends(get_order_service),
):
    order = service.verify_receipt(order_id, staff)
    return ok(OrderResponse.model_validate(order), "Receipt verified and order confirmed")
