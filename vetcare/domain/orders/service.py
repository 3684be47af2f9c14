"""Order service - Checkout, status workflow and receipt verification"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Order, OrderStatus, User, payment_requires_receipt
from ...services.notification_service import create_notification, notify_order_status
from ...shared.errors import ConflictError, NotFoundError, ValidationError
from ...utils.sanitization import sanitize_optional_text
from .repository import OrderRepository
from .schemas import CheckoutRequest, OrderStatusUpdate
from .state_machine import check_transition

logger = logging.getLogger(__name__)


class OrderService:
    """Service layer for order business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = OrderRepository()

    # ------------------------------------------------------------------
    # Client operations
    # ------------------------------------------------------------------

    def checkout(self, data: CheckoutRequest, user: User) -> Order:
        """Turn the client's cart into a pending order priced from the catalogue"""
        if data.cart.is_empty:
            raise ValidationError("Order items are required")

        if payment_requires_receipt(data.payment_method) and not data.receipt_url:
            raise ValidationError("Payment receipt is required")

        product_ids = [item.product_id for item in data.cart.items]
        products = self.repo.get_active_products(self.db, product_ids)

        lines = []
        for item in data.cart.items:
            product = products.get(item.product_id)
            if not product:
                raise NotFoundError("Product", item.product_id)
            if product.stock_quantity < item.quantity:
                raise ValidationError(
                    f"Insufficient stock for {product.name}. Available: {product.stock_quantity}",
                    {"product_id": product.id, "available": product.stock_quantity},
                )
            lines.append((product, item.quantity))

        subtotal = round(sum(product.price * quantity for product, quantity in lines), 2)
        order = self.repo.create_order(
            self.db,
            user.id,
            lines,
            payment_method=data.payment_method,
            receipt_url=data.receipt_url,
            receipt_verified=False,
            subtotal=subtotal,
            total_amount=subtotal,
            shipping_address=sanitize_optional_text(data.shipping_address),
            notes=sanitize_optional_text(data.notes),
            status=OrderStatus.PENDING,
        )
        logger.info(
            f"🛒 Order {order.order_number} created for user {user.id}: "
            f"{len(lines)} line(s), total {order.total_amount:.2f}, payment {order.payment_method}"
        )
        return order

    def get_orders_for_user(self, user: User) -> list[Order]:
        return self.repo.get_orders_for_user(self.db, user.id)

    def get_order_for_user(self, order_id: int, user: User) -> Order:
        order = self.repo.get_order_by_id(self.db, order_id, user.id)
        if not order:
            raise NotFoundError("Order", order_id)
        return order

    def attach_receipt(self, order_id: int, receipt_url: str, user: User) -> Order:
        """Store the URL of an uploaded payment receipt; verification starts over"""
        order = self.get_order_for_user(order_id, user)
        if order.status != OrderStatus.PENDING:
            raise ValidationError("Receipts can only be attached to pending orders")

        order = self.repo.update_order(
            self.db,
            order,
            receipt_url=receipt_url,
            receipt_verified=False,
            receipt_verified_at=None,
            receipt_verified_by=None,
        )
        logger.info(f"🧾 Receipt attached to order {order.order_number}")
        return order

    def cancel_order_for_user(self, order_id: int, user: User) -> Order:
        order = self.get_order_for_user(order_id, user)
        if order.status != OrderStatus.PENDING:
            raise ValidationError("Only pending orders can be cancelled")

        order = self.repo.update_order(self.db, order, status=OrderStatus.CANCELLED)
        logger.info(f"🚫 Order {order.order_number} cancelled by user {user.id}")
        return order

    # ------------------------------------------------------------------
    # Staff operations
    # ------------------------------------------------------------------

    def list_orders(self, status: Optional[OrderStatus] = None) -> list[Order]:
        return self.repo.get_orders(self.db, status)

    def get_order(self, order_id: int) -> Order:
        order = self.repo.get_order_by_id(self.db, order_id)
        if not order:
            raise NotFoundError("Order", order_id)
        return order

    def update_order(self, order_id: int, data: OrderStatusUpdate) -> Order:
        """Move an order along the status table and notify the client on change"""
        order = self.get_order(order_id)
        old_status = order.status

        updates = {}
        if data.status is not None:
            check_transition(order, data.status)
            updates["status"] = data.status
        if data.notes is not None:
            updates["notes"] = sanitize_optional_text(data.notes)

        if not updates:
            raise ValidationError("Nothing to update")

        order = self.repo.update_order(self.db, order, **updates)

        if order.status != old_status:
            logger.info(
                f"✅ Order {order.order_number} transitioned: {old_status.value} → {order.status.value}"
            )
            notify_order_status(self.db, order, order.status, data.notes)
        return order

    def verify_receipt(self, order_id: int, staff: User) -> Order:
        """Accept the uploaded receipt and confirm the order in the same commit"""
        order = self.get_order(order_id)

        if not order.receipt_url:
            raise ValidationError("No receipt found for this order")
        if order.status != OrderStatus.PENDING:
            raise ConflictError(
                f"Only pending orders can have their receipt verified (current: {order.status.value})",
                {"current_status": order.status.value},
            )

        order = self.repo.update_order(
            self.db,
            order,
            receipt_verified=True,
            receipt_verified_at=datetime.utcnow(),
            receipt_verified_by=staff.id,
            status=OrderStatus.CONFIRMED,
        )
        logger.info(f"✅ Receipt verified for order {order.order_number} by user {staff.id}")

        create_notification(
            self.db,
            user_id=order.user_id,
            notification_type="order_confirmed",
            title="Order Confirmed",
            message=(
                f"Your order {order.order_number} has been confirmed! Your payment has been "
                "verified and your order is being prepared."
            ),
            related_id=order.id,
            related_type="order",
        )
        return order
