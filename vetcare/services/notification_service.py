"""
In-app notification service
Records client-facing notifications for order workflow events
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..database import commit
from ..models import Notification, Order, OrderStatus
from ..shared.errors import NotFoundError

logger = logging.getLogger(__name__)


def build_order_status_notification(
    order: Order, status: OrderStatus, notes: Optional[str] = None
) -> tuple[str, str]:
    """
    Title and message shown to the client when their order changes status

    Returns:
        (title, message)
    """
    number = order.order_number
    suffix = f" Note: {notes}" if notes else ""

    if status == OrderStatus.CONFIRMED:
        return (
            "Order Confirmed",
            f"Your order {number} has been confirmed and is being prepared.",
        )
    if status == OrderStatus.PROCESSING:
        return "Order Processing", f"Your order {number} is now being processed.{suffix}"
    if status == OrderStatus.SHIPPED:
        tracking = f" Tracking info: {notes}" if notes else ""
        return (
            "Order Shipped",
            f"Great news! Your order {number} has been shipped and is on its way to you.{tracking}",
        )
    if status == OrderStatus.READY_FOR_PICKUP:
        return "Ready for Pickup", f"Your order {number} is ready for pickup at the clinic.{suffix}"
    if status == OrderStatus.DELIVERED:
        return (
            "Order Delivered",
            f"Your order {number} has been delivered! We hope you enjoy your purchase.",
        )
    if status == OrderStatus.COMPLETED:
        return "Order Completed", f"Your order {number} is complete. Thank you for shopping with us."
    if status == OrderStatus.CANCELLED:
        reason = f" Reason: {notes}" if notes else ""
        return "Order Cancelled", f"Your order {number} has been cancelled.{reason}"

    return "Order Updated", f"Your order {number} status has been updated to {status.value}."


def create_notification(
    db: Session,
    user_id: int,
    notification_type: str,
    title: str,
    message: str,
    related_id: Optional[int] = None,
    related_type: Optional[str] = None,
) -> Optional[Notification]:
    """
    Record a notification. Failures are logged and swallowed so that the
    workflow step which triggered the notification still succeeds.
    """
    try:
        notification = Notification(
            user_id=user_id,
            type=notification_type,
            title=title,
            message=message,
            related_id=related_id,
            related_type=related_type,
            is_read=False,
        )
        db.add(notification)
        db.commit()
        db.refresh(notification)
        logger.info(f"🔔 {notification_type} notification recorded for user {user_id}")
        return notification
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"❌ Failed to record {notification_type} notification for user {user_id}: {e}")
        return None


def notify_order_status(
    db: Session, order: Order, status: OrderStatus, notes: Optional[str] = None
) -> Optional[Notification]:
    title, message = build_order_status_notification(order, status, notes)
    return create_notification(
        db,
        user_id=order.user_id,
        notification_type=f"order_{status.value}",
        title=title,
        message=message,
        related_id=order.id,
        related_type="order",
    )


def get_notifications(db: Session, user_id: int, unread_only: bool = False) -> list[Notification]:
    query = db.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        query = query.filter(Notification.is_read.is_(False))
    return query.order_by(Notification.created_at.desc(), Notification.id.desc()).all()


def mark_notification_read(db: Session, notification_id: int, user_id: int) -> Notification:
    notification = (
        db.query(Notification)
        .filter(Notification.id == notification_id, Notification.user_id == user_id)
        .first()
    )
    if not notification:
        raise NotFoundError("Notification", notification_id)

    if not notification.is_read:
        notification.is_read = True
        commit(db)
        db.refresh(notification)
    return notification
