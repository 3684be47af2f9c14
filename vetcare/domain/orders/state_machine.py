"""
Order status transitions

    pending → confirmed → processing → shipped → delivered → completed
                                     ↘ ready_for_pickup → completed
    pending / confirmed → cancelled

Every move is an explicit staff action. Orders paid by anything other than
cash stay in pending until their receipt is verified; cancelling is still
allowed while pending.
"""

from ...models import Order, OrderStatus
from ...shared.errors import ConflictError

ORDER_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.READY_FOR_PICKUP},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.READY_FOR_PICKUP: {OrderStatus.COMPLETED},
    OrderStatus.DELIVERED: {OrderStatus.COMPLETED},
    OrderStatus.COMPLETED: set(),
    OrderStatus.CANCELLED: set(),
}


def is_transition_allowed(current: OrderStatus, new: OrderStatus) -> bool:
    if current == new:
        return True
    return new in ORDER_TRANSITIONS.get(current, set())


def receipt_blocks(order: Order, new_status: OrderStatus) -> bool:
    """True when an unverified receipt keeps the order from leaving pending"""
    return (
        order.status == OrderStatus.PENDING
        and new_status not in (OrderStatus.PENDING, OrderStatus.CANCELLED)
        and order.requires_receipt
        and not order.receipt_verified
    )


def check_transition(order: Order, new_status: OrderStatus) -> None:
    """
    Raise ConflictError unless the order may move to new_status.
    Moving to the current status is accepted as a no-op.
    """
    current = order.status
    if not is_transition_allowed(current, new_status):
        raise ConflictError(
            f"Cannot change order status from {current.value} to {new_status.value}",
            {"current_status": current.value, "allowed": sorted(s.value for s in ORDER_TRANSITIONS[current])},
        )

    if receipt_blocks(order, new_status):
        raise ConflictError(
            "Payment receipt must be verified before the order can progress",
            {"current_status": current.value},
        )
