"""Order repository - Database operations for orders"""

from typing import Optional

from sqlalchemy.orm import Session, selectinload

from ...database import commit
from ...models import Order, OrderItem, OrderStatus, Product


class OrderRepository:
    """Repository for order database operations"""

    @staticmethod
    def get_orders(db: Session, status: Optional[OrderStatus] = None) -> list[Order]:
        query = db.query(Order).options(selectinload(Order.items).selectinload(OrderItem.product))
        if status:
            query = query.filter(Order.status == status)
        return query.order_by(Order.created_at.desc(), Order.id.desc()).all()

    @staticmethod
    def get_orders_for_user(db: Session, user_id: int) -> list[Order]:
        return (
            db.query(Order)
            .options(selectinload(Order.items).selectinload(OrderItem.product))
            .filter(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .all()
        )

    @staticmethod
    def get_order_by_id(db: Session, order_id: int, user_id: Optional[int] = None) -> Optional[Order]:
        query = db.query(Order).filter(Order.id == order_id)
        if user_id is not None:
            query = query.filter(Order.user_id == user_id)
        return query.first()

    @staticmethod
    def get_active_products(db: Session, product_ids: list[int]) -> dict[int, Product]:
        products = (
            db.query(Product)
            .filter(Product.id.in_(product_ids), Product.is_active.is_(True))
            .all()
        )
        return {p.id: p for p in products}

    @staticmethod
    def create_order(db: Session, user_id: int, lines: list[tuple[Product, int]], **order_data) -> Order:
        """Create the order and its items and take the quantities out of stock, in one commit"""
        order = Order(user_id=user_id, **order_data)
        for product, quantity in lines:
            order.items.append(OrderItem(product_id=product.id, quantity=quantity, price=product.price))
            product.stock_quantity = max(0, product.stock_quantity - quantity)

        db.add(order)
        commit(db)
        db.refresh(order)
        return order

    @staticmethod
    def update_order(db: Session, order: Order, **updates) -> Order:
        for key, value in updates.items():
            if hasattr(order, key):
                setattr(order, key, value)

        commit(db)
        db.refresh(order)
        return order
