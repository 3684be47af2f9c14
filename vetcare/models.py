import enum

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    Time,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .config import CASH_PAYMENT_METHODS
from .database import Base


class UserRole(str, enum.Enum):
    CLIENT = "client"
    EMPLOYEE = "employee"
    ADMIN = "admin"


class CageSize(str, enum.Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    EXTRA_LARGE = "extra_large"


class AppointmentStatus(str, enum.Enum):
    """Lifecycle states for appointments and boarding reservations."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REJECTED = "rejected"


class OrderStatus(str, enum.Enum):
    """Lifecycle states for shop orders."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    READY_FOR_PICKUP = "ready_for_pickup"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def payment_requires_receipt(payment_method) -> bool:
    return (payment_method or "").strip().lower() not in CASH_PAYMENT_METHODS


def enum_column(enum_cls):
    """Store enum values (not member names) in a plain VARCHAR column"""
    return Enum(
        enum_cls,
        native_enum=False,
        length=32,
        values_callable=lambda members: [member.value for member in members],
        validate_strings=True,
    )


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(50), nullable=True)
    role = Column(enum_column(UserRole), default=UserRole.CLIENT, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    pets = relationship("Pet", back_populates="owner")
    appointments = relationship(
        "Appointment", back_populates="user", foreign_keys="Appointment.user_id"
    )
    orders = relationship("Order", back_populates="user", foreign_keys="Order.user_id")

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


class Pet(Base):
    __tablename__ = "pets"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    species = Column(String(50), nullable=True)
    breed = Column(String(100), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    owner = relationship("User", back_populates="pets")
    appointments = relationship("Appointment", back_populates="pet")


class Cage(Base):
    """Physical boarding unit"""

    __tablename__ = "cages"

    id = Column(Integer, primary_key=True, index=True)
    # Unique among active cages only, enforced in CageService
    cage_number = Column(String(50), nullable=False, index=True)
    cage_type = Column(String(50), nullable=False)
    size_category = Column(enum_column(CageSize), default=CageSize.MEDIUM, nullable=False)
    capacity = Column(Integer, default=1, nullable=False)
    daily_rate = Column(Float, nullable=False)
    amenities = Column(JSON, default=list, nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String(100), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    appointments = relationship("Appointment", back_populates="cage")


class Appointment(Base):
    """Client appointment; rows with a cage_id are boarding reservations"""

    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    pet_id = Column(Integer, ForeignKey("pets.id"), nullable=False)
    service_name = Column(String(100), nullable=False)
    appointment_date = Column(Date, nullable=False)
    appointment_time = Column(Time, nullable=True)

    # Boarding
    cage_id = Column(Integer, ForeignKey("cages.id"), nullable=True, index=True)
    check_in_date = Column(Date, nullable=True)
    check_out_date = Column(Date, nullable=True)  # Exclusive: the cage is free again on this day
    boarding_days = Column(Integer, nullable=True)
    cage_rate = Column(Float, nullable=True)  # Daily rate at booking time
    boarding_instructions = Column(Text, nullable=True)

    total_amount = Column(Float, nullable=True)
    payment_method = Column(String(50), nullable=True)
    receipt_url = Column(String(500), nullable=True)
    receipt_verified = Column(Boolean, default=False, nullable=False)
    receipt_verified_at = Column(DateTime, nullable=True)
    receipt_verified_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(
        enum_column(AppointmentStatus),
        default=AppointmentStatus.PENDING,
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="appointments", foreign_keys=[user_id])
    pet = relationship("Pet", back_populates="appointments")
    cage = relationship("Cage", back_populates="appointments")

    @property
    def is_boarding(self) -> bool:
        return self.cage_id is not None

    @property
    def requires_receipt(self) -> bool:
        """No payment method means payment at the clinic"""
        return bool(self.payment_method) and payment_requires_receipt(self.payment_method)


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    price = Column(Float, nullable=False)
    stock_quantity = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    payment_method = Column(String(50), nullable=False)
    receipt_url = Column(String(500), nullable=True)
    receipt_verified = Column(Boolean, default=False, nullable=False)
    receipt_verified_at = Column(DateTime, nullable=True)
    receipt_verified_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    subtotal = Column(Float, default=0, nullable=False)
    total_amount = Column(Float, default=0, nullable=False)
    shipping_address = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(
        enum_column(OrderStatus), default=OrderStatus.PENDING, nullable=False, index=True
    )
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="orders", foreign_keys=[user_id])
    items = relationship(
        "OrderItem", back_populates="order", cascade="all, delete-orphan", order_by="OrderItem.id"
    )

    @property
    def order_number(self) -> str:
        return f"ORD-{self.id:04d}"

    @property
    def requires_receipt(self) -> bool:
        """Non-cash payments need a verified receipt before the order moves on"""
        return payment_requires_receipt(self.payment_method)


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=True)
    quantity = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)  # Unit price at checkout time

    order = relationship("Order", back_populates="items")
    product = relationship("Product")

    @property
    def product_name(self) -> str:
        return self.product.name if self.product else "Unknown Product"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String(50), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    related_id = Column(Integer, nullable=True)
    related_type = Column(String(50), nullable=True)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
