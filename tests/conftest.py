"""
Shared fixtures: an in-memory database per test, a TestClient wired to it,
and small factories for the rows the tests need.
"""

import itertools
import os
from datetime import date

# Keep the module-level engine off the filesystem
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("DB_LOG_SLOW_QUERIES", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from vetcare.database import Base, get_db
from vetcare.main import app
from vetcare.models import (
    Appointment,
    AppointmentStatus,
    Cage,
    CageSize,
    Order,
    OrderItem,
    OrderStatus,
    Pet,
    Product,
    User,
    UserRole,
)


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def login(client):
    """Set the cookies the frontend holds after login"""

    def _login(user: User) -> TestClient:
        client.cookies.set("user_id", str(user.id))
        client.cookies.set("user_role", user.role.value)
        return client

    return _login


def _save(db, obj):
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


# ----------------------------------------------------------------------------
# Factories
# ----------------------------------------------------------------------------


@pytest.fixture
def make_user(db):
    counter = itertools.count(1)

    def _make(role=UserRole.CLIENT, **kwargs):
        n = next(counter)
        kwargs.setdefault("first_name", f"User{n}")
        kwargs.setdefault("last_name", "Tester")
        kwargs.setdefault("email", f"user{n}@example.com")
        return _save(db, User(role=role, **kwargs))

    return _make


@pytest.fixture
def client_user(make_user):
    return make_user(UserRole.CLIENT, first_name="Maria", last_name="Santos", phone="0917-555-0101")


@pytest.fixture
def staff_user(make_user):
    return make_user(UserRole.EMPLOYEE, first_name="Eli")


@pytest.fixture
def admin_user(make_user):
    return make_user(UserRole.ADMIN, first_name="Ada")


@pytest.fixture
def make_pet(db):
    def _make(owner, **kwargs):
        kwargs.setdefault("name", "Bantay")
        kwargs.setdefault("species", "dog")
        kwargs.setdefault("breed", "Aspin")
        return _save(db, Pet(user_id=owner.id, **kwargs))

    return _make


@pytest.fixture
def pet(make_pet, client_user):
    return make_pet(client_user)


@pytest.fixture
def make_cage(db):
    counter = itertools.count(1)

    def _make(**kwargs):
        n = next(counter)
        kwargs.setdefault("cage_number", f"C{n:03d}")
        kwargs.setdefault("cage_type", "standard")
        kwargs.setdefault("size_category", CageSize.MEDIUM)
        kwargs.setdefault("capacity", 1)
        kwargs.setdefault("daily_rate", 500.0)
        kwargs.setdefault("amenities", [])
        kwargs.setdefault("is_active", True)
        return _save(db, Cage(**kwargs))

    return _make


@pytest.fixture
def make_reservation(db):
    """Insert a boarding appointment directly, bypassing booking checks"""

    def _make(cage, pet, check_in: date, check_out: date, status=AppointmentStatus.CONFIRMED, **kwargs):
        kwargs.setdefault("service_name", "Boarding")
        kwargs.setdefault("appointment_date", check_in)
        days = (check_out - check_in).days
        return _save(
            db,
            Appointment(
                user_id=pet.user_id,
                pet_id=pet.id,
                cage_id=cage.id,
                check_in_date=check_in,
                check_out_date=check_out,
                boarding_days=days,
                cage_rate=cage.daily_rate,
                total_amount=cage.daily_rate * days,
                status=status,
                **kwargs,
            ),
        )

    return _make


@pytest.fixture
def make_product(db):
    def _make(**kwargs):
        kwargs.setdefault("name", "Dog Food 5kg")
        kwargs.setdefault("price", 250.0)
        kwargs.setdefault("stock_quantity", 10)
        kwargs.setdefault("is_active", True)
        return _save(db, Product(**kwargs))

    return _make


@pytest.fixture
def make_order(db, make_product):
    def _make(user, payment_method="gcash", status=OrderStatus.PENDING, quantity=1, **kwargs):
        product = kwargs.pop("product", None) or make_product()
        kwargs.setdefault("receipt_url", "/uploads/receipts/receipt.png")
        kwargs.setdefault("receipt_verified", False)
        order = Order(
            user_id=user.id,
            payment_method=payment_method,
            status=status,
            subtotal=product.price * quantity,
            total_amount=product.price * quantity,
            **kwargs,
        )
        order.items.append(OrderItem(product_id=product.id, quantity=quantity, price=product.price))
        return _save(db, order)

    return _make
