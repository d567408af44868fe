"""
Pytest configuration and fixtures for the order subsystem tests.
"""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from pos_api.main import app
from pos_api.models import Base, BusinessUnit, Customer, MenuItem, Table, User
from shared.infrastructure.db import get_db
from shared.utils.schemas import CallerIdentity, CreateOrderInput, OrderItemInput


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database session override.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# Seed data: business unit REST01, waiter, table #5, menu items A (food) and B (drink)
# =============================================================================


@pytest.fixture
def seed_business_unit(db_session):
    unit = BusinessUnit(code="REST01", name="Test Restaurant", currency="PHP")
    db_session.add(unit)
    db_session.commit()
    return unit


@pytest.fixture
def other_business_unit(db_session):
    """A second unit, for scoping checks."""
    unit = BusinessUnit(code="REST02", name="Other Restaurant", currency="PHP")
    db_session.add(unit)
    db_session.commit()
    return unit


@pytest.fixture
def seed_waiter(db_session, seed_business_unit):
    user = User(
        username="waiter1",
        name="Wendy Waiter",
        email="waiter@test.com",
        business_unit_id=seed_business_unit.id,
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def other_waiter(db_session, seed_business_unit):
    user = User(
        username="waiter2",
        name="Walter Waiter",
        business_unit_id=seed_business_unit.id,
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def caller(seed_waiter):
    return CallerIdentity(user_id=seed_waiter.id, name=seed_waiter.name)


@pytest.fixture
def seed_table(db_session, seed_business_unit):
    table = Table(
        business_unit_id=seed_business_unit.id,
        number=5,
        capacity=4,
        location="Main",
        status="AVAILABLE",
    )
    db_session.add(table)
    db_session.commit()
    return table


@pytest.fixture
def inactive_table(db_session, seed_business_unit):
    table = Table(
        business_unit_id=seed_business_unit.id,
        number=9,
        capacity=2,
        status="AVAILABLE",
        is_active=False,
    )
    db_session.add(table)
    db_session.commit()
    return table


def _menu_item(db_session, business_unit, name, price, item_type, prep_time, **kwargs):
    item = MenuItem(
        business_unit_id=business_unit.id,
        name=name,
        price=Decimal(price),
        type=item_type,
        prep_time=prep_time,
        **kwargs,
    )
    db_session.add(item)
    db_session.commit()
    return item


@pytest.fixture
def menu_item_a(db_session, seed_business_unit):
    """Food, price 100, prep time 10."""
    return _menu_item(db_session, seed_business_unit, "Adobo", "100.00", "FOOD", 10)


@pytest.fixture
def menu_item_b(db_session, seed_business_unit):
    """Drink, price 50, prep time 3."""
    return _menu_item(db_session, seed_business_unit, "Calamansi Juice", "50.00", "DRINK", 3)


@pytest.fixture
def food_without_prep_time(db_session, seed_business_unit):
    return _menu_item(db_session, seed_business_unit, "Pancit", "80.00", "FOOD", None)


@pytest.fixture
def drink_without_prep_time(db_session, seed_business_unit):
    return _menu_item(db_session, seed_business_unit, "Iced Tea", "35.50", "DRINK", None)


@pytest.fixture
def unavailable_item(db_session, seed_business_unit):
    return _menu_item(
        db_session, seed_business_unit, "Lechon", "500.00", "FOOD", 45, is_available=False
    )


@pytest.fixture
def foreign_item(db_session, other_business_unit):
    """Available, but owned by another business unit."""
    return _menu_item(db_session, other_business_unit, "Sinigang", "120.00", "FOOD", 20)


@pytest.fixture
def seed_customer(db_session, seed_business_unit):
    customer = Customer(
        business_unit_id=seed_business_unit.id,
        customer_number="C-0001",
        first_name="Maria",
        last_name="Santos",
        email="maria@test.com",
    )
    db_session.add(customer)
    db_session.commit()
    return customer


@pytest.fixture
def make_order_input(seed_table):
    """Build a CreateOrderInput for table #5 from (menu_item, quantity) pairs."""

    def _make(*lines, **overrides):
        data = {
            "table_id": seed_table.id,
            "items": [
                OrderItemInput(menu_item_id=item.id, quantity=quantity)
                for item, quantity in lines
            ],
        }
        data.update(overrides)
        return CreateOrderInput(**data)

    return _make
