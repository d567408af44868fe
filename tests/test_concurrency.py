"""
Concurrent order creation against one business unit.

Uses a file-backed SQLite database so every worker thread has its own
connection and the unique constraint arbitrates between them.
"""

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from pos_api.models import Base, BusinessUnit, MenuItem, Order, Table, User
from pos_api.services.actions import OrderActions
from shared.utils.schemas import CallerIdentity, CreateOrderInput, OrderItemInput

CREATIONS = 50
WORKERS = 8
EXHAUSTED = "Failed to generate unique order number after multiple attempts"


@pytest.fixture
def file_session_factory(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'orders.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    yield factory
    engine.dispose()


@pytest.fixture
def seeded(file_session_factory):
    with file_session_factory() as db:
        unit = BusinessUnit(code="REST01", name="Race Restaurant")
        db.add(unit)
        db.flush()
        waiter = User(username="racer", name="Race Waiter", business_unit_id=unit.id)
        table = Table(business_unit_id=unit.id, number=5, capacity=4)
        item = MenuItem(
            business_unit_id=unit.id, name="Adobo", price=Decimal("100.00"), type="FOOD"
        )
        db.add_all([waiter, table, item])
        db.commit()
        return {
            "business_unit_id": unit.id,
            "caller": CallerIdentity(user_id=waiter.id, name=waiter.name),
            "data": CreateOrderInput(
                table_id=table.id,
                items=[OrderItemInput(menu_item_id=item.id, quantity=1)],
            ),
        }


class TestConcurrentCreation:
    def test_order_numbers_stay_unique(self, file_session_factory, seeded):
        """
        Property: racing creations never share an order number; the only
        permitted failure is retry exhaustion.
        """

        def create(_):
            with file_session_factory() as db:
                result = OrderActions(db).create_order(
                    seeded["business_unit_id"], seeded["data"], seeded["caller"], is_draft=True
                )
                return result.order.order_number if result.success else result.error

        with ThreadPoolExecutor(max_workers=WORKERS) as pool:
            outcomes = list(pool.map(create, range(CREATIONS)))

        numbers = [o for o in outcomes if o.startswith("REST01-")]
        failures = [o for o in outcomes if not o.startswith("REST01-")]

        assert len(numbers) + len(failures) == CREATIONS
        assert len(numbers) == len(set(numbers))
        assert numbers
        assert set(failures) <= {EXHAUSTED}

        with file_session_factory() as db:
            stored = [row.order_number for row in db.query(Order).all()]
        assert sorted(stored) == sorted(numbers)
