"""
Tests for RoutingService: kitchen/bar split, estimated times, idempotency.
"""

import pytest

from pos_api.models import BarOrder, KitchenOrder, Order, Table
from pos_api.services.domain import OrderService, RoutingService
from shared.utils.exceptions import ErrorCode, InvalidStateError, OrderNotFoundError


@pytest.fixture
def draft_factory(db_session, seed_business_unit, caller, make_order_input):
    """Create a draft order from (menu_item, quantity) pairs."""

    def _create(*lines, **overrides):
        order, _ = OrderService(db_session).create_order(
            seed_business_unit.id, make_order_input(*lines, **overrides), caller, is_draft=True
        )
        return order

    return _create


class TestRoutingSplit:
    """Items go to the kitchen or the bar by menu item type."""

    def test_two_food_one_drink(
        self, db_session, seed_business_unit, draft_factory, menu_item_a, menu_item_b,
        food_without_prep_time,
    ):
        order = draft_factory((menu_item_a, 2), (food_without_prep_time, 1), (menu_item_b, 1))

        routing = RoutingService(db_session).send_order(seed_business_unit.id, order.id)

        assert len(routing.kitchen_order.items) == 2
        assert len(routing.bar_order.items) == 1
        assert db_session.query(KitchenOrder).count() == 1
        assert db_session.query(BarOrder).count() == 1

    def test_food_only_creates_no_bar_order(
        self, db_session, seed_business_unit, draft_factory, menu_item_a
    ):
        order = draft_factory((menu_item_a, 3))

        routing = RoutingService(db_session).send_order(seed_business_unit.id, order.id)

        assert routing.bar_order is None
        assert db_session.query(BarOrder).count() == 0
        assert db_session.query(KitchenOrder).count() == 1

    def test_drink_only_creates_no_kitchen_order(
        self, db_session, seed_business_unit, draft_factory, menu_item_b
    ):
        order = draft_factory((menu_item_b, 1))

        routing = RoutingService(db_session).send_order(seed_business_unit.id, order.id)

        assert routing.kitchen_order is None
        assert db_session.query(KitchenOrder).count() == 0

    def test_snapshot_is_denormalized(
        self, db_session, seed_business_unit, seed_waiter, seed_table, draft_factory, menu_item_a
    ):
        order = draft_factory((menu_item_a, 2), notes="Birthday table")

        routing = RoutingService(db_session).send_order(seed_business_unit.id, order.id)
        kitchen = routing.kitchen_order

        assert kitchen.station == "KITCHEN"
        assert kitchen.order_number == "REST01-10001"
        assert kitchen.table_number == 5
        assert kitchen.waiter_name == seed_waiter.name
        assert kitchen.status == "PENDING"
        assert kitchen.priority == "NORMAL"
        assert kitchen.notes == "Birthday table"
        assert kitchen.is_addition is False
        assert kitchen.items[0].name == "Adobo"
        assert kitchen.items[0].quantity == 2
        assert kitchen.items[0].prep_time == 10


class TestEstimatedTime:
    """estimated_time is the longest prep time of the sub-order."""

    def test_max_prep_time(
        self, db_session, seed_business_unit, draft_factory, menu_item_a, menu_item_b
    ):
        order = draft_factory((menu_item_a, 1), (menu_item_b, 1))

        routing = RoutingService(db_session).send_order(seed_business_unit.id, order.id)

        assert routing.kitchen_order.estimated_time == 10
        assert routing.bar_order.estimated_time == 3

    def test_defaults_when_prep_time_unset(
        self, db_session, seed_business_unit, draft_factory, food_without_prep_time,
        drink_without_prep_time,
    ):
        order = draft_factory((food_without_prep_time, 1), (drink_without_prep_time, 1))

        routing = RoutingService(db_session).send_order(seed_business_unit.id, order.id)

        assert routing.kitchen_order.estimated_time == 15
        assert routing.bar_order.estimated_time == 5

    def test_default_counts_towards_max(
        self, db_session, seed_business_unit, draft_factory, menu_item_a, food_without_prep_time
    ):
        """An unset prep time (15) outweighs a set one (10)."""
        order = draft_factory((menu_item_a, 1), (food_without_prep_time, 1))

        routing = RoutingService(db_session).send_order(seed_business_unit.id, order.id)

        assert routing.kitchen_order.estimated_time == 15

    def test_configurable_defaults(
        self, db_session, seed_business_unit, draft_factory, food_without_prep_time
    ):
        order = draft_factory((food_without_prep_time, 1))

        routing = RoutingService(db_session, food_prep_minutes=25).send_order(
            seed_business_unit.id, order.id
        )

        assert routing.kitchen_order.estimated_time == 25


class TestSendOrder:
    """State transition and guards."""

    def test_send_confirms_order_and_occupies_table(
        self, db_session, seed_business_unit, seed_table, draft_factory, menu_item_a
    ):
        order = draft_factory((menu_item_a, 1))
        service = RoutingService(db_session)

        service.send_order(seed_business_unit.id, order.id)

        reloaded = OrderService(db_session).get_order(seed_business_unit.id, order.id)
        assert reloaded.status == "CONFIRMED"
        assert {item.status for item in reloaded.items} == {"CONFIRMED"}
        assert db_session.get(Table, seed_table.id).status == "OCCUPIED"

    def test_second_send_creates_nothing(
        self, db_session, seed_business_unit, draft_factory, menu_item_a, menu_item_b
    ):
        order = draft_factory((menu_item_a, 1), (menu_item_b, 1))
        service = RoutingService(db_session)

        first = service.send_order(seed_business_unit.id, order.id)
        second = service.send_order(seed_business_unit.id, order.id)

        assert first.already_routed is False
        assert second.already_routed is True
        assert second.kitchen_order.id == first.kitchen_order.id
        assert second.bar_order.id == first.bar_order.id
        assert db_session.query(KitchenOrder).count() == 1
        assert db_session.query(BarOrder).count() == 1

    def test_created_and_sent_order_is_not_routed_twice(
        self, db_session, seed_business_unit, caller, make_order_input, menu_item_a
    ):
        order, _ = OrderService(db_session).create_order(
            seed_business_unit.id, make_order_input((menu_item_a, 1)), caller, is_draft=False
        )

        routing = RoutingService(db_session).send_order(seed_business_unit.id, order.id)

        assert routing.already_routed is True
        assert db_session.query(KitchenOrder).count() == 1

    def test_cancelled_draft_cannot_be_sent(
        self, db_session, seed_business_unit, caller, draft_factory, menu_item_a
    ):
        order = draft_factory((menu_item_a, 1))
        OrderService(db_session).cancel_order(seed_business_unit.id, order.id, caller)

        with pytest.raises(InvalidStateError):
            RoutingService(db_session).send_order(seed_business_unit.id, order.id)

        assert db_session.query(KitchenOrder).count() == 0

    def test_cancelled_order_is_not_resent(
        self, db_session, seed_business_unit, caller, make_order_input, menu_item_a
    ):
        """A routed order that was cancelled afterwards is refused, not reported as sent."""
        service = OrderService(db_session)
        order, _ = service.create_order(
            seed_business_unit.id, make_order_input((menu_item_a, 1)), caller, is_draft=False
        )
        service.cancel_order(seed_business_unit.id, order.id, caller)

        with pytest.raises(InvalidStateError) as exc_info:
            RoutingService(db_session).send_order(seed_business_unit.id, order.id)

        assert exc_info.value.code == ErrorCode.ORDER_NOT_MODIFIABLE
        assert db_session.get(Order, order.id).status == "CANCELLED"
        assert db_session.query(KitchenOrder).count() == 1

    def test_completed_order_is_not_resent(
        self, db_session, seed_business_unit, caller, make_order_input, menu_item_a
    ):
        order, _ = OrderService(db_session).create_order(
            seed_business_unit.id, make_order_input((menu_item_a, 1)), caller, is_draft=False
        )
        order.status = "COMPLETED"
        db_session.commit()

        with pytest.raises(InvalidStateError):
            RoutingService(db_session).send_order(seed_business_unit.id, order.id)

    def test_missing_order(self, db_session, seed_business_unit):
        with pytest.raises(OrderNotFoundError):
            RoutingService(db_session).send_order(seed_business_unit.id, "missing")
